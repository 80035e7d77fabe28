"""Database models for the environmental report service."""

from envreports.models.base import Base, TimestampMixin, utcnow
from envreports.models.report import AcceptanceStatus, HumanScan, Report

__all__ = [
    "Base",
    "TimestampMixin",
    "utcnow",
    "AcceptanceStatus",
    "HumanScan",
    "Report",
]
