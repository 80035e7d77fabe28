"""Report stores behind a common repository interface."""

from __future__ import annotations

from envreports.config import Settings
from envreports.repositories.base import (
    PageWindow,
    ReportAggregates,
    ReportFilter,
    ReportRepository,
    ReportStoreError,
    SortClause,
    SortField,
    SortOrder,
)
from envreports.repositories.memory import InMemoryReportRepository
from envreports.repositories.sql import SqlReportRepository
from envreports.repositories.supabase import SupabaseReportRepository


def build_repository(settings: Settings) -> ReportRepository:
    """Create the report store selected by ``settings.report_store``."""
    if settings.report_store == "memory":
        return InMemoryReportRepository()
    if settings.report_store == "supabase":
        return SupabaseReportRepository(
            base_url=settings.supabase_url,
            api_key=settings.supabase_key,
            table=settings.supabase_table,
            timeout=settings.supabase_timeout,
        )
    return SqlReportRepository.from_url(settings.database_url, echo=settings.database_echo)


__all__ = [
    "build_repository",
    "InMemoryReportRepository",
    "PageWindow",
    "ReportAggregates",
    "ReportFilter",
    "ReportRepository",
    "ReportStoreError",
    "SortClause",
    "SortField",
    "SortOrder",
    "SqlReportRepository",
    "SupabaseReportRepository",
]
