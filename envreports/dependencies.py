"""Shared dependencies for API routers."""

from __future__ import annotations

from fastapi import Request

from envreports.repositories.base import ReportRepository


def get_repository(request: Request) -> ReportRepository:
    """Return the report store attached to the running application."""
    return request.app.state.repository
