"""Environmental report review service — FastAPI application factory."""

from __future__ import annotations

from fastapi import FastAPI

from envreports.config import Settings, get_settings
from envreports.middleware import (
    configure_cors,
    configure_rate_limiting,
    configure_request_logging,
    lifespan,
)
from envreports.repositories import build_repository
from envreports.repositories.base import ReportRepository
from envreports.routers import coverage, health, reports


def create_app(
    settings: Settings | None = None,
    repository: ReportRepository | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    if settings is None:
        settings = get_settings()
    if repository is None:
        repository = build_repository(settings)

    app = FastAPI(
        title=settings.app_name,
        description="Browse, filter and review environmental reports; scan GPC coverage gaps",
        version=settings.app_version,
        lifespan=lifespan,
    )

    # Store settings and the report store on app state
    app.state.settings = settings
    app.state.repository = repository

    # Middleware
    configure_cors(app, settings)
    configure_rate_limiting(app, settings)
    configure_request_logging(app)

    # Routers
    app.include_router(health.router)
    app.include_router(reports.router)
    app.include_router(coverage.router)

    return app
