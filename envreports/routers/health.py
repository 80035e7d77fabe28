"""Health check endpoints for production monitoring."""

from __future__ import annotations

import time

from fastapi import APIRouter, Request

from envreports.schemas.health import HealthResponse, ServiceHealth

router = APIRouter(tags=["health"])


def _check_service(name: str, check_fn) -> ServiceHealth:
    """Run a health check function and return a ServiceHealth result."""
    start = time.monotonic()
    try:
        check_fn()
        latency = (time.monotonic() - start) * 1000
        return ServiceHealth(
            service=name,
            status="healthy",
            latency_ms=round(latency, 2),
        )
    except Exception as exc:
        latency = (time.monotonic() - start) * 1000
        return ServiceHealth(
            service=name,
            status="unhealthy",
            latency_ms=round(latency, 2),
            details=type(exc).__name__,
        )


def _response(request: Request, services: list[ServiceHealth], failed_status: str) -> HealthResponse:
    settings = request.app.state.settings
    overall = "healthy" if all(s.status == "healthy" for s in services) else failed_status
    return HealthResponse(
        status=overall,
        version=settings.app_version,
        environment=settings.environment,
        report_store=settings.report_store,
        services=services,
    )


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """Basic health check: is the application serving requests?"""
    return _response(request, [], "degraded")


@router.get("/health/ready", response_model=HealthResponse)
def readiness_check(request: Request) -> HealthResponse:
    """Readiness check: can the report store answer a query?"""
    services = [_check_service("report_store", request.app.state.repository.ping)]
    return _response(request, services, "unhealthy")


@router.get("/health/live")
async def liveness_check() -> dict[str, str]:
    """Liveness probe: is the process alive?"""
    return {"status": "alive"}
