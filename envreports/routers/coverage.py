"""GPC coverage scanner endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from envreports.dependencies import get_repository
from envreports.repositories.base import ReportRepository
from envreports.schemas.coverage import (
    CatalogEntry,
    CatalogResponse,
    CoverageScanResponse,
    MissingByPriority,
    PriorityBreakdown,
)
from envreports.services.coverage_scanner import (
    ScanFailedError,
    benchmarking_recommendation,
    scan_country_coverage,
)
from envreports.services.gpc_catalog import DEFAULT_CATALOG

router = APIRouter(prefix="/api/coverage", tags=["coverage"])


@router.get("", response_model=CoverageScanResponse)
def scan_coverage(
    country: str = Query(..., min_length=1, description="Exact country name to scan"),
    repository: ReportRepository = Depends(get_repository),
) -> CoverageScanResponse:
    """Scan a country's reports for GPC catalog coverage, prioritising the gaps."""
    if not country.strip():
        raise HTTPException(status_code=422, detail="country must not be blank")

    try:
        scan = scan_country_coverage(repository, country, DEFAULT_CATALOG)
    except ScanFailedError:
        raise HTTPException(status_code=500, detail="Scan failed")

    missing = scan["missing_gpc_numbers"]
    grouped = DEFAULT_CATALOG.group_by_priority(missing)

    return CoverageScanResponse(
        country=scan["country"],
        total_reports=scan["total_reports"],
        covered_gpc_numbers=scan["covered_gpc_numbers"],
        missing_gpc_numbers=missing,
        coverage_percentage=scan["coverage_percentage"],
        missing_by_priority=MissingByPriority(**{tier.value: codes for tier, codes in grouped.items()}),
        priority_breakdown=PriorityBreakdown(**DEFAULT_CATALOG.priority_stats(missing)),
        recommendation=benchmarking_recommendation(grouped),
    )


@router.get("/catalog", response_model=CatalogResponse)
def get_catalog() -> CatalogResponse:
    """List the GPC reference catalog with priority tiers."""
    entries = [
        CatalogEntry(code=code, priority=DEFAULT_CATALOG.priority_of(code).value)
        for code in DEFAULT_CATALOG.codes
    ]
    return CatalogResponse(total=len(entries), entries=entries)
