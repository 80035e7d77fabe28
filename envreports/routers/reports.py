"""Report listing, metadata and review endpoints."""

from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Path, Query

from envreports.dependencies import get_repository
from envreports.repositories.base import ReportFilter, ReportRepository
from envreports.schemas.report import (
    ReportResponse,
    ReportsMetadataResponse,
    ReportsPageResponse,
    ReportsQuery,
    ReportUpdateRequest,
    ReviewUpdateRequest,
)
from envreports.services.metadata import get_reports_metadata
from envreports.services.query_engine import QueryFailedError, query_reports
from envreports.services.review import (
    ReportNotFoundError,
    ReportUpdateFailedError,
    get_report,
    update_report,
    update_review,
)

router = APIRouter(prefix="/api/reports", tags=["reports"])


def run_reports_query(repository: ReportRepository, query: ReportsQuery) -> dict:
    """Execute a validated list query against ``repository``."""
    report_filter = ReportFilter(
        country=query.country,
        sector=query.sector,
        acceptance_status=query.status,
        human_scanned=query.human_scanned,
    )
    return query_reports(
        repository,
        report_filter,
        sort_by=query.sort_by,
        sort_order=query.sort_order,
        page=query.page,
        limit=query.limit,
    )


@router.get("", response_model=ReportsPageResponse)
def list_reports(
    country: str | None = Query(None, description="Exact country match"),
    sector: str | None = Query(None, description="Exact sector match"),
    status: int | None = Query(None, ge=0, le=2, description="0 not accepted, 1 partial, 2 accepted"),
    human_scanned: int | None = Query(None, ge=0, le=1, alias="humanScanned"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    sort_by: Literal["name", "country", "created_at"] = Query("created_at", alias="sortBy"),
    sort_order: Literal["asc", "desc"] = Query("desc", alias="sortOrder"),
    repository: ReportRepository = Depends(get_repository),
) -> dict:
    """List reports with filtering, sorting, pagination and aggregate stats."""
    query = ReportsQuery(
        country=country,
        sector=sector,
        status=status,
        human_scanned=human_scanned,
        page=page,
        limit=limit,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    try:
        return run_reports_query(repository, query)
    except QueryFailedError:
        raise HTTPException(status_code=500, detail="Query failed")


@router.get("/metadata", response_model=ReportsMetadataResponse)
def reports_metadata(repository: ReportRepository = Depends(get_repository)) -> dict:
    """Known countries and sectors plus the fixed status options."""
    try:
        return get_reports_metadata(repository)
    except QueryFailedError:
        raise HTTPException(status_code=500, detail="Query failed")


@router.get("/{report_id}", response_model=ReportResponse)
def read_report(
    report_id: int = Path(..., gt=0),
    repository: ReportRepository = Depends(get_repository),
) -> dict:
    """Get a single report."""
    try:
        return get_report(repository, report_id)
    except ReportNotFoundError:
        raise HTTPException(status_code=404, detail="Report not found")
    except ReportUpdateFailedError:
        raise HTTPException(status_code=500, detail="Query failed")


@router.post("/{report_id}/review", response_model=ReportResponse)
def review_report(
    request: ReviewUpdateRequest,
    report_id: int = Path(..., gt=0),
    repository: ReportRepository = Depends(get_repository),
) -> dict:
    """Record acceptance status, comment, scan flag and GPC tags for a report."""
    try:
        return update_review(repository, report_id, request.model_dump(exclude_unset=True))
    except ReportNotFoundError:
        raise HTTPException(status_code=404, detail="Report not found")
    except ReportUpdateFailedError:
        raise HTTPException(status_code=500, detail="Failed to update report")


@router.put("/{report_id}", response_model=ReportResponse)
def edit_report(
    request: ReportUpdateRequest,
    report_id: int = Path(..., gt=0),
    repository: ReportRepository = Depends(get_repository),
) -> dict:
    """Update any editable field of a report."""
    try:
        return update_report(repository, report_id, request.model_dump(exclude_unset=True))
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except ReportNotFoundError:
        raise HTTPException(status_code=404, detail="Report not found")
    except ReportUpdateFailedError:
        raise HTTPException(status_code=500, detail="Failed to update report")
