"""Report query engine — filtered, sorted, paginated reads with aggregates."""

from __future__ import annotations

from typing import Any

import structlog

from envreports.models.report import AcceptanceStatus, HumanScan
from envreports.repositories.base import (
    PageWindow,
    ReportFilter,
    ReportRepository,
    ReportStoreError,
    SortClause,
    SortField,
    SortOrder,
)

logger = structlog.get_logger()

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100


class QueryFailedError(Exception):
    """Raised when the report store fails while serving a query."""

    def __init__(self, message: str = "query failed") -> None:
        super().__init__(message)


def resolve_sort_field(sort_by: str | SortField | None) -> SortField:
    """Map a caller-supplied sort key onto a supported column.

    Unknown keys degrade to ordering by ``id`` rather than failing.
    """
    if isinstance(sort_by, SortField):
        return sort_by
    try:
        return SortField(sort_by)
    except ValueError:
        logger.warning("sort_field_fallback", requested=sort_by, fallback=SortField.ID.value)
        return SortField.ID


def resolve_sort_order(sort_order: str | SortOrder | None) -> SortOrder:
    if isinstance(sort_order, SortOrder):
        return sort_order
    if isinstance(sort_order, str) and sort_order.lower() == SortOrder.ASC.value:
        return SortOrder.ASC
    return SortOrder.DESC


def normalize_report(record: dict[str, Any]) -> dict[str, Any]:
    """Coerce stored flag representations to their integer enums."""
    normalized = dict(record)
    normalized["acceptance_status"] = int(AcceptanceStatus.coerce(record.get("acceptance_status")))
    normalized["human_scanned"] = int(HumanScan.coerce(record.get("human_scanned")))
    if normalized.get("reference_tags") is None:
        normalized["reference_tags"] = ""
    return normalized


def query_reports(
    repository: ReportRepository,
    report_filter: ReportFilter | None = None,
    sort_by: str | SortField | None = SortField.CREATED_AT,
    sort_order: str | SortOrder | None = SortOrder.DESC,
    page: int = DEFAULT_PAGE,
    limit: int = DEFAULT_LIMIT,
) -> dict[str, Any]:
    """Return one page of matching reports with pagination and aggregate stats.

    Args:
        repository: The report store to read from.
        report_filter: Equality constraints; ``None`` matches everything.
        sort_by: Column name. Unrecognised names fall back to ``id``.
        sort_order: ``"asc"`` or ``"desc"``.
        page: One-based page number.
        limit: Page size, between 1 and 100.

    Returns:
        Dict with ``data``, ``pagination`` and ``aggregates`` keys.

    Raises:
        ValueError: If ``page`` or ``limit`` is out of range.
        QueryFailedError: If the store fails; no partial result is returned.
    """
    if page < 1:
        raise ValueError("page must be >= 1")
    if not 1 <= limit <= MAX_LIMIT:
        raise ValueError(f"limit must be between 1 and {MAX_LIMIT}")

    report_filter = report_filter or ReportFilter()
    sort = SortClause(field=resolve_sort_field(sort_by), order=resolve_sort_order(sort_order))
    window = PageWindow(page=page, limit=limit)

    try:
        rows, total = repository.fetch_page(report_filter, sort, window)
        aggregates = repository.fetch_aggregates(report_filter)
    except ReportStoreError as exc:
        logger.error("report_query_failed", error=str(exc))
        raise QueryFailedError() from exc

    data = []
    for row in rows:
        if row.get("id") is None:
            logger.warning("report_without_id_skipped", name=row.get("name"))
            continue
        data.append(normalize_report(row))

    logger.info(
        "reports_queried",
        page=page,
        limit=limit,
        sort_by=sort.field.value,
        sort_order=sort.order.value,
        returned=len(data),
        total=total,
    )

    return {
        "data": data,
        "pagination": {
            "page": page,
            "limit": limit,
            "total": total,
            "total_pages": window.total_pages(total),
        },
        "aggregates": {
            "accepted_count": aggregates.accepted_count or 0,
            "human_scanned_count": aggregates.human_scanned_count or 0,
            "total_count": aggregates.total_count or 0,
        },
    }
