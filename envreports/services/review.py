"""Review workflow — reading and updating single reports."""

from __future__ import annotations

from typing import Any

import structlog

from envreports.models.report import EDITABLE_FIELDS, REVIEW_FIELDS
from envreports.repositories.base import ReportRepository, ReportStoreError
from envreports.services.coverage_scanner import TAG_SEPARATOR
from envreports.services.query_engine import normalize_report

logger = structlog.get_logger()

TEXT_FIELDS = (
    "name",
    "country",
    "sector",
    "url",
    "method_of_access",
    "data_format",
    "description",
    "granularity",
    "country_locode",
)

# Non-null columns where an unknown value is stored blank
BLANK_WHEN_NULL = ("country", "sector")


class ReportNotFoundError(Exception):
    """Raised when no report has the requested id."""

    def __init__(self, report_id: int) -> None:
        self.report_id = report_id
        super().__init__(f"Report {report_id} not found")


class ReportUpdateFailedError(Exception):
    """Raised when the report store fails while reading or writing a report."""


def normalize_reference_tags(raw: str | None) -> str:
    """Canonicalise a tag string: trimmed, upper-cased, deduplicated, ``;``-joined."""
    if not raw:
        return ""
    seen: list[str] = []
    for token in raw.split(TAG_SEPARATOR):
        code = token.strip().upper()
        if code and code not in seen:
            seen.append(code)
    return TAG_SEPARATOR.join(seen)


def _clean_changes(changes: dict[str, Any], allowed: tuple[str, ...]) -> dict[str, Any]:
    cleaned: dict[str, Any] = {}
    for key, value in changes.items():
        if key not in allowed:
            continue
        if key == "reference_tags":
            value = normalize_reference_tags(value)
        elif key == "comment":
            value = value.strip() if isinstance(value, str) and value.strip() else None
        elif key in BLANK_WHEN_NULL and value is None:
            value = ""
        elif key in TEXT_FIELDS and isinstance(value, str):
            value = value.strip()
        elif key in ("acceptance_status", "human_scanned") and value is not None:
            value = int(value)
        cleaned[key] = value
    return cleaned


def get_report(repository: ReportRepository, report_id: int) -> dict[str, Any]:
    try:
        record = repository.get(report_id)
    except ReportStoreError as exc:
        raise ReportUpdateFailedError("Failed to fetch report") from exc
    if record is None:
        raise ReportNotFoundError(report_id)
    return normalize_report(record)


def _apply(repository: ReportRepository, report_id: int, changes: dict[str, Any], event: str) -> dict[str, Any]:
    try:
        updated = repository.update(report_id, changes)
    except ReportStoreError as exc:
        logger.error("report_update_failed", report_id=report_id, error=str(exc))
        raise ReportUpdateFailedError("Failed to update report") from exc
    if updated is None:
        raise ReportNotFoundError(report_id)
    logger.info(event, report_id=report_id, fields=sorted(changes))
    return normalize_report(updated)


def update_review(repository: ReportRepository, report_id: int, review: dict[str, Any]) -> dict[str, Any]:
    """Record a reviewer's disposition on a report.

    Only ``acceptance_status``, ``comment``, ``human_scanned`` and
    ``reference_tags`` are written; ``acceptance_status`` is required.
    """
    if review.get("acceptance_status") is None:
        raise ValueError("acceptance_status is required")
    changes = _clean_changes(review, REVIEW_FIELDS)
    # An omitted scan flag stays as stored
    if changes.get("human_scanned") is None:
        changes.pop("human_scanned", None)
    return _apply(repository, report_id, changes, "report_review_updated")


def update_report(repository: ReportRepository, report_id: int, updates: dict[str, Any]) -> dict[str, Any]:
    """Update any editable field of a report."""
    changes = _clean_changes(updates, EDITABLE_FIELDS)
    if "name" in changes and not changes["name"]:
        raise ValueError("name must not be empty")
    for key in ("acceptance_status", "human_scanned"):
        if key in changes and changes[key] is None:
            changes.pop(key)
    if not changes:
        return get_report(repository, report_id)
    return _apply(repository, report_id, changes, "report_updated")
