"""Filter option lists for the report dashboard."""

from __future__ import annotations

from typing import Any

from envreports.models.report import AcceptanceStatus, HumanScan
from envreports.repositories.base import ReportRepository, ReportStoreError
from envreports.services.query_engine import QueryFailedError

ACCEPTANCE_STATUS_LABELS = {
    AcceptanceStatus.NOT_ACCEPTED: "Not Accepted",
    AcceptanceStatus.PARTIALLY_ACCEPTED: "Partially Accepted",
    AcceptanceStatus.ACCEPTED: "Accepted",
}

HUMAN_SCAN_LABELS = {
    HumanScan.NOT_SCANNED: "Not Scanned by Human",
    HumanScan.SCANNED: "Scanned by Human",
}


def get_reports_metadata(repository: ReportRepository) -> dict[str, Any]:
    """Known countries and sectors plus the fixed status and scan options."""
    try:
        countries = repository.distinct_values("country")
        sectors = repository.distinct_values("sector")
    except ReportStoreError as exc:
        raise QueryFailedError() from exc
    return {
        "countries": countries,
        "sectors": sectors,
        "statuses": [{"value": int(k), "label": v} for k, v in ACCEPTANCE_STATUS_LABELS.items()],
        "human_scanned_options": [{"value": int(k), "label": v} for k, v in HUMAN_SCAN_LABELS.items()],
    }
