"""GPC coverage scanner — which catalog codes a country's reports cover."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable

import structlog

from envreports.repositories.base import ReportRepository, ReportStoreError
from envreports.services.gpc_catalog import DEFAULT_CATALOG, GPCCatalog, Priority

logger = structlog.get_logger()

TAG_SEPARATOR = ";"


class ScanFailedError(Exception):
    """Raised when the report store fails during a coverage scan."""

    def __init__(self, message: str = "scan failed") -> None:
        super().__init__(message)


def split_reference_tags(raw: str | None) -> list[str]:
    """Split a stored ``;``-joined tag string into trimmed, non-empty codes.

    Casing is left as stored.
    """
    if not raw:
        return []
    return [token.strip() for token in raw.split(TAG_SEPARATOR) if token.strip()]


def collect_covered_codes(tag_values: Iterable[str | None]) -> set[str]:
    covered: set[str] = set()
    for raw in tag_values:
        covered.update(split_reference_tags(raw))
    return covered


def coverage_percentage(covered: set[str], catalog: GPCCatalog) -> int:
    """Whole-number share of catalog codes present in ``covered``, rounded half up."""
    if not len(catalog):
        return 0
    in_catalog = sum(1 for code in catalog.codes if code in covered)
    ratio = Decimal(in_catalog) / Decimal(len(catalog)) * 100
    return int(ratio.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def scan_country_coverage(
    repository: ReportRepository,
    country: str,
    catalog: GPCCatalog = DEFAULT_CATALOG,
) -> dict[str, Any]:
    """Compare the codes tagged on a country's reports against the catalog.

    Args:
        repository: The report store to read from.
        country: Exact country name to scan.
        catalog: Reference codes and priorities to compare against.

    Returns:
        Dict with ``country``, ``total_reports``, ``covered_gpc_numbers``
        (sorted), ``missing_gpc_numbers`` (catalog order) and
        ``coverage_percentage``.

    Raises:
        ValueError: If ``country`` is empty.
        ScanFailedError: If the store fails; no partial coverage is returned.
    """
    if not country or not country.strip():
        raise ValueError("country must be a non-empty string")

    try:
        tag_values = repository.reference_tags_for_country(country)
    except ReportStoreError as exc:
        logger.error("coverage_scan_failed", country=country, error=str(exc))
        raise ScanFailedError() from exc

    covered = collect_covered_codes(tag_values)
    missing = [code for code in catalog.codes if code not in covered]
    unknown = sorted(code for code in covered if code not in catalog)
    if unknown:
        logger.info("coverage_unknown_codes", country=country, codes=unknown)

    result = {
        "country": country,
        "total_reports": len(tag_values),
        "covered_gpc_numbers": sorted(covered),
        "missing_gpc_numbers": missing,
        "coverage_percentage": coverage_percentage(covered, catalog),
    }
    logger.info(
        "coverage_scanned",
        country=country,
        total_reports=result["total_reports"],
        coverage_percentage=result["coverage_percentage"],
    )
    return result


def benchmarking_recommendation(missing_by_priority: dict[Priority, list[str]]) -> str:
    """Plain-English advice on which gaps to close first."""
    high_missing = len(missing_by_priority.get(Priority.HIGH, []))
    medium_missing = len(missing_by_priority.get(Priority.MEDIUM, []))
    if high_missing > 0:
        return (
            f"Focus on collecting {high_missing} high-priority GPC numbers first. "
            "These represent critical gaps in your environmental reporting coverage."
        )
    if medium_missing > 0:
        return (
            f"Great job on high-priority coverage! Consider addressing {medium_missing} "
            "medium-priority GPC numbers for more comprehensive reporting."
        )
    return (
        "Excellent coverage of high and medium priority GPC numbers! "
        "Your reporting coverage is well-positioned for benchmarking."
    )
