"""In-memory report store.

Provides a simple store used during development and testing.
In production, reports live in the SQL database or the hosted store.
"""

from __future__ import annotations

import copy
import threading
from typing import Any, Iterable

from envreports.models.base import utcnow
from envreports.models.report import AcceptanceStatus, HumanScan
from envreports.repositories.base import (
    DISTINCT_COLUMNS,
    PageWindow,
    ReportAggregates,
    ReportFilter,
    ReportRepository,
    SortClause,
    SortField,
)


def _nulls_first(value: Any) -> tuple[bool, Any]:
    return (value is not None, value)


class InMemoryReportRepository(ReportRepository):
    """Thread-safe list-of-dicts report store."""

    def __init__(self, records: Iterable[dict[str, Any]] = ()) -> None:
        self._lock = threading.Lock()
        self._records: list[dict[str, Any]] = [dict(r) for r in records]

    def _valid(self) -> list[dict[str, Any]]:
        return [r for r in self._records if r.get("id") is not None]

    def _matching(self, report_filter: ReportFilter) -> list[dict[str, Any]]:
        return [r for r in self._valid() if report_filter.matches(r)]

    def fetch_page(
        self,
        report_filter: ReportFilter,
        sort: SortClause,
        window: PageWindow,
    ) -> tuple[list[dict[str, Any]], int]:
        with self._lock:
            rows = sorted(self._matching(report_filter), key=lambda r: r["id"], reverse=True)
            if sort.field is SortField.ID:
                rows.sort(key=lambda r: r["id"], reverse=sort.descending)
            else:
                # Stable sort keeps the id-descending tiebreak
                rows.sort(key=lambda r: _nulls_first(r.get(sort.field.value)), reverse=sort.descending)
            page = rows[window.offset:window.offset + window.limit]
            return copy.deepcopy(page), len(rows)

    def fetch_aggregates(self, report_filter: ReportFilter) -> ReportAggregates:
        with self._lock:
            rows = self._matching(report_filter)
        return ReportAggregates(
            accepted_count=sum(
                1 for r in rows
                if AcceptanceStatus.coerce(r.get("acceptance_status")) is AcceptanceStatus.ACCEPTED
            ),
            human_scanned_count=sum(
                1 for r in rows if HumanScan.coerce(r.get("human_scanned")) is HumanScan.SCANNED
            ),
            total_count=len(rows),
        )

    def get(self, report_id: int) -> dict[str, Any] | None:
        with self._lock:
            for record in self._valid():
                if record["id"] == report_id:
                    return copy.deepcopy(record)
        return None

    def update(self, report_id: int, changes: dict[str, Any]) -> dict[str, Any] | None:
        with self._lock:
            for record in self._valid():
                if record["id"] == report_id:
                    record.update(changes)
                    record["updated_at"] = utcnow()
                    return copy.deepcopy(record)
        return None

    def add(self, record: dict[str, Any]) -> dict[str, Any]:
        with self._lock:
            stored = dict(record)
            if stored.get("id") is None:
                stored["id"] = max((r["id"] for r in self._valid()), default=0) + 1
            now = utcnow()
            stored.setdefault("created_at", now)
            stored.setdefault("updated_at", now)
            stored.setdefault("reference_tags", "")
            stored.setdefault("acceptance_status", AcceptanceStatus.NOT_ACCEPTED.value)
            stored.setdefault("human_scanned", HumanScan.NOT_SCANNED.value)
            self._records.append(stored)
            return copy.deepcopy(stored)

    def reference_tags_for_country(self, country: str) -> list[str | None]:
        with self._lock:
            return [r.get("reference_tags") for r in self._valid() if r.get("country") == country]

    def distinct_values(self, column: str) -> list[str]:
        if column not in DISTINCT_COLUMNS:
            raise ValueError(f"Unsupported column '{column}'")
        with self._lock:
            values = {r.get(column) for r in self._valid()}
        return sorted(v for v in values if isinstance(v, str) and v.strip())

    def ping(self) -> None:
        return None
