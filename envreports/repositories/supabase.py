"""Report store backed by a hosted PostgREST / Supabase table."""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from envreports.models.base import utcnow
from envreports.repositories.base import (
    DISTINCT_COLUMNS,
    PageWindow,
    ReportAggregates,
    ReportFilter,
    ReportRepository,
    ReportStoreError,
    SortClause,
    SortField,
)

logger = structlog.get_logger()

# The hosted table predates the tri-state review columns and keeps their old names.
LEGACY_COLUMNS = {
    "acceptance_status": "accepted",
    "human_scanned": "human_eval",
    "reference_tags": "gpc_ref_num",
}

# PostgREST caps responses at ``max-rows``; bulk reads walk the table in batches.
BATCH_SIZE = 1000

RANGE_NOT_SATISFIABLE = 416


def parse_content_range(header: str | None) -> int:
    """Return the total from a ``Content-Range`` header such as ``0-9/42`` or ``*/0``."""
    if not header or "/" not in header:
        return 0
    total = header.rsplit("/", 1)[1].strip()
    return int(total) if total.isdigit() else 0


class SupabaseReportRepository(ReportRepository):
    """HTTP client for the hosted ``environmental_report`` table."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        table: str = "environmental_report",
        timeout: float = 10.0,
        column_map: dict[str, str] | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        if not base_url or not api_key:
            raise ValueError("Hosted report store needs both a URL and an API key")
        self.table = table
        self.column_map = dict(LEGACY_COLUMNS if column_map is None else column_map)
        self._reverse_map = {v: k for k, v in self.column_map.items()}
        self._client = httpx.Client(
            base_url=f"{base_url.rstrip('/')}/rest/v1",
            headers={
                "apikey": api_key,
                "Authorization": f"Bearer {api_key}",
            },
            timeout=timeout,
            transport=transport,
        )

    # ─── Column translation ──────────────────────────────────────────────

    def _column(self, name: str) -> str:
        return self.column_map.get(name, name)

    def _from_store(self, row: dict[str, Any]) -> dict[str, Any]:
        return {self._reverse_map.get(key, key): value for key, value in row.items()}

    def _to_store(self, values: dict[str, Any]) -> dict[str, Any]:
        return {self._column(key): value for key, value in values.items()}

    def _filter_params(self, report_filter: ReportFilter) -> dict[str, str]:
        params = {"id": "not.is.null"}
        if report_filter.country is not None:
            params["country"] = f"eq.{report_filter.country}"
        if report_filter.sector is not None:
            params["sector"] = f"eq.{report_filter.sector}"
        if report_filter.acceptance_status is not None:
            params[self._column("acceptance_status")] = f"eq.{report_filter.acceptance_status}"
        if report_filter.human_scanned is not None:
            params[self._column("human_scanned")] = f"eq.{report_filter.human_scanned}"
        return params

    def _order_param(self, sort: SortClause) -> str:
        direction = "desc.nullslast" if sort.descending else "asc.nullsfirst"
        primary = f"{self._column(sort.field.value)}.{direction}"
        if sort.field is SortField.ID:
            return primary
        return f"{primary},id.desc"

    # ─── Transport ───────────────────────────────────────────────────────

    def _request(
        self,
        method: str,
        operation: str,
        accept_statuses: tuple[int, ...] = (),
        **kwargs: Any,
    ) -> httpx.Response:
        try:
            response = self._client.request(method, f"/{self.table}", **kwargs)
        except httpx.HTTPError as exc:
            logger.error("report_store_failed", operation=operation, error=str(exc))
            raise ReportStoreError(f"Hosted store request failed during {operation}") from exc
        if response.status_code >= 400 and response.status_code not in accept_statuses:
            logger.error(
                "report_store_failed",
                operation=operation,
                status_code=response.status_code,
                body=response.text[:200],
            )
            raise ReportStoreError(f"Hosted store returned {response.status_code} during {operation}")
        return response

    def _count(self, params: dict[str, str]) -> int:
        response = self._request(
            "HEAD",
            "count",
            params={"select": "id", **params},
            headers={"Prefer": "count=exact"},
        )
        return parse_content_range(response.headers.get("content-range"))

    def _fetch_all(self, select: str, params: dict[str, str]) -> list[dict[str, Any]]:
        rows: list[dict[str, Any]] = []
        offset = 0
        while True:
            response = self._request(
                "GET",
                "fetch_all",
                params={"select": select, "order": "id.asc", "limit": str(BATCH_SIZE), "offset": str(offset), **params},
            )
            batch = response.json()
            rows.extend(batch)
            if len(batch) < BATCH_SIZE:
                return rows
            offset += BATCH_SIZE

    # ─── Repository operations ───────────────────────────────────────────

    def fetch_page(
        self,
        report_filter: ReportFilter,
        sort: SortClause,
        window: PageWindow,
    ) -> tuple[list[dict[str, Any]], int]:
        response = self._request(
            "GET",
            "fetch_page",
            params={
                "select": "*",
                "order": self._order_param(sort),
                "limit": str(window.limit),
                "offset": str(window.offset),
                **self._filter_params(report_filter),
            },
            headers={"Prefer": "count=exact"},
            accept_statuses=(RANGE_NOT_SATISFIABLE,),
        )
        total = parse_content_range(response.headers.get("content-range"))
        # An offset past the end is answered with 416 and a "*/N" range
        if response.status_code == RANGE_NOT_SATISFIABLE:
            return [], total
        rows = [self._from_store(row) for row in response.json()]
        return rows, total

    def fetch_aggregates(self, report_filter: ReportFilter) -> ReportAggregates:
        params = self._filter_params(report_filter)
        total = self._count(params)
        if total == 0:
            return ReportAggregates()
        accepted = self._count({**params, self._column("acceptance_status"): "eq.2"})
        scanned = self._count({**params, self._column("human_scanned"): "eq.1"})
        return ReportAggregates(accepted_count=accepted, human_scanned_count=scanned, total_count=total)

    def get(self, report_id: int) -> dict[str, Any] | None:
        response = self._request("GET", "get", params={"select": "*", "id": f"eq.{report_id}"})
        rows = response.json()
        return self._from_store(rows[0]) if rows else None

    def update(self, report_id: int, changes: dict[str, Any]) -> dict[str, Any] | None:
        payload = self._to_store({**changes, "updated_at": utcnow().isoformat()})
        response = self._request(
            "PATCH",
            "update",
            params={"id": f"eq.{report_id}"},
            json=payload,
            headers={"Prefer": "return=representation"},
        )
        rows = response.json()
        return self._from_store(rows[0]) if rows else None

    def add(self, record: dict[str, Any]) -> dict[str, Any]:
        payload = {k: v for k, v in self._to_store(record).items() if v is not None}
        response = self._request(
            "POST",
            "add",
            json=payload,
            headers={"Prefer": "return=representation"},
        )
        return self._from_store(response.json()[0])

    def reference_tags_for_country(self, country: str) -> list[str | None]:
        column = self._column("reference_tags")
        rows = self._fetch_all(f"id,{column}", {"country": f"eq.{country}", "id": "not.is.null"})
        return [row.get(column) for row in rows]

    def distinct_values(self, column: str) -> list[str]:
        if column not in DISTINCT_COLUMNS:
            raise ValueError(f"Unsupported column '{column}'")
        rows = self._fetch_all(f"id,{column}", {"id": "not.is.null"})
        values = {row.get(column) for row in rows}
        return sorted(v for v in values if isinstance(v, str) and v.strip())

    def ping(self) -> None:
        self._count({"id": "not.is.null"})

    def close(self) -> None:
        self._client.close()
