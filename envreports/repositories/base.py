"""Repository contract shared by every report store.

The query engine and coverage scanner only talk to :class:`ReportRepository`.
Concrete stores translate the small value types below into their own query
language (SQLAlchemy expressions, PostgREST parameters, plain Python).
"""

from __future__ import annotations

import abc
import enum
import math
from dataclasses import dataclass
from typing import Any

from envreports.models.report import AcceptanceStatus, HumanScan


class ReportStoreError(Exception):
    """Raised when the backing store cannot serve a request."""


class SortField(str, enum.Enum):
    """Columns the engine knows how to order by."""

    NAME = "name"
    COUNTRY = "country"
    CREATED_AT = "created_at"
    ID = "id"


class SortOrder(str, enum.Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class ReportFilter:
    """Conjunctive equality filter. ``None`` means no constraint."""

    country: str | None = None
    sector: str | None = None
    acceptance_status: int | None = None
    human_scanned: int | None = None

    def matches(self, record: dict[str, Any]) -> bool:
        if self.country is not None and record.get("country") != self.country:
            return False
        if self.sector is not None and record.get("sector") != self.sector:
            return False
        if (
            self.acceptance_status is not None
            and AcceptanceStatus.coerce(record.get("acceptance_status")) != self.acceptance_status
        ):
            return False
        if (
            self.human_scanned is not None
            and HumanScan.coerce(record.get("human_scanned")) != self.human_scanned
        ):
            return False
        return True


@dataclass(frozen=True)
class SortClause:
    """Primary ordering. Every store breaks ties with ``id`` descending."""

    field: SortField = SortField.CREATED_AT
    order: SortOrder = SortOrder.DESC

    @property
    def descending(self) -> bool:
        return self.order is SortOrder.DESC


@dataclass(frozen=True)
class PageWindow:
    """One-based page of ``limit`` rows."""

    page: int = 1
    limit: int = 10

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def total_pages(self, total: int) -> int:
        return math.ceil(total / self.limit) if total else 0


@dataclass(frozen=True)
class ReportAggregates:
    accepted_count: int = 0
    human_scanned_count: int = 0
    total_count: int = 0


# Columns that ``distinct_values`` accepts.
DISTINCT_COLUMNS = ("country", "sector")


class ReportRepository(abc.ABC):
    """Storage operations needed by the query engine, scanner and review flow.

    Records cross this boundary as plain dicts keyed by the ``Report``
    column names. Implementations raise :class:`ReportStoreError` for any
    connectivity or query failure and never return partial results.
    Rows without an ``id`` are ignored by every read.
    """

    @abc.abstractmethod
    def fetch_page(
        self,
        report_filter: ReportFilter,
        sort: SortClause,
        window: PageWindow,
    ) -> tuple[list[dict[str, Any]], int]:
        """Return one sorted page of matching rows and the total match count."""

    @abc.abstractmethod
    def fetch_aggregates(self, report_filter: ReportFilter) -> ReportAggregates:
        """Return accepted, human-scanned and total counts over the filtered set."""

    @abc.abstractmethod
    def get(self, report_id: int) -> dict[str, Any] | None:
        """Return a single report, or ``None`` when it does not exist."""

    @abc.abstractmethod
    def update(self, report_id: int, changes: dict[str, Any]) -> dict[str, Any] | None:
        """Apply ``changes`` to one report, refresh ``updated_at`` and return it.

        Returns ``None`` when the report does not exist.
        """

    @abc.abstractmethod
    def add(self, record: dict[str, Any]) -> dict[str, Any]:
        """Insert a report and return it with its assigned ``id``."""

    @abc.abstractmethod
    def reference_tags_for_country(self, country: str) -> list[str | None]:
        """Return the raw ``reference_tags`` value of every report in ``country``."""

    @abc.abstractmethod
    def distinct_values(self, column: str) -> list[str]:
        """Return the sorted distinct non-blank values of ``country`` or ``sector``."""

    def ping(self) -> None:
        """Raise :class:`ReportStoreError` when the store is unreachable."""
        self.fetch_aggregates(ReportFilter())

    def close(self) -> None:
        """Release connections held by the store."""
