"""SQLAlchemy-backed report store for a local relational database."""

from __future__ import annotations

from typing import Any

import structlog
from sqlalchemy import case, create_engine, func, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from envreports.models.base import Base, utcnow
from envreports.models.report import AcceptanceStatus, HumanScan, Report
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

_SORT_COLUMNS = {
    SortField.NAME: Report.name,
    SortField.COUNTRY: Report.country,
    SortField.CREATED_AT: Report.created_at,
    SortField.ID: Report.id,
}


def create_report_engine(database_url: str, echo: bool = False) -> Engine:
    """Create an engine; in-memory SQLite shares one connection across threads."""
    if database_url in ("sqlite://", "sqlite:///:memory:"):
        return create_engine(
            database_url,
            echo=echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    if database_url.startswith("sqlite"):
        return create_engine(database_url, echo=echo, connect_args={"check_same_thread": False})
    return create_engine(database_url, echo=echo, pool_pre_ping=True)


def _where(report_filter: ReportFilter) -> list:
    clauses = []
    if report_filter.country is not None:
        clauses.append(Report.country == report_filter.country)
    if report_filter.sector is not None:
        clauses.append(Report.sector == report_filter.sector)
    if report_filter.acceptance_status is not None:
        clauses.append(Report.acceptance_status == report_filter.acceptance_status)
    if report_filter.human_scanned is not None:
        clauses.append(Report.human_scanned == report_filter.human_scanned)
    return clauses


def _order_by(sort: SortClause) -> list:
    column = _SORT_COLUMNS[sort.field]
    # Nulls sort lowest, matching the other stores
    primary = column.desc().nulls_last() if sort.descending else column.asc().nulls_first()
    if sort.field is SortField.ID:
        return [primary]
    return [primary, Report.id.desc()]


class SqlReportRepository(ReportRepository):
    """Reports stored in the ``environmental_report`` table."""

    def __init__(self, engine: Engine, create_schema: bool = False) -> None:
        self.engine = engine
        self._session_factory = sessionmaker(bind=engine, expire_on_commit=False)
        if create_schema:
            self.create_schema()

    @classmethod
    def from_url(cls, database_url: str, echo: bool = False, create_schema: bool = True) -> "SqlReportRepository":
        return cls(create_report_engine(database_url, echo=echo), create_schema=create_schema)

    def create_schema(self) -> None:
        """Create missing tables. Alembic owns the schema in deployed databases."""
        try:
            Base.metadata.create_all(self.engine)
        except SQLAlchemyError as exc:
            raise ReportStoreError("Failed to create schema") from exc

    def _session(self) -> Session:
        return self._session_factory()

    def fetch_page(
        self,
        report_filter: ReportFilter,
        sort: SortClause,
        window: PageWindow,
    ) -> tuple[list[dict[str, Any]], int]:
        where = _where(report_filter)
        stmt = (
            select(Report)
            .where(*where)
            .order_by(*_order_by(sort))
            .limit(window.limit)
            .offset(window.offset)
        )
        count_stmt = select(func.count()).select_from(Report).where(*where)
        try:
            with self._session() as session:
                rows = [report.to_dict() for report in session.scalars(stmt)]
                total = session.scalar(count_stmt) or 0
        except SQLAlchemyError as exc:
            logger.error("report_store_failed", operation="fetch_page", error=str(exc))
            raise ReportStoreError("Failed to fetch reports") from exc
        return rows, total

    def fetch_aggregates(self, report_filter: ReportFilter) -> ReportAggregates:
        stmt = select(
            func.sum(case((Report.acceptance_status == AcceptanceStatus.ACCEPTED.value, 1), else_=0)),
            func.sum(case((Report.human_scanned == HumanScan.SCANNED.value, 1), else_=0)),
            func.count(Report.id),
        ).where(*_where(report_filter))
        try:
            with self._session() as session:
                accepted, scanned, total = session.execute(stmt).one()
        except SQLAlchemyError as exc:
            logger.error("report_store_failed", operation="fetch_aggregates", error=str(exc))
            raise ReportStoreError("Failed to fetch aggregates") from exc
        # SUM over zero rows is NULL
        return ReportAggregates(
            accepted_count=int(accepted or 0),
            human_scanned_count=int(scanned or 0),
            total_count=int(total or 0),
        )

    def get(self, report_id: int) -> dict[str, Any] | None:
        try:
            with self._session() as session:
                report = session.get(Report, report_id)
                return report.to_dict() if report is not None else None
        except SQLAlchemyError as exc:
            logger.error("report_store_failed", operation="get", error=str(exc))
            raise ReportStoreError("Failed to fetch report") from exc

    def update(self, report_id: int, changes: dict[str, Any]) -> dict[str, Any] | None:
        try:
            with self._session() as session, session.begin():
                report = session.get(Report, report_id)
                if report is None:
                    return None
                for key, value in changes.items():
                    setattr(report, key, value)
                report.updated_at = utcnow()
                session.flush()
                return report.to_dict()
        except SQLAlchemyError as exc:
            logger.error("report_store_failed", operation="update", error=str(exc))
            raise ReportStoreError("Failed to update report") from exc

    def add(self, record: dict[str, Any]) -> dict[str, Any]:
        columns = {c.name for c in Report.__table__.columns}
        values = {k: v for k, v in record.items() if k in columns and v is not None}
        try:
            with self._session() as session, session.begin():
                report = Report(**values)
                session.add(report)
                session.flush()
                return report.to_dict()
        except SQLAlchemyError as exc:
            logger.error("report_store_failed", operation="add", error=str(exc))
            raise ReportStoreError("Failed to add report") from exc

    def reference_tags_for_country(self, country: str) -> list[str | None]:
        stmt = select(Report.reference_tags).where(Report.country == country)
        try:
            with self._session() as session:
                return list(session.scalars(stmt))
        except SQLAlchemyError as exc:
            logger.error("report_store_failed", operation="reference_tags_for_country", error=str(exc))
            raise ReportStoreError("Failed to read reference tags") from exc

    def distinct_values(self, column: str) -> list[str]:
        if column not in DISTINCT_COLUMNS:
            raise ValueError(f"Unsupported column '{column}'")
        attr = getattr(Report, column)
        stmt = select(attr).distinct().where(attr.is_not(None), func.trim(attr) != "").order_by(attr)
        try:
            with self._session() as session:
                return list(session.scalars(stmt))
        except SQLAlchemyError as exc:
            logger.error("report_store_failed", operation="distinct_values", error=str(exc))
            raise ReportStoreError("Failed to read distinct values") from exc

    def close(self) -> None:
        self.engine.dispose()
