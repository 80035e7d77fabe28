"""Environmental report model — one row per organisation disclosure."""

from __future__ import annotations

import enum
from typing import Any

from sqlalchemy import CheckConstraint, Float, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from envreports.models.base import Base, TimestampMixin


def _coerce_int_enum(enum_cls, value: Any, default):
    if isinstance(value, str):
        value = value.strip()
        if not value.lstrip("-").isdigit():
            return default
        value = int(value)
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    try:
        return enum_cls(value)
    except ValueError:
        return default


class AcceptanceStatus(enum.IntEnum):
    """Reviewer disposition on a report."""

    NOT_ACCEPTED = 0
    PARTIALLY_ACCEPTED = 1
    ACCEPTED = 2

    @classmethod
    def coerce(cls, value: Any) -> "AcceptanceStatus":
        """Map a stored value onto the enum.

        Legacy rows hold a boolean ``accepted`` flag: ``True`` reads as
        ACCEPTED and ``False`` as NOT_ACCEPTED. Anything outside the enum
        falls back to NOT_ACCEPTED.
        """
        if isinstance(value, bool):
            return cls.ACCEPTED if value else cls.NOT_ACCEPTED
        return _coerce_int_enum(cls, value, cls.NOT_ACCEPTED)


class HumanScan(enum.IntEnum):
    """Whether a person has reviewed the report."""

    NOT_SCANNED = 0
    SCANNED = 1

    @classmethod
    def coerce(cls, value: Any) -> "HumanScan":
        """Map a stored value onto the enum, defaulting to NOT_SCANNED."""
        if isinstance(value, bool):
            return cls.SCANNED if value else cls.NOT_SCANNED
        return _coerce_int_enum(cls, value, cls.NOT_SCANNED)


# Columns a full update may change. ``id`` and the timestamps are managed by the store.
EDITABLE_FIELDS = (
    "name",
    "country",
    "sector",
    "url",
    "reference_tags",
    "acceptance_status",
    "human_scanned",
    "comment",
    "method_of_access",
    "data_format",
    "description",
    "granularity",
    "country_locode",
)

REVIEW_FIELDS = ("acceptance_status", "comment", "human_scanned", "reference_tags")


class Report(TimestampMixin, Base):
    """A sustainability disclosure under review."""

    __tablename__ = "environmental_report"
    __table_args__ = (
        CheckConstraint("acceptance_status IN (0, 1, 2)", name="ck_environmental_report_acceptance_status"),
        CheckConstraint("human_scanned IN (0, 1)", name="ck_environmental_report_human_scanned"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(500), nullable=False)
    country: Mapped[str] = mapped_column(String(100), nullable=False, default="", index=True)
    sector: Mapped[str] = mapped_column(String(100), nullable=False, default="", index=True)
    url: Mapped[str | None] = mapped_column(String(2000), nullable=True)
    reference_tags: Mapped[str] = mapped_column(Text, nullable=False, default="")
    human_scanned: Mapped[int] = mapped_column(Integer, nullable=False, default=0, index=True)
    acceptance_status: Mapped[int] = mapped_column(Integer, nullable=False, default=0, index=True)
    confidence: Mapped[float | None] = mapped_column(Float, nullable=True, default=0.0)
    comment: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Descriptive metadata, editable but never filtered on
    method_of_access: Mapped[str | None] = mapped_column(String(255), nullable=True)
    data_format: Mapped[str | None] = mapped_column(String(255), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    granularity: Mapped[str | None] = mapped_column(String(255), nullable=True)
    country_locode: Mapped[str | None] = mapped_column(String(10), nullable=True)

    def to_dict(self) -> dict:
        return {column.name: getattr(self, column.name) for column in self.__table__.columns}

    def __repr__(self) -> str:
        return f"<Report id={self.id} country={self.country}>"
