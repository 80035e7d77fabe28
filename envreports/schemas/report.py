"""Schemas for report query and review endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class ReportResponse(BaseModel):
    """A single environmental report."""

    id: int = Field(..., gt=0)
    name: str
    country: str | None = None
    sector: str | None = None
    url: str | None = None
    reference_tags: str = ""
    human_scanned: int = Field(0, ge=0, le=1)
    acceptance_status: int = Field(0, ge=0, le=2)
    confidence: float | None = None
    comment: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    method_of_access: str | None = None
    data_format: str | None = None
    description: str | None = None
    granularity: str | None = None
    country_locode: str | None = None


class Pagination(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    page: int
    limit: int
    total: int
    total_pages: int = Field(..., alias="totalPages")


class Aggregates(BaseModel):
    """Counts over the whole filtered set, independent of the page."""

    model_config = ConfigDict(populate_by_name=True)

    accepted_count: int = Field(0, alias="acceptedCount")
    human_scanned_count: int = Field(0, alias="humanScannedCount")
    total_count: int = Field(0, alias="totalCount")


class ReportsPageResponse(BaseModel):
    """One page of reports with pagination and aggregate stats."""

    data: list[ReportResponse]
    pagination: Pagination
    aggregates: Aggregates


class ReportsQuery(BaseModel):
    """Validated list-query parameters from an untrusted caller."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    country: str | None = None
    sector: str | None = None
    status: int | None = Field(None, ge=0, le=2)
    human_scanned: int | None = Field(None, ge=0, le=1, alias="humanScanned")
    page: int = Field(1, ge=1)
    limit: int = Field(10, ge=1, le=100)
    sort_by: Literal["name", "country", "created_at"] = Field("created_at", alias="sortBy")
    sort_order: Literal["asc", "desc"] = Field("desc", alias="sortOrder")


class ReviewUpdateRequest(BaseModel):
    """Reviewer disposition on a report."""

    acceptance_status: int = Field(..., ge=0, le=2)
    comment: str | None = Field(None, max_length=5000)
    human_scanned: int | None = Field(None, ge=0, le=1)
    reference_tags: str | None = Field(None, description="GPC codes separated by ';' e.g. I.1.1;II.3.2")


class ReportUpdateRequest(BaseModel):
    """Full edit of a report. Omitted fields are left unchanged."""

    name: str | None = Field(None, min_length=1, max_length=500)
    country: str | None = None
    sector: str | None = None
    url: str | None = None
    reference_tags: str | None = None
    acceptance_status: int | None = Field(None, ge=0, le=2)
    human_scanned: int | None = Field(None, ge=0, le=1)
    comment: str | None = Field(None, max_length=5000)
    method_of_access: str | None = None
    data_format: str | None = None
    description: str | None = None
    granularity: str | None = None
    country_locode: str | None = Field(None, max_length=10)


class EnumOption(BaseModel):
    value: int
    label: str


class ReportsMetadataResponse(BaseModel):
    """Options for populating filter controls."""

    model_config = ConfigDict(populate_by_name=True)

    countries: list[str]
    sectors: list[str]
    statuses: list[EnumOption]
    human_scanned_options: list[EnumOption] = Field(..., alias="humanScannedOptions")
