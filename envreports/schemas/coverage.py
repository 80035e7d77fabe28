"""Schemas for GPC coverage endpoints."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class PriorityBreakdown(BaseModel):
    """Missing code counts per priority tier."""

    high: int = 0
    medium: int = 0
    low: int = 0
    total: int = 0


class MissingByPriority(BaseModel):
    high: list[str] = Field(default_factory=list)
    medium: list[str] = Field(default_factory=list)
    low: list[str] = Field(default_factory=list)


class CoverageScanResponse(BaseModel):
    """Coverage of the GPC catalog by one country's reports."""

    model_config = ConfigDict(populate_by_name=True)

    country: str
    total_reports: int = Field(..., alias="totalReports")
    covered_gpc_numbers: list[str] = Field(..., alias="coveredGPCNumbers")
    missing_gpc_numbers: list[str] = Field(..., alias="missingGPCNumbers")
    coverage_percentage: int = Field(..., ge=0, le=100, alias="coveragePercentage")
    missing_by_priority: MissingByPriority = Field(..., alias="missingByPriority")
    priority_breakdown: PriorityBreakdown = Field(..., alias="priorityBreakdown")
    recommendation: str


class CatalogEntry(BaseModel):
    code: str
    priority: str


class CatalogResponse(BaseModel):
    """The GPC reference catalog in canonical order."""

    total: int
    entries: list[CatalogEntry]
