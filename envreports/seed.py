"""Sample reports for local development."""

from __future__ import annotations

from typing import Any

from envreports.repositories.base import ReportRepository

SAMPLE_REPORTS: list[dict[str, Any]] = [
    {
        "name": "Tesla Sustainability Report 2023",
        "country": "USA",
        "sector": "Automotive",
        "url": "https://tesla.com/sustainability",
        "reference_tags": "I.1.1;I.2.1;II.1.1",
        "human_scanned": 1,
        "acceptance_status": 2,
        "confidence": 0.92,
    },
    {
        "name": "Shell Climate Report 2023",
        "country": "Netherlands",
        "sector": "Energy",
        "url": "https://shell.com/climate",
        "reference_tags": "I.4.1;I.4.2;III.1.1",
        "human_scanned": 1,
        "acceptance_status": 2,
        "confidence": 0.88,
    },
    {
        "name": "Microsoft Environmental Report",
        "country": "USA",
        "sector": "Technology",
        "url": "https://microsoft.com/environment",
        "reference_tags": "I.1.2;III.1.2",
        "human_scanned": 1,
        "acceptance_status": 2,
        "confidence": 0.95,
    },
    {
        "name": "Unilever Sustainable Living Plan",
        "country": "UK",
        "sector": "Consumer Goods",
        "url": "https://unilever.com/sustainability",
        "reference_tags": "III.4.1",
        "human_scanned": 0,
        "acceptance_status": 1,
        "confidence": 0.85,
    },
    {
        "name": "Toyota Environmental Challenge 2050",
        "country": "Japan",
        "sector": "Automotive",
        "url": "https://toyota.com/environment",
        "reference_tags": "II.1.1;II.1.2",
        "human_scanned": 1,
        "acceptance_status": 0,
        "confidence": 0.90,
    },
    {
        "name": "Amazon Sustainability Report",
        "country": "USA",
        "sector": "Technology",
        "url": "https://amazon.com/sustainability",
        "reference_tags": "",
        "human_scanned": 0,
        "acceptance_status": 2,
        "confidence": 0.87,
    },
    {
        "name": "Nestlé Creating Shared Value Report",
        "country": "Switzerland",
        "sector": "Food & Beverage",
        "url": "https://nestle.com/csv",
        "reference_tags": "I.2.2",
        "human_scanned": 0,
        "acceptance_status": 0,
        "confidence": 0.82,
    },
    {
        "name": "BP Sustainability Report",
        "country": "UK",
        "sector": "Energy",
        "url": "https://bp.com/sustainability",
        "reference_tags": "I.1.1;I.4.3",
        "human_scanned": 1,
        "acceptance_status": 2,
        "confidence": 0.86,
    },
    {
        "name": "Walmart ESG Report",
        "country": "USA",
        "sector": "Retail",
        "url": "https://walmart.com/esg",
        "reference_tags": "III.2.1",
        "human_scanned": 0,
        "acceptance_status": 1,
        "confidence": 0.89,
    },
    {
        "name": "Samsung Sustainability Report",
        "country": "South Korea",
        "sector": "Technology",
        "url": "https://samsung.com/sustainability",
        "reference_tags": "I.1.1",
        "human_scanned": 0,
        "acceptance_status": 0,
        "confidence": 0.84,
    },
]


def seed_repository(repository: ReportRepository, reports: list[dict[str, Any]] | None = None) -> int:
    """Insert sample reports and return how many were added."""
    reports = SAMPLE_REPORTS if reports is None else reports
    for report in reports:
        repository.add(report)
    return len(reports)
