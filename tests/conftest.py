"""Shared test fixtures for the environmental report service test suite."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from envreports.app import create_app
from envreports.config import Settings
from envreports.repositories.memory import InMemoryReportRepository
from envreports.repositories.sql import SqlReportRepository


BASE_TIME = datetime(2025, 1, 1, tzinfo=timezone.utc)


def _test_settings() -> Settings:
    """Return settings suitable for testing."""
    return Settings(
        environment="development",
        debug=True,
        log_format="console",
        rate_limit_default="1000/minute",
        report_store="memory",
        allowed_origins="http://localhost:5173,http://localhost:3000",
    )


def make_report(index: int, **overrides) -> dict:
    """Build a report dict with predictable, distinct field values."""
    report = {
        "id": index,
        "name": f"Report {index:02d}",
        "country": "USA",
        "sector": "Energy",
        "url": f"https://example.com/reports/{index}",
        "reference_tags": "",
        "human_scanned": 0,
        "acceptance_status": 0,
        "confidence": 0.5,
        "created_at": BASE_TIME + timedelta(days=index),
        "updated_at": BASE_TIME + timedelta(days=index),
    }
    report.update(overrides)
    return report


MIXED_REPORTS = [
    make_report(1, name="Tesla Impact", country="USA", sector="Automotive",
                acceptance_status=2, human_scanned=1, reference_tags="I.1.1;I.2.1"),
    make_report(2, name="Shell Climate", country="Netherlands", sector="Energy",
                acceptance_status=2, human_scanned=1, reference_tags="I.4.1"),
    make_report(3, name="Microsoft Environment", country="USA", sector="Technology",
                acceptance_status=1, human_scanned=0, reference_tags="I.1.2; III.1.1"),
    make_report(4, name="Unilever Living Plan", country="UK", sector="Consumer Goods",
                acceptance_status=0, human_scanned=1),
    make_report(5, name="Toyota Challenge", country="Japan", sector="Automotive",
                acceptance_status=0, human_scanned=0, reference_tags="II.1.1"),
    make_report(6, name="Amazon Sustainability", country="USA", sector="Technology",
                acceptance_status=2, human_scanned=0),
    make_report(7, name="BP Sustainability", country="UK", sector="Energy",
                acceptance_status=2, human_scanned=1, reference_tags="I.1.1;I.4.3"),
    make_report(8, name="Walmart ESG", country="USA", sector="Retail",
                acceptance_status=1, human_scanned=1),
]


@pytest.fixture
def settings():
    """Test settings."""
    return _test_settings()


@pytest.fixture
def repository():
    """Empty in-memory report store."""
    return InMemoryReportRepository()


@pytest.fixture
def mixed_repository():
    """In-memory store holding eight reports across countries and statuses."""
    return InMemoryReportRepository(MIXED_REPORTS)


@pytest.fixture
def sql_repository():
    """SQLite in-memory store with the schema created."""
    repo = SqlReportRepository.from_url("sqlite://")
    yield repo
    repo.close()


@pytest.fixture
def mixed_sql_repository(sql_repository):
    """SQL store holding the same eight reports as ``mixed_repository``."""
    for report in MIXED_REPORTS:
        sql_repository.add(report)
    return sql_repository


@pytest.fixture
def app(settings, mixed_repository):
    """Create a fresh FastAPI app for testing, backed by the mixed reports."""
    return create_app(settings, repository=mixed_repository)


@pytest.fixture
def client(app):
    """HTTP test client."""
    return TestClient(app)
