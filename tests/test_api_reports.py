"""API tests for report, coverage and health endpoints."""

from __future__ import annotations

import asyncio
import signal
import time

import httpx
import pytest
from fastapi.testclient import TestClient

from conftest import MIXED_REPORTS
from envreports.app import create_app
from envreports.config import Settings
from envreports.middleware import lifespan
from envreports.repositories.base import ReportStoreError
from envreports.repositories.memory import InMemoryReportRepository
from envreports.seed import SAMPLE_REPORTS


class FailingRepository(InMemoryReportRepository):
    """A store whose reads all fail."""

    def fetch_page(self, report_filter, sort, window):
        raise ReportStoreError("connection reset")

    def reference_tags_for_country(self, country):
        raise ReportStoreError("connection reset")

    def distinct_values(self, column):
        raise ReportStoreError("connection reset")

    def get(self, report_id):
        raise ReportStoreError("connection reset")

    def ping(self):
        raise ReportStoreError("connection reset")


class SlowRepository(InMemoryReportRepository):
    """A store whose page reads block like a slow database round trip."""

    def fetch_page(self, report_filter, sort, window):
        time.sleep(0.5)
        return super().fetch_page(report_filter, sort, window)


@pytest.fixture
def failing_client(settings):
    return TestClient(create_app(settings, repository=FailingRepository()))


# ─── Listing ─────────────────────────────────────────────────────────────────

class TestListReports:

    def test_defaults(self, client):
        resp = client.get("/api/reports")
        assert resp.status_code == 200
        body = resp.json()
        assert [r["id"] for r in body["data"]] == [8, 7, 6, 5, 4, 3, 2, 1]
        assert body["pagination"] == {"page": 1, "limit": 10, "total": 8, "totalPages": 1}
        assert body["aggregates"] == {"acceptedCount": 4, "humanScannedCount": 5, "totalCount": 8}

    def test_report_fields(self, client):
        report = client.get("/api/reports", params={"limit": 1}).json()["data"][0]
        assert report["name"] == "Walmart ESG"
        assert report["acceptance_status"] == 1
        assert report["human_scanned"] == 1
        assert report["reference_tags"] == ""

    def test_filters_combine(self, client):
        resp = client.get("/api/reports", params={"country": "USA", "status": 2, "humanScanned": 1})
        body = resp.json()
        assert [r["id"] for r in body["data"]] == [1]
        assert body["aggregates"] == {"acceptedCount": 1, "humanScannedCount": 1, "totalCount": 1}

    def test_sector_filter(self, client):
        body = client.get("/api/reports", params={"sector": "Energy"}).json()
        assert sorted(r["id"] for r in body["data"]) == [2, 7]

    def test_sort_by_name(self, client):
        body = client.get("/api/reports", params={"sortBy": "name", "sortOrder": "asc", "limit": 3}).json()
        assert [r["name"] for r in body["data"]] == [
            "Amazon Sustainability", "BP Sustainability", "Microsoft Environment",
        ]

    def test_pagination(self, client):
        body = client.get("/api/reports", params={"limit": 3, "page": 3}).json()
        assert [r["id"] for r in body["data"]] == [2, 1]
        assert body["pagination"]["totalPages"] == 3

    def test_page_beyond_end(self, client):
        body = client.get("/api/reports", params={"limit": 5, "page": 9}).json()
        assert body["data"] == []
        assert body["pagination"]["total"] == 8
        assert body["aggregates"]["totalCount"] == 8

    @pytest.mark.parametrize("params", [
        {"limit": 0},
        {"limit": 101},
        {"page": 0},
        {"sortBy": "bogus"},
        {"sortOrder": "up"},
        {"status": 3},
        {"humanScanned": 2},
    ])
    def test_invalid_params_rejected(self, client, params):
        assert client.get("/api/reports", params=params).status_code == 422

    def test_store_failure_is_generic(self, failing_client):
        resp = failing_client.get("/api/reports")
        assert resp.status_code == 500
        assert resp.json() == {"detail": "Query failed"}


class TestMetadata:

    def test_options(self, client):
        body = client.get("/api/reports/metadata").json()
        assert body["countries"] == ["Japan", "Netherlands", "UK", "USA"]
        assert body["sectors"] == ["Automotive", "Consumer Goods", "Energy", "Retail", "Technology"]
        assert body["statuses"] == [
            {"value": 0, "label": "Not Accepted"},
            {"value": 1, "label": "Partially Accepted"},
            {"value": 2, "label": "Accepted"},
        ]
        assert [o["value"] for o in body["humanScannedOptions"]] == [0, 1]

    def test_store_failure(self, failing_client):
        assert failing_client.get("/api/reports/metadata").status_code == 500


# ─── Single report and review ────────────────────────────────────────────────

class TestReportDetail:

    def test_get(self, client):
        resp = client.get("/api/reports/2")
        assert resp.status_code == 200
        assert resp.json()["name"] == "Shell Climate"

    def test_get_missing(self, client):
        resp = client.get("/api/reports/999")
        assert resp.status_code == 404
        assert resp.json()["detail"] == "Report not found"

    def test_non_positive_id(self, client):
        assert client.get("/api/reports/0").status_code == 422

    def test_get_store_failure(self, failing_client):
        assert failing_client.get("/api/reports/1").status_code == 500


class TestReview:

    def test_review_updates_fields(self, client):
        before = client.get("/api/reports/3").json()
        resp = client.post("/api/reports/3/review", json={
            "acceptance_status": 2,
            "comment": "  looks good ",
            "human_scanned": 1,
            "reference_tags": "i.1.1; II.1.1 ;i.1.1",
        })
        assert resp.status_code == 200
        body = resp.json()
        assert body["acceptance_status"] == 2
        assert body["human_scanned"] == 1
        assert body["comment"] == "looks good"
        assert body["reference_tags"] == "I.1.1;II.1.1"
        assert body["updated_at"] != before["updated_at"]
        assert body["created_at"] == before["created_at"]

    def test_review_moves_aggregates(self, client):
        client.post("/api/reports/5/review", json={"acceptance_status": 2})
        aggregates = client.get("/api/reports").json()["aggregates"]
        assert aggregates["acceptedCount"] == 5

    def test_omitted_scan_flag_is_kept(self, client):
        body = client.post("/api/reports/4/review", json={"acceptance_status": 1}).json()
        assert body["human_scanned"] == 1

    def test_status_required(self, client):
        assert client.post("/api/reports/1/review", json={"comment": "x"}).status_code == 422

    def test_status_out_of_range(self, client):
        assert client.post("/api/reports/1/review", json={"acceptance_status": 3}).status_code == 422

    def test_review_missing_report(self, client):
        assert client.post("/api/reports/404/review", json={"acceptance_status": 2}).status_code == 404


class TestEditReport:

    def test_put_updates_fields(self, client):
        resp = client.put("/api/reports/6", json={"name": " Amazon 2024 ", "sector": "Retail"})
        assert resp.status_code == 200
        assert resp.json()["name"] == "Amazon 2024"
        assert resp.json()["sector"] == "Retail"
        assert resp.json()["country"] == "USA"

    def test_blank_name_rejected(self, client):
        resp = client.put("/api/reports/6", json={"name": "   "})
        assert resp.status_code == 400

    def test_empty_body_returns_current(self, client):
        resp = client.put("/api/reports/6", json={})
        assert resp.status_code == 200
        assert resp.json()["name"] == "Amazon Sustainability"

    def test_put_missing_report(self, client):
        assert client.put("/api/reports/404", json={"sector": "X"}).status_code == 404


class TestEditReportSql:
    """Edits against the SQL store, whose country and sector columns are non-null."""

    @pytest.fixture
    def sql_client(self, settings, mixed_sql_repository):
        return TestClient(create_app(settings, repository=mixed_sql_repository))

    @pytest.mark.parametrize("field", ["country", "sector"])
    def test_null_stored_as_blank(self, sql_client, field):
        resp = sql_client.put("/api/reports/1", json={field: None})
        assert resp.status_code == 200
        assert resp.json()[field] == ""
        assert sql_client.get("/api/reports/1").json()[field] == ""

    def test_null_name_rejected(self, sql_client):
        resp = sql_client.put("/api/reports/1", json={"name": None})
        assert resp.status_code == 400
        assert sql_client.get("/api/reports/1").json()["name"] == "Tesla Impact"

    def test_null_country_on_memory_store_matches(self, client):
        resp = client.put("/api/reports/1", json={"country": None})
        assert resp.json()["country"] == ""


# ─── Coverage ────────────────────────────────────────────────────────────────

class TestCoverageEndpoint:

    def test_scan(self, client):
        resp = client.get("/api/coverage", params={"country": "USA"})
        assert resp.status_code == 200
        body = resp.json()
        assert body["country"] == "USA"
        assert body["totalReports"] == 4
        assert body["coveredGPCNumbers"] == ["I.1.1", "I.1.2", "I.2.1", "III.1.1"]
        assert len(body["missingGPCNumbers"]) == 36
        assert body["coveragePercentage"] == 10
        breakdown = body["priorityBreakdown"]
        assert breakdown["total"] == 36
        assert breakdown["high"] + breakdown["medium"] + breakdown["low"] == 36
        assert "I.1.1" not in body["missingByPriority"]["high"]
        assert body["recommendation"].startswith("Focus on collecting")

    def test_unknown_country(self, client):
        body = client.get("/api/coverage", params={"country": "Atlantis"}).json()
        assert body["totalReports"] == 0
        assert body["coveragePercentage"] == 0
        assert len(body["missingGPCNumbers"]) == 40

    @pytest.mark.parametrize("params", [{}, {"country": ""}, {"country": "   "}])
    def test_country_required(self, client, params):
        assert client.get("/api/coverage", params=params).status_code == 422

    def test_store_failure(self, failing_client):
        resp = failing_client.get("/api/coverage", params={"country": "USA"})
        assert resp.status_code == 500
        assert resp.json() == {"detail": "Scan failed"}

    def test_catalog(self, client):
        body = client.get("/api/coverage/catalog").json()
        assert body["total"] == 40
        assert body["entries"][0] == {"code": "I.1.1", "priority": "high"}


# ─── Health and lifespan ─────────────────────────────────────────────────────

class TestHealth:

    def test_health(self, client):
        body = client.get("/health").json()
        assert body["status"] == "healthy"
        assert body["report_store"] == "memory"

    def test_ready(self, client):
        body = client.get("/health/ready").json()
        assert body["status"] == "healthy"
        assert [s["service"] for s in body["services"]] == ["report_store"]

    def test_ready_when_store_down(self, failing_client):
        body = failing_client.get("/health/ready").json()
        assert body["status"] == "unhealthy"
        assert body["services"][0]["details"] == "ReportStoreError"

    def test_live(self, client):
        assert client.get("/health/live").json() == {"status": "alive"}


class TestLifespan:

    def test_sample_data_seeded_on_startup(self):
        settings = Settings(report_store="memory", seed_sample_data=True, log_format="console")
        with TestClient(create_app(settings)) as client:
            body = client.get("/api/reports").json()
            assert body["pagination"]["total"] == len(SAMPLE_REPORTS)

    def test_no_seed_by_default(self):
        settings = Settings(report_store="memory", log_format="console")
        with TestClient(create_app(settings)) as client:
            assert client.get("/api/reports").json()["data"] == []

    def test_cors_preflight(self, client):
        resp = client.options(
            "/api/reports",
            headers={"Origin": "http://localhost:5173", "Access-Control-Request-Method": "PUT"},
        )
        assert resp.status_code == 200
        assert resp.headers["access-control-allow-origin"] == "http://localhost:5173"

    def test_sql_store_seeded_when_empty(self):
        settings = Settings(
            report_store="sql",
            database_url="sqlite://",
            seed_sample_data=True,
            log_format="console",
        )
        with TestClient(create_app(settings)) as client:
            body = client.get("/api/reports").json()
            assert body["pagination"]["total"] == len(SAMPLE_REPORTS)

    def test_existing_reports_not_reseeded(self, mixed_repository):
        settings = Settings(report_store="memory", seed_sample_data=True, log_format="console")
        with TestClient(create_app(settings, repository=mixed_repository)) as client:
            assert client.get("/api/reports").json()["pagination"]["total"] == len(MIXED_REPORTS)

    def test_lifespan_keeps_server_signal_handlers(self, app):
        before = (signal.getsignal(signal.SIGINT), signal.getsignal(signal.SIGTERM))

        async def run():
            async with lifespan(app):
                return signal.getsignal(signal.SIGINT), signal.getsignal(signal.SIGTERM)

        assert asyncio.run(run()) == before


class TestConcurrency:
    """A slow store call runs off the event loop."""

    def test_blocking_store_does_not_stall_other_requests(self, settings):
        app = create_app(settings, repository=SlowRepository(MIXED_REPORTS))

        async def timed(client, path):
            start = time.monotonic()
            resp = await client.get(path)
            return resp.status_code, time.monotonic() - start

        async def run():
            transport = httpx.ASGITransport(app=app)
            async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
                return await asyncio.gather(
                    timed(client, "/api/reports"),
                    timed(client, "/api/reports"),
                    timed(client, "/health/live"),
                )

        start = time.monotonic()
        first, second, live = asyncio.run(run())
        elapsed = time.monotonic() - start

        assert first[0] == second[0] == live[0] == 200
        assert live[1] < 0.4
        assert elapsed < 0.9
