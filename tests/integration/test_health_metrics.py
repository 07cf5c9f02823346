"""Integration tests for /health, /healthz and /metrics endpoints."""

from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from planassist.main import app


@pytest.fixture
def client() -> TestClient:
    """Create test client."""
    return TestClient(app)


class TestHealthEndpoint:
    """Test health endpoints."""

    def test_health_always_ok(self, client: TestClient) -> None:
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    @patch("planassist.api.routes.health.check_db", new_callable=AsyncMock)
    def test_healthz_returns_200_when_db_ok(self, mock_check_db: AsyncMock, client: TestClient) -> None:
        mock_check_db.return_value = (True, "ok")

        response = client.get("/healthz")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["components"]["db"] == "ok"
        assert data["components"]["generation"] in {"openai", "stub"}

    @patch("planassist.api.routes.health.check_db", new_callable=AsyncMock)
    def test_healthz_returns_503_when_db_fails(
        self, mock_check_db: AsyncMock, client: TestClient
    ) -> None:
        mock_check_db.return_value = (False, "error: OperationalError")

        response = client.get("/healthz")

        assert response.status_code == 503
        data = response.json()
        assert data["status"] == "degraded"
        assert data["components"]["db"] == "error: OperationalError"

    def test_root(self, client: TestClient) -> None:
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["message"] == "Plan Content Intelligence API"


class TestMetricsEndpoint:
    """Test /metrics endpoint."""

    def test_metrics_exposes_content_metrics(self, client: TestClient) -> None:
        response = client.get("/metrics")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        body = response.text
        for name in (
            "retrieval_stage",
            "generation_latency_ms",
            "generation_errors",
            "extraction_errors",
        ):
            assert name in body

    def test_metrics_lists_every_retrieval_stage(self, client: TestClient) -> None:
        response = client.get("/metrics")

        body = response.text
        for plan_type in ("IEP", "FIVE_OH_FOUR", "BEHAVIOR_PLAN"):
            for stage in ("exact", "relaxed", "generic", "exhausted"):
                assert f'retrieval_stage_total{{plan_type="{plan_type}",stage="{stage}"}}' in body
