"""
Tests for FastAPI main application.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import status
from fastapi.testclient import TestClient

from ticketscan import __version__
from ticketscan.api.dependencies import get_orchestrator
from ticketscan.api.main import app, validate_startup_config
from ticketscan.exceptions import AggregationError

SEARCH_QUERY = {
    "origin": "NRT",
    "destination": "BKK",
    "departure_date": "2025-03-01",
    "return_date": "2025-03-08",
}


@pytest.fixture
def failing_orchestrator():
    """Orchestrator whose search raises, installed as a dependency override."""
    orchestrator = MagicMock()
    app.dependency_overrides[get_orchestrator] = lambda: orchestrator
    yield orchestrator
    app.dependency_overrides.clear()


@pytest.fixture
def client():
    """Test client that turns unhandled errors into 500 responses."""
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


class TestAPIRoot:
    """Test API root endpoint."""

    def test_api_root(self, client):
        """Test /api endpoint returns API information."""
        response = client.get("/api")
        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["docs"] == "/docs"
        assert data["health"] == "/health"
        assert data["api_versions"]["v1"]["prefix"] == "/api/v1"
        assert data["api_versions"]["v1"]["endpoints"]["search"] == "/api/v1/search"


class TestHealthCheck:
    """Test health check endpoint."""

    def test_health_check(self, client):
        response = client.get("/health")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["status"] == "healthy"
        assert data["version"] == __version__
        assert "environment" in data
        # The test environment carries no provider credentials
        assert data["providers"] == []
        assert data["mock_fallback"] is True


class TestExceptionHandlers:
    """Test error responses of the search pipeline."""

    def test_aggregation_error_returns_500(self, client, failing_orchestrator):
        failing_orchestrator.search = AsyncMock(
            side_effect=AggregationError("fallback broke", stage="fallback")
        )

        response = client.get("/api/v1/search", params=SEARCH_QUERY)

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        data = response.json()
        assert data["error"] == "Internal server error"
        assert "fallback broke" not in data["message"]

    def test_unhandled_error_returns_500(self, client, failing_orchestrator):
        failing_orchestrator.search = AsyncMock(side_effect=RuntimeError("unexpected"))

        response = client.get("/api/v1/search", params=SEARCH_QUERY)

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json()["error"] == "Internal server error"

    def test_debug_mode_exposes_details(self, client, failing_orchestrator):
        failing_orchestrator.search = AsyncMock(
            side_effect=AggregationError("fallback broke", stage="fallback")
        )

        with patch("ticketscan.api.main.settings.debug", True):
            response = client.get("/api/v1/search", params=SEARCH_QUERY)

        data = response.json()
        assert data["type"] == "AggregationError"
        assert "fallback broke" in data["message"]
        assert data["path"] == "/api/v1/search"


class TestCORS:
    def test_allowed_origin(self, client):
        response = client.options(
            "/health",
            headers={
                "Origin": "http://localhost:3000",
                "Access-Control-Request-Method": "GET",
            },
        )

        assert response.headers.get("access-control-allow-origin") == "http://localhost:3000"

    def test_unknown_origin(self, client):
        response = client.get("/health", headers={"Origin": "http://evil.example.com"})

        assert "access-control-allow-origin" not in response.headers


class TestStartupConfig:
    def test_warns_without_providers(self, caplog):
        with caplog.at_level("WARNING", logger="ticketscan.api.main"):
            validate_startup_config()

        messages = " ".join(record.getMessage() for record in caplog.records)
        assert "RAPIDAPI_KEY not set" in messages
        assert "mock offers" in messages
