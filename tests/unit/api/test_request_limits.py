"""Tests for API request size limits and the health endpoint."""

from fastapi.testclient import TestClient

from cpamm import __version__
from cpamm.api.main import MAX_REQUEST_SIZE, app, configure_logging
from tests.helpers import BOB, TOKEN_A, TOKEN_B


class TestRequestSizeLimits:
    """Request body size limit."""

    def test_oversized_request_returns_413(self):
        """Request with Content-Length exceeding limit returns 413."""
        client = TestClient(app)
        response = client.post(
            "/swap",
            json={"caller": BOB, "assetIn": TOKEN_A, "assetOut": TOKEN_B, "amountIn": "1"},
            headers={"Content-Length": str(MAX_REQUEST_SIZE + 1)},
        )
        assert response.status_code == 413
        assert response.json()["detail"] == "Request too large"


class TestHealthEndpoint:
    """Health endpoint."""

    def test_health_returns_ok(self):
        """Health endpoint returns ok status and the package version."""
        client = TestClient(app)
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok", "version": __version__}


class TestLogging:
    """structlog configuration."""

    def test_configure_logging_accepts_levels(self):
        """Known and unknown level names both configure cleanly."""
        configure_logging("DEBUG")
        configure_logging("NOT_A_LEVEL")
        configure_logging("INFO")
