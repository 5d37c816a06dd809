"""
API Endpoint Tests

Tests for the diagnostics API using TestClient. Each test gets a fresh
engine through the application lifespan.
"""

import pytest
from fastapi.testclient import TestClient

from main import app


FAST = {"type": "navigation/NAVIGATE", "success": True, "duration_ms": 150}


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def client(monkeypatch):
    """TestClient for FastAPI app with lifespan context."""
    monkeypatch.delenv("COGNITIVE_DEBUG_MODE", raising=False)
    with TestClient(app, raise_server_exceptions=False) as client:
        yield client


# =============================================================================
# Health Check Tests
# =============================================================================

class TestHealthEndpoint:
    """Test health check endpoint."""

    def test_health_returns_200(self, client):
        """Health endpoint should return 200."""
        response = client.get("/health")
        assert response.status_code == 200

        data = response.json()
        assert data["status"] == "healthy"
        assert "version" in data

        print(f"\n✅ Health check passed: {data}")


# =============================================================================
# Action Ingestion Tests
# =============================================================================

class TestActionsEndpoint:
    """Test action dispatch endpoint."""

    def test_valid_action_returns_204(self, client):
        """Valid action should return 204 No Content."""
        response = client.post("/actions", json=FAST)

        assert response.status_code == 204
        assert response.content == b""

    def test_missing_type_returns_422(self, client):
        """Action without type should fail validation."""
        response = client.post("/actions", json={"payload": {"direction": "left"}})
        assert response.status_code == 422

    def test_blank_type_returns_422(self, client):
        response = client.post("/actions", json={"type": "  "})
        assert response.status_code == 422

    def test_bad_optional_fields_are_accepted(self, client):
        """Ill-typed optional fields are dropped, not rejected."""
        response = client.post("/actions", json={
            "type": "navigation/NAVIGATE",
            "duration_ms": -5,
            "success": "maybe",
            "id": 42,
        })
        assert response.status_code == 204
        assert client.get("/metrics").json()["totalActions"] == 1

    def test_rejected_action_is_not_recorded(self, client):
        client.post("/actions", json={})

        metrics = client.get("/metrics").json()
        assert metrics["totalActions"] == 0

    def test_sustained_fast_actions_concentrate(self, client):
        """Seven fast, accurate actions should reach the concentrated state."""
        for _ in range(7):
            assert client.post("/actions", json=FAST).status_code == 204

        cognitive = client.get("/state").json()["cognitive"]
        assert cognitive["current_state"] == "concentrated"
        assert cognitive["confidence"] == pytest.approx(0.5)

        print(f"\n✅ State after 7 actions: {cognitive['current_state']}")


# =============================================================================
# Diagnostics Tests
# =============================================================================

class TestDiagnosticsEndpoints:
    """Test read-only state, metrics and classifier endpoints."""

    def test_state_has_every_slice(self, client):
        data = client.get("/state").json()
        assert set(data) == {"cognitive", "navigation", "input", "action_log"}

    def test_navigation_action_moves_carousel(self, client):
        client.post("/actions", json={
            "type": "navigation/NAVIGATE",
            "payload": {"direction": "right", "source": "keyboard"},
            "success": True,
        })

        navigation = client.get("/state").json()["navigation"]
        assert navigation["current_card"] == 1
        assert navigation["last_source"] == "keyboard"

    def test_metrics_use_camel_case(self, client):
        client.post("/actions", json=FAST)
        client.post("/actions", json={"type": "navigation/ERROR", "duration_ms": 250})

        metrics = client.get("/metrics").json()
        assert metrics["totalActions"] == 2
        assert metrics["recentErrors"] == 1
        assert metrics["errorRate"] == pytest.approx(0.5)
        assert metrics["averageDuration"] == pytest.approx(200.0)

    def test_metrics_window_parameter(self, client):
        client.post("/actions", json={"type": "a", "success": False})
        client.post("/actions", json={"type": "b", "success": True})

        metrics = client.get("/metrics", params={"window": 1}).json()
        assert metrics["totalActions"] == 1
        assert metrics["errorRate"] == 0.0

    def test_invalid_window_returns_422(self, client):
        assert client.get("/metrics", params={"window": 0}).status_code == 422

    def test_classifier_snapshot(self, client):
        client.post("/actions", json=FAST)
        data = client.get("/classifier").json()

        assert data["current_state"] == "neutral"
        assert data["history"]["current_size"] == 1


# =============================================================================
# Reset Tests
# =============================================================================

class TestResetEndpoint:
    """Test session reset."""

    def test_reset_returns_to_neutral(self, client):
        for _ in range(7):
            client.post("/actions", json=FAST)

        response = client.post("/reset")
        assert response.status_code == 204

        assert client.get("/state").json()["cognitive"]["current_state"] == "neutral"
        assert client.get("/metrics").json()["totalActions"] == 0
