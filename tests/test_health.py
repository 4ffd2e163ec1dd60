"""
Tests for the public health check and app-level error format.
"""

from fastapi.testclient import TestClient

from nomnom.main import app

client = TestClient(app)


def test_health_is_public():
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "service": "nomnom-backend"}


def test_error_body_is_flat():
    """HTTPException details are returned as {"error", "details"}."""
    response = client.get("/profile")

    assert response.status_code == 401
    assert set(response.json().keys()) == {"error", "details"}


def test_unknown_route_keeps_error_shape():
    response = client.get("/does-not-exist")

    assert response.status_code == 404
    assert response.json()["error"] == "http_error"
