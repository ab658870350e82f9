"""
Tests for health and version endpoints
"""
from presence.core.constants import SERVICE_NAME


def test_health_endpoint(client):
    """Test health endpoint returns correct response"""
    response = client.get("/api/v1/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "service": SERVICE_NAME}


def test_version_endpoint(client):
    response = client.get("/api/v1/version")

    assert response.status_code == 200
    data = response.json()
    assert data["service"] == SERVICE_NAME
    assert data["env"] == "local"
    assert data["tz"] == "Asia/Jakarta"
    assert "version" in data


def test_unknown_route_uses_error_format(client):
    response = client.get("/api/v1/does-not-exist")

    assert response.status_code == 404
    data = response.json()
    assert data["error"] is True
    assert data["status_code"] == 404
    assert data["path"] == "/api/v1/does-not-exist"
