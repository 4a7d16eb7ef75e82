"""Tests for health check endpoints."""


def test_health_check(client):
    """Test basic health check."""
    response = client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["code"] == 200
    assert body["message"] == "success"
    assert body["data"] == {"status": "ok"}


def test_readiness_check(client):
    """Test readiness reports the database as reachable."""
    response = client.get("/health/ready")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["status"] == "ready"
    assert data["checks"]["database"] is True


def test_readiness_check_database_down(client, app, monkeypatch):
    """Test readiness turns 503 when the database stops answering."""
    monkeypatch.setattr(app.state.database, "ping", lambda: False)

    response = client.get("/health/ready")

    assert response.status_code == 503
    body = response.json()
    assert body["code"] == 503
    assert body["data"]["status"] == "not_ready"


def test_root_endpoint(client):
    """Test root endpoint returns API info."""
    response = client.get("/")

    assert response.status_code == 200
    data = response.json()["data"]
    assert "name" in data
    assert "version" in data
    assert "docs" in data
