"""
Tests for the health check endpoint.
"""


def test_health_check_returns_200(client):
    response = client.get("/health")
    assert response.status_code == 200


def test_health_check_returns_service_name(client):
    response = client.get("/health")
    assert response.json()["service"] == "wallet-ledger"


def test_health_check_reports_database_status(client):
    """Monitoring parses this field to detect database outages."""
    data = client.get("/health").json()
    assert data["database"] == "healthy"
    assert data["status"] == "healthy"


def test_responses_carry_request_id(client):
    response = client.get("/health")
    assert response.headers["X-Request-ID"].startswith("req_")
