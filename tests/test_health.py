def test_health_reports_database(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "database": "up"}


def test_request_id_is_echoed(client):
    response = client.get("/api/health", headers={"X-Request-ID": "req-test-123"})

    assert response.headers["x-request-id"] == "req-test-123"


def test_request_id_is_generated_when_missing(client):
    response = client.get("/api/health")

    assert response.headers["x-request-id"].startswith("req-")
