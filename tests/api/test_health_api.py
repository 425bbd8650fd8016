"""
Tests for health endpoints.
"""


class TestHealthEndpoints:

    def test_simple_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "service": "gigboard"}

    def test_detailed_health(self, client):
        response = client.get("/api/v1/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "healthy"
        assert body["redis"] == "disabled"

    def test_process_time_header(self, client):
        response = client.get("/health")
        assert "x-process-time" in response.headers
