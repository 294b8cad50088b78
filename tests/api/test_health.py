"""Tests for health check endpoints."""

import pytest

from shortlink.core.config import settings


@pytest.mark.api
class TestHealth:
    def test_health_check(self, client, url_repository):
        url_repository.put("https://a.com", "abc1234")

        response = client.get(f"{settings.API_PREFIX}/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["version"] == settings.APP_VERSION
        assert data["store"]["status"] == "healthy"
        assert data["store"]["mappings"] == 1
        assert data["uptime_seconds"] >= 0

    def test_readiness(self, client):
        response = client.get(f"{settings.API_PREFIX}/health/ready")

        assert response.status_code == 200
        assert response.json()["ready"] is True

    def test_liveness(self, client):
        response = client.get(f"{settings.API_PREFIX}/health/live")

        assert response.json() == {"alive": True}
