"""Tests for short code redirection."""

import httpx
import pytest
import pytest_asyncio

from shortlink.core.config import settings


@pytest_asyncio.fixture
async def async_client(test_app):
    """Async HTTP client bound to the test application."""
    transport = httpx.ASGITransport(app=test_app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac


@pytest.mark.api
class TestRedirect:
    """Tests for GET /{short_code}."""

    @pytest.mark.asyncio
    async def test_redirect(self, async_client):
        created = await async_client.post(f"{settings.API_PREFIX}/shorten", json={"url": "https://a.com/page?q=1"})
        code = created.json()["shortCode"]

        response = await async_client.get(f"/{code}")

        assert response.status_code == 301
        assert response.headers["location"] == "https://a.com/page?q=1"

    @pytest.mark.asyncio
    async def test_redirect_unknown_code(self, async_client):
        response = await async_client.get("/nothere")

        assert response.status_code == 404
        assert response.json() == {"error": "Short URL not found"}

    @pytest.mark.asyncio
    async def test_redirect_after_delete(self, async_client):
        created = await async_client.post(f"{settings.API_PREFIX}/shorten", json={"url": "https://a.com"})
        code = created.json()["shortCode"]
        await async_client.post(f"{settings.API_PREFIX}/delete-shortcode", json={"shortCode": code})

        response = await async_client.get(f"/{code}")

        assert response.status_code == 404

    def test_redirect_sync_client(self, client, url_repository):
        url_repository.put("https://x.com", "abc1234")

        response = client.get("/abc1234", follow_redirects=False)

        assert response.status_code == 301
        assert response.headers["location"] == "https://x.com"

    def test_api_prefix_is_not_a_short_code(self, client):
        response = client.get(f"{settings.API_PREFIX}/health/live", follow_redirects=False)

        assert response.status_code == 200
        assert response.json() == {"alive": True}
