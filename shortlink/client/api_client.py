"""HTTP client for the Shortlink API."""

from typing import Any, Dict, Iterable, Optional

import httpx
from loguru import logger

from shortlink.api.schemas import ShortenResponse, URLInfoResponse
from shortlink.client.config import client_settings
from shortlink.client.exceptions import APIError, ClientConnectionError, ShortCodeConflictError
from shortlink.client.local_storage import SavedURL


class ShortenerClient:
    """
    Thin synchronous wrapper over the Shortlink HTTP API.

    An existing httpx.Client (for example FastAPI's TestClient) can be passed
    in; it is then used as-is and not closed by this object.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        http_client: Optional[httpx.Client] = None,
    ):
        self.base_url = (base_url or client_settings.SERVER_URL).rstrip("/")
        self._owns_client = http_client is None
        self._http = http_client or httpx.Client(
            base_url=self.base_url,
            timeout=timeout or client_settings.TIMEOUT,
        )

    def shorten(self, url: str) -> ShortenResponse:
        data = self._post("/api/shorten", {"url": url})
        return ShortenResponse.model_validate(data)

    def update_short_code(self, old_short_code: str, new_short_code: str, original_url: str) -> None:
        """
        Rename a short code on the server.

        Raises:
            ShortCodeConflictError: If the new code is taken
            APIError: On any other error response
        """
        self._post("/api/update-shortcode", {
            "oldShortCode": old_short_code,
            "newShortCode": new_short_code,
            "originalUrl": original_url,
        })

    def delete_short_code(self, short_code: str) -> None:
        self._post("/api/delete-shortcode", {"shortCode": short_code})

    def sync_urls(self, urls: Iterable[SavedURL]) -> None:
        """Push local mappings to the server; codes it already has are kept."""
        self._post("/api/sync-urls", {
            "urls": [
                {"originalUrl": saved.original_url, "shortCode": saved.short_code}
                for saved in urls
            ]
        })

    def get_url_info(self, short_code: str) -> Optional[URLInfoResponse]:
        """Return the server's mapping for a code, or None if it is unknown."""
        try:
            data = self._request("GET", f"/api/urls/{short_code}")
        except APIError as e:
            if e.status_code == 404:
                return None
            raise
        return URLInfoResponse.model_validate(data)

    def close(self) -> None:
        if self._owns_client:
            self._http.close()

    def __enter__(self) -> "ShortenerClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _post(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("POST", path, json=payload)

    def _request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        try:
            response = self._http.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"{method} {path} failed: {e}")
            raise ClientConnectionError(f"Could not reach {self.base_url}: {e}") from e

        try:
            data = response.json()
        except ValueError:
            data = {}

        if response.is_success:
            return data

        message = data.get("error") if isinstance(data, dict) else None
        message = message or response.reason_phrase or "Request failed"
        error_id = data.get("error_id") if isinstance(data, dict) else None
        logger.debug(f"{method} {path} -> {response.status_code}: {message}")

        if response.status_code == 409:
            raise ShortCodeConflictError(response.status_code, message, error_id)
        raise APIError(response.status_code, message, error_id)
