"""User-facing flows over the local URL history.

URLHistory ties the local SavedURLStorage to the server API the way the
web front end does: shortened URLs are appended to the local history,
edits and deletions are applied locally and forwarded to the server, and
sync pushes every local mapping to the server. Nothing is ever pulled back
from the server into local storage.
"""

from typing import List, Optional

from loguru import logger

from shortlink.client.api_client import ShortenerClient
from shortlink.client.exceptions import RecordNotFoundError
from shortlink.client.local_storage import SavedURL, SavedURLStorage


def _replace_code(short_url: str, new_code: str) -> str:
    base, _, _ = short_url.rpartition("/")
    return f"{base}/{new_code}" if base else new_code


class URLHistory:
    """The saved-URL list a user sees, kept in step with the server."""

    def __init__(self, storage: SavedURLStorage, client: ShortenerClient):
        self.storage = storage
        self.client = client

    def list(self) -> List[SavedURL]:
        return self.storage.get_all()

    def get(self, record_id: str) -> SavedURL:
        saved = self.storage.get_by_id(record_id)
        if saved is None:
            raise RecordNotFoundError(f"No saved URL with id '{record_id}'")
        return saved

    def shorten(self, url: str) -> SavedURL:
        """Shorten url on the server and append the result to the history."""
        result = self.client.shorten(url)
        saved = self.storage.save(
            short_code=result.short_code,
            short_url=result.short_url,
            original_url=result.original_url,
        )
        logger.info(f"Saved {saved.short_url} -> {saved.original_url}")
        return saved

    def edit(
        self,
        record_id: str,
        original_url: Optional[str] = None,
        short_code: Optional[str] = None,
    ) -> SavedURL:
        """
        Edit a history entry.

        A changed URL is shortened again and replaces the entry's code and
        URL. Otherwise a changed short code is renamed on the server first.
        Unchanged values leave the entry untouched.

        Raises:
            RecordNotFoundError: If record_id is unknown
            ShortCodeConflictError: If the new code is taken on the server
            APIError: On other server errors
        """
        saved = self.get(record_id)

        if original_url and original_url != saved.original_url:
            result = self.client.shorten(original_url)
            updates = {
                "original_url": result.original_url,
                "short_code": result.short_code,
                "short_url": result.short_url,
            }
        elif short_code and short_code != saved.short_code:
            self.client.update_short_code(saved.short_code, short_code, saved.original_url)
            updates = {
                "short_code": short_code,
                "short_url": _replace_code(saved.short_url, short_code),
            }
        else:
            return saved

        updated = self.storage.update(record_id, **updates)
        if updated is None:
            # Removed concurrently by another process
            raise RecordNotFoundError(f"No saved URL with id '{record_id}'")
        return updated

    def delete(self, record_id: str, remote: bool = True) -> bool:
        """
        Remove an entry from the history.

        Args:
            record_id: Local id of the entry
            remote: Also delete the short code on the server

        Returns:
            bool: False if no entry had that id
        """
        saved = self.storage.get_by_id(record_id)
        if saved is None:
            return False

        if remote:
            self.client.delete_short_code(saved.short_code)
        return self.storage.delete(record_id)

    def sync(self) -> int:
        """Push every local mapping to the server and return how many were sent."""
        urls = self.storage.get_all()
        if urls:
            self.client.sync_urls(urls)
        logger.info(f"Pushed {len(urls)} saved URLs to {self.client.base_url}")
        return len(urls)

    def check(self) -> List[SavedURL]:
        """
        Report entries whose short code no longer resolves to the same URL.

        Local storage is not modified.
        """
        drifted = []
        for saved in self.storage.get_all():
            info = self.client.get_url_info(saved.short_code)
            if info is None or info.original_url != saved.original_url:
                drifted.append(saved)
        return drifted

    def clear(self) -> None:
        self.storage.clear()
