"""Client-side persisted history of shortened URLs.

LocalStorage emulates the browser's localStorage: a string-to-string map
persisted as one JSON file. SavedURLStorage keeps the user's history as a
JSON-encoded list under a single key. This cache is advisory; the server
never reads it back except through an explicit sync push.
"""

import json
import os
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional, Union

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError
from pydantic.alias_generators import to_camel

STORAGE_KEY = "url-shortener-urls"


def _now() -> datetime:
    return datetime.now(timezone.utc)


class SavedURL(BaseModel):
    """One entry of the local history list."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    short_code: str
    short_url: str
    original_url: str
    created_at: datetime = Field(default_factory=_now)
    updated_at: datetime = Field(default_factory=_now)


_saved_url_list = TypeAdapter(List[SavedURL])


class LocalStorage:
    """File-backed key/value store with the localStorage API."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def get_item(self, key: str) -> Optional[str]:
        """
        Return the value stored under key, or None.

        Raises:
            OSError: If the storage file cannot be read
            ValueError: If the storage file is not a JSON object
        """
        return self._read().get(key)

    def set_item(self, key: str, value: str) -> None:
        """
        Store value under key, replacing the whole file.

        Raises:
            OSError: If the storage file cannot be written
        """
        try:
            data = self._read()
        except ValueError:
            logger.warning(f"Discarding unreadable local storage at {self.path}")
            data = {}
        data[key] = value
        self._write(data)

    def remove_item(self, key: str) -> None:
        try:
            data = self._read()
        except ValueError:
            data = {}
        if data.pop(key, None) is not None:
            self._write(data)

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        with self.path.open("r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"{self.path} does not hold a JSON object")
        return data

    def _write(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with tmp_path.open("w", encoding="utf-8") as f:
            json.dump(data, f)
        # Last writer wins across processes
        os.replace(tmp_path, self.path)


class SavedURLStorage:
    """
    The user's shortened-URL history, kept under a single storage key.

    Records keep insertion order. Unreadable storage is logged and treated
    as an empty history so the client keeps working.
    """

    def __init__(self, storage: LocalStorage, key: str = STORAGE_KEY):
        self.storage = storage
        self.key = key

    def get_all(self) -> List[SavedURL]:
        try:
            data = self.storage.get_item(self.key)
            if not data:
                return []
            return _saved_url_list.validate_json(data)
        except (OSError, ValueError, ValidationError) as e:
            logger.error(f"Error reading from local storage: {e}")
            return []

    def save(self, short_code: str, short_url: str, original_url: str) -> SavedURL:
        """Append a new record with a fresh id and timestamps."""
        urls = self.get_all()
        saved = SavedURL(
            short_code=short_code,
            short_url=short_url,
            original_url=original_url,
        )
        urls.append(saved)
        self.set_all(urls)
        return saved

    def update(self, record_id: str, **updates) -> Optional[SavedURL]:
        """
        Update fields of the record with the given id.

        The id and createdAt never change; updatedAt is refreshed.

        Returns:
            The updated record, or None if no record has that id
        """
        urls = self.get_all()
        for index, saved in enumerate(urls):
            if saved.id == record_id:
                updates.pop("id", None)
                updates.pop("created_at", None)
                updates["updated_at"] = _now()
                urls[index] = saved.model_copy(update=updates)
                self.set_all(urls)
                return urls[index]
        return None

    def delete(self, record_id: str) -> bool:
        urls = self.get_all()
        remaining = [saved for saved in urls if saved.id != record_id]
        if len(remaining) == len(urls):
            return False
        self.set_all(remaining)
        return True

    def get_by_id(self, record_id: str) -> Optional[SavedURL]:
        return next((saved for saved in self.get_all() if saved.id == record_id), None)

    def get_by_short_code(self, short_code: str) -> Optional[SavedURL]:
        return next((saved for saved in self.get_all() if saved.short_code == short_code), None)

    def set_all(self, urls: List[SavedURL]) -> None:
        try:
            payload = _saved_url_list.dump_json(urls, by_alias=True).decode("utf-8")
            self.storage.set_item(self.key, payload)
        except OSError as e:
            logger.error(f"Error writing to local storage: {e}")

    def clear(self) -> None:
        try:
            self.storage.remove_item(self.key)
        except OSError as e:
            logger.error(f"Error clearing local storage: {e}")
