"""Tests for the client's local URL history storage."""

import json

import pytest

from shortlink.client.local_storage import STORAGE_KEY, LocalStorage, SavedURLStorage


@pytest.fixture
def storage_path(tmp_path):
    return tmp_path / "local_storage.json"


@pytest.fixture
def saved_urls(storage_path) -> SavedURLStorage:
    return SavedURLStorage(LocalStorage(storage_path))


@pytest.mark.client
class TestLocalStorage:
    """Tests for the file-backed key/value store."""

    def test_missing_file_reads_as_empty(self, storage_path):
        assert LocalStorage(storage_path).get_item("anything") is None

    def test_set_get_remove(self, storage_path):
        storage = LocalStorage(storage_path)

        storage.set_item("key", "value")
        assert storage.get_item("key") == "value"
        assert json.loads(storage_path.read_text()) == {"key": "value"}

        storage.remove_item("key")
        assert storage.get_item("key") is None

    def test_keys_are_independent(self, storage_path):
        storage = LocalStorage(storage_path)
        storage.set_item("a", "1")
        storage.set_item("b", "2")

        storage.remove_item("a")

        assert storage.get_item("b") == "2"

    def test_creates_parent_directory(self, tmp_path):
        storage = LocalStorage(tmp_path / "nested" / "dir" / "store.json")

        storage.set_item("key", "value")

        assert storage.get_item("key") == "value"

    def test_non_object_file_is_rejected(self, storage_path):
        storage_path.write_text("[1, 2, 3]")

        with pytest.raises(ValueError):
            LocalStorage(storage_path).get_item("key")

    def test_set_item_replaces_unreadable_file(self, storage_path):
        storage_path.write_text("{not json")
        storage = LocalStorage(storage_path)

        storage.set_item("key", "value")

        assert storage.get_item("key") == "value"


@pytest.mark.client
class TestSavedURLStorage:
    """Tests for the saved URL history."""

    def test_empty_history(self, saved_urls):
        assert saved_urls.get_all() == []

    def test_save_appends_in_order(self, saved_urls):
        first = saved_urls.save("abc1234", "http://testserver/abc1234", "https://a.com")
        second = saved_urls.save("def5678", "http://testserver/def5678", "https://b.com")

        urls = saved_urls.get_all()

        assert [u.id for u in urls] == [first.id, second.id]
        assert first.id != second.id

    def test_stored_under_camel_case_key(self, saved_urls, storage_path):
        saved_urls.save("abc1234", "http://testserver/abc1234", "https://a.com")

        raw = json.loads(storage_path.read_text())
        records = json.loads(raw[STORAGE_KEY])

        assert records[0]["shortCode"] == "abc1234"
        assert records[0]["shortUrl"] == "http://testserver/abc1234"
        assert records[0]["originalUrl"] == "https://a.com"
        assert set(records[0]) == {"id", "shortCode", "shortUrl", "originalUrl", "createdAt", "updatedAt"}

    def test_corrupt_history_reads_as_empty(self, saved_urls, storage_path):
        storage_path.write_text(json.dumps({STORAGE_KEY: "this is not json"}))

        assert saved_urls.get_all() == []

    def test_unreadable_file_reads_as_empty(self, saved_urls, storage_path):
        storage_path.write_text("{broken")

        assert saved_urls.get_all() == []

    def test_update_keeps_id_and_created_at(self, saved_urls):
        saved = saved_urls.save("abc1234", "http://testserver/abc1234", "https://a.com")

        updated = saved_urls.update(
            saved.id,
            short_code="myLink1",
            id="hijacked",
            created_at=None,
        )

        assert updated.id == saved.id
        assert updated.created_at == saved.created_at
        assert updated.short_code == "myLink1"
        assert updated.updated_at >= saved.updated_at
        assert saved_urls.get_by_id(saved.id).short_code == "myLink1"

    def test_update_unknown_id(self, saved_urls):
        assert saved_urls.update("missing", short_code="x") is None

    def test_delete(self, saved_urls):
        keep = saved_urls.save("abc1234", "http://testserver/abc1234", "https://a.com")
        gone = saved_urls.save("def5678", "http://testserver/def5678", "https://b.com")

        assert saved_urls.delete(gone.id) is True
        assert saved_urls.delete(gone.id) is False
        assert [u.id for u in saved_urls.get_all()] == [keep.id]

    def test_get_by_short_code(self, saved_urls):
        saved = saved_urls.save("abc1234", "http://testserver/abc1234", "https://a.com")

        assert saved_urls.get_by_short_code("abc1234").id == saved.id
        assert saved_urls.get_by_short_code("nothere") is None

    def test_clear(self, saved_urls, storage_path):
        saved_urls.save("abc1234", "http://testserver/abc1234", "https://a.com")
        LocalStorage(storage_path).set_item("other", "kept")

        saved_urls.clear()

        assert saved_urls.get_all() == []
        assert LocalStorage(storage_path).get_item("other") == "kept"
