"""Tests for the in-memory URL repository."""

import pytest

from shortlink.repositories.base import RepositoryError
from shortlink.repositories.url_repository import InMemoryURLRepository
from tests.utils import FakeClock, random_url


def assert_bijective(repo: InMemoryURLRepository) -> None:
    mappings = repo.get_all()
    codes = [m.short_code for m in mappings]
    urls = [m.original_url for m in mappings]
    assert len(set(codes)) == len(codes) == repo.count()
    assert len(set(urls)) == len(urls)
    for mapping in mappings:
        assert repo.get_by_short_code(mapping.short_code) == mapping.original_url
        assert repo.get_by_original_url(mapping.original_url) == mapping.short_code


@pytest.mark.repository
class TestURLRepository:
    """Test suite for the mapping store."""

    def test_put_and_lookup(self, url_repository, clock):
        """Test both lookup directions after insertion."""
        test_url = random_url()

        mapping = url_repository.put(test_url, "abc1234")

        assert mapping.short_code == "abc1234"
        assert mapping.original_url == test_url
        assert mapping.created_at == clock.now
        assert url_repository.get_by_short_code("abc1234") == test_url
        assert url_repository.get_by_original_url(test_url) == "abc1234"
        assert url_repository.check_short_code_exists("abc1234") is True
        assert url_repository.check_original_url_exists(test_url) is True

    def test_lookup_nonexistent(self, url_repository):
        """Test lookups of values that were never stored."""
        assert url_repository.get_by_short_code("missing") is None
        assert url_repository.get_by_original_url("https://missing.example") is None
        assert url_repository.get_mapping("missing") is None
        assert url_repository.check_short_code_exists("missing") is False

    def test_put_rejects_empty_values(self, url_repository):
        with pytest.raises(RepositoryError):
            url_repository.put("", "abc1234")
        with pytest.raises(RepositoryError):
            url_repository.put(random_url(), "")

    def test_put_overwriting_code_releases_old_url(self, url_repository):
        """Test that rebinding a code drops the URL it used to point at."""
        first_url = random_url()
        second_url = random_url()
        url_repository.put(first_url, "code001")

        url_repository.put(second_url, "code001")

        assert url_repository.get_by_short_code("code001") == second_url
        assert url_repository.get_by_original_url(first_url) is None
        assert_bijective(url_repository)

    def test_put_rebinding_url_releases_old_code(self, url_repository):
        """Test that giving a URL a new code drops its previous code."""
        test_url = random_url()
        url_repository.put(test_url, "code001")

        url_repository.put(test_url, "code002")

        assert url_repository.get_by_short_code("code001") is None
        assert url_repository.get_by_original_url(test_url) == "code002"
        assert_bijective(url_repository)

    def test_rename(self, url_repository):
        """Test moving a URL to a new code."""
        test_url = random_url()
        url_repository.put(test_url, "oldcode")

        assert url_repository.rename_short_code("oldcode", "newcode", test_url) is True

        assert url_repository.get_by_short_code("oldcode") is None
        assert url_repository.get_mapping("oldcode") is None
        assert url_repository.get_by_short_code("newcode") == test_url
        assert url_repository.get_by_original_url(test_url) == "newcode"
        assert_bijective(url_repository)

    def test_rename_conflict_leaves_store_untouched(self, url_repository):
        """Test that renaming onto another mapping's code fails."""
        first_url = random_url()
        second_url = random_url()
        url_repository.put(first_url, "first01")
        url_repository.put(second_url, "second1")
        before = url_repository.get_all()

        assert url_repository.rename_short_code("first01", "second1", first_url) is False

        assert url_repository.get_all() == before
        assert url_repository.get_by_short_code("first01") == first_url
        assert url_repository.get_by_short_code("second1") == second_url

    def test_rename_to_itself(self, url_repository):
        test_url = "https://x.com"
        url_repository.put(test_url, "abc1234")

        assert url_repository.rename_short_code("abc1234", "abc1234", test_url) is True
        assert url_repository.get_by_short_code("abc1234") == test_url
        assert url_repository.count() == 1

    def test_rename_unknown_old_code_creates_mapping(self, url_repository):
        test_url = random_url()

        assert url_repository.rename_short_code("ghost", "fresh01", test_url) is True
        assert url_repository.get_by_short_code("fresh01") == test_url
        assert_bijective(url_repository)

    def test_rename_resets_created_at(self, url_repository, clock):
        test_url = random_url()
        url_repository.put(test_url, "oldcode")
        renamed_at = clock.advance(hours=3)

        url_repository.rename_short_code("oldcode", "newcode", test_url)

        assert url_repository.get_mapping("newcode").created_at == renamed_at

    def test_rename_can_preserve_created_at(self):
        clock = FakeClock()
        repo = InMemoryURLRepository(clock=clock, preserve_created_at_on_rename=True)
        test_url = random_url()
        created = repo.put(test_url, "oldcode").created_at
        clock.advance(hours=3)

        repo.rename_short_code("oldcode", "newcode", test_url)

        assert repo.get_mapping("newcode").created_at == created

    def test_remove(self, url_repository):
        """Test deletion of both directions."""
        test_url = random_url()
        url_repository.put(test_url, "gone123")

        url_repository.remove_by_short_code("gone123")

        assert url_repository.get_by_short_code("gone123") is None
        assert url_repository.get_by_original_url(test_url) is None
        assert url_repository.count() == 0

    def test_remove_nonexistent_is_noop(self, url_repository):
        url_repository.put(random_url(), "keep123")

        url_repository.remove_by_short_code("nothere")

        assert url_repository.count() == 1

    def test_get_all_in_creation_order(self, url_repository, clock):
        for code in ("first01", "second1", "third01"):
            url_repository.put(random_url(), code)
            clock.advance(minutes=1)

        assert [m.short_code for m in url_repository.get_all()] == ["first01", "second1", "third01"]
