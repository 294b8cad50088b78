"""Base repository definitions for the Shortlink application.

This module provides the abstract URLRepository contract that every mapping
store backend implements, and the repository exception hierarchy.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from shortlink.models.url import UrlMapping


class RepositoryError(Exception):
    """Base exception for repository errors."""
    pass


class URLRepository(ABC):
    """
    Contract for the bidirectional short code <-> URL mapping store.

    Implementations must keep the mapping bijective: every live short code
    resolves to exactly one original URL and every stored original URL
    resolves back to exactly one short code.
    """

    @abstractmethod
    def put(self, original_url: str, short_code: str) -> UrlMapping:
        """Bind short_code to original_url, overwriting either side."""

    @abstractmethod
    def get_by_short_code(self, short_code: str) -> Optional[str]:
        """Return the original URL for a code, or None."""

    @abstractmethod
    def get_by_original_url(self, original_url: str) -> Optional[str]:
        """Return the short code for a URL, or None."""

    @abstractmethod
    def get_mapping(self, short_code: str) -> Optional[UrlMapping]:
        """Return the full mapping for a code, or None."""

    @abstractmethod
    def check_short_code_exists(self, short_code: str) -> bool:
        """Check whether a code is currently bound."""

    @abstractmethod
    def check_original_url_exists(self, original_url: str) -> bool:
        """Check whether a URL currently has a code."""

    @abstractmethod
    def rename_short_code(self, old_code: str, new_code: str, original_url: str) -> bool:
        """Move original_url from old_code to new_code.

        Returns:
            False if new_code is taken by another mapping, True otherwise
        """

    @abstractmethod
    def remove_by_short_code(self, short_code: str) -> None:
        """Delete a mapping; no-op when the code is unknown."""

    @abstractmethod
    def get_all(self) -> List[UrlMapping]:
        """Return every mapping in creation order."""

    @abstractmethod
    def count(self) -> int:
        """Return the number of live mappings."""
