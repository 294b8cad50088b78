"""Repository layer for the Shortlink application.

This module provides the mapping store contract and its in-memory
implementation, following the Repository pattern for clean separation
of concerns.
"""

from shortlink.repositories.base import (
    RepositoryError,
    URLRepository,
)
from shortlink.repositories.url_repository import InMemoryURLRepository

__all__ = [
    # Base classes and exceptions
    "RepositoryError",
    "URLRepository",

    # Concrete repositories
    "InMemoryURLRepository",
]
