"""Service layer for the Shortlink application.

This package contains service classes implementing the business logic of the application.
Services orchestrate interactions with the repositories and provide domain-specific operations.
"""

from shortlink.services.shortener import ShortenedURLService

__all__ = ["ShortenedURLService"]
