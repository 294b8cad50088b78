"""API dependencies for FastAPI.

This module provides dependency injection functions for FastAPI endpoints
to access the mapping store and service instances.
"""

from fastapi import Depends, Request

from shortlink.core.config import settings
from shortlink.repositories.base import URLRepository
from shortlink.services.shortener import ShortenedURLService


def get_url_repository(request: Request) -> URLRepository:
    """Get the mapping store attached to the running application."""
    return request.app.state.url_repository


def get_shortener_service(
    url_repo: URLRepository = Depends(get_url_repository),
) -> ShortenedURLService:
    """Get an instance of the URL shortening service."""
    return ShortenedURLService(url_repository=url_repo)


def get_base_url(request: Request) -> str:
    """Get the base URL for shortened links.

    BASE_URL wins when configured, otherwise the origin the request came in on.
    """
    if settings.BASE_URL:
        return settings.BASE_URL
    return str(request.base_url).rstrip("/")
