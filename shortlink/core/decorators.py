"""Decorators shared by route handlers."""

import functools

from fastapi import HTTPException, Request

from shortlink.core.url_logger import log_url_access
from shortlink.middleware.logging import get_client_ip


def log_url_access_decorator():
    """Write an access log entry for every call of a redirect endpoint.

    The wrapped endpoint must accept ``request`` and ``short_code`` keyword
    arguments. Misses are logged with their status and the HTTPException is
    re-raised unchanged.
    """
    def decorator(func):
        @functools.wraps(func)
        async def wrapper(request: Request, short_code: str, *args, **kwargs):
            access = dict(
                short_code=short_code,
                ip_address=get_client_ip(request),
                user_agent=request.headers.get("user-agent", ""),
            )
            try:
                response = await func(*args, request=request, short_code=short_code, **kwargs)
            except HTTPException as e:
                log_url_access(status_code=e.status_code, **access)
                raise

            log_url_access(
                status_code=response.status_code,
                original_url=response.headers.get("location"),
                **access,
            )
            return response
        return wrapper
    return decorator
