"""Route collection for the application.

The JSON API lives under API_PREFIX. The redirect router is mounted last at
the root so its catch-all /{short_code} never shadows an API path.
"""

from fastapi import APIRouter

from shortlink.api.routes import health, redirect, shortener
from shortlink.core.config import settings

api_router = APIRouter()

for router in (shortener.router, health.router):
    api_router.include_router(router, prefix=settings.API_PREFIX)

api_router.include_router(redirect.router)

__all__ = ["api_router"]
