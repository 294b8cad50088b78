"""Health check endpoints for probes and monitoring."""

import time

from fastapi import APIRouter, Depends

from shortlink.api import schemas
from shortlink.api.dependencies import get_url_repository
from shortlink.core.config import settings
from shortlink.repositories.base import URLRepository

router = APIRouter(tags=["health"])

_started_at = time.monotonic()


@router.get("/health", response_model=schemas.HealthResponse, summary="Service and store status")
async def health_check(url_repo: URLRepository = Depends(get_url_repository)):
    """Report the service version and how many mappings the store holds.

    The store lives in process memory, so a restart shows up here as the
    mapping count dropping back to zero.
    """
    try:
        store = schemas.StoreHealth(status="healthy", mappings=url_repo.count())
    except Exception as e:
        store = schemas.StoreHealth(status="unhealthy", error=str(e))

    return schemas.HealthResponse(
        status="healthy" if store.status == "healthy" else "degraded",
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT.value,
        uptime_seconds=round(time.monotonic() - _started_at, 3),
        store=store,
    )


@router.get("/health/ready", summary="Readiness probe")
async def readiness_probe(url_repo: URLRepository = Depends(get_url_repository)):
    return {"ready": url_repo is not None}


@router.get("/health/live", summary="Liveness probe")
async def liveness_probe():
    return {"alive": True}
