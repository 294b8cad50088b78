"""Main application module.

This module builds the FastAPI application, includes routes,
and configures middleware and exception handlers.
"""

import time
from typing import Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from shortlink.api import api_router
from shortlink.core.config import settings
from shortlink.core.logging import setup_logging
from shortlink.core.telemetry import setup_telemetry, shutdown_telemetry
from shortlink.core.url_logger import setup_url_logging, shutdown_url_logging
from shortlink.middleware.logging import add_logging_middleware
from shortlink.middleware.tracing import TracingMiddleware
from shortlink.repositories.base import URLRepository
from shortlink.repositories.url_repository import InMemoryURLRepository


def _describe_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "invalid value")
    return f"Invalid request: {location}: {message}" if location else f"Invalid request: {message}"


def create_app(url_repository: Optional[URLRepository] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        url_repository: Mapping store to serve from; a fresh in-memory store
            is created when omitted

    Returns:
        FastAPI: The configured application
    """
    setup_logging()

    app = FastAPI(
        title=settings.APP_NAME,
        description=settings.APP_DESCRIPTION,
        version=settings.APP_VERSION,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
    )

    if url_repository is None:
        url_repository = InMemoryURLRepository(
            preserve_created_at_on_rename=settings.RENAME_PRESERVES_CREATED_AT
        )
    app.state.url_repository = url_repository

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if settings.OTEL_ENABLED:
        app.add_middleware(TracingMiddleware)

    if settings.REQUEST_LOGGING_ENABLED:
        add_logging_middleware(app)

    app.include_router(api_router)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Report malformed request bodies as 400 with a readable message."""
        logger.warning(f"Request validation error on {request.method} {request.url.path}: {exc.errors()}")
        return JSONResponse(
            status_code=400,
            content={"error": _describe_validation_error(exc)}
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Global exception handler to catch and log all unhandled exceptions."""
        error_id = f"error-{time.time()}"

        logger.bind(
            error_id=error_id,
            url=str(request.url),
            path_params=request.path_params,
            client_host=request.client.host if request.client else None
        ).opt(exception=exc).error(
            f"Unhandled exception in {request.method} {request.url.path}"
        )

        return JSONResponse(
            status_code=500,
            content={
                "error": str(exc) if settings.DEBUG else "Internal server error",
                "error_id": error_id,
            }
        )

    @app.on_event("startup")
    async def startup_event():
        """Run startup tasks."""
        logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
        logger.info(f"Environment: {settings.ENVIRONMENT.value}")
        logger.info(f"Debug mode: {settings.DEBUG}")

        setup_url_logging()
        logger.info("URL access logging initialized")

        setup_telemetry()

    @app.on_event("shutdown")
    async def shutdown_event():
        """Run cleanup tasks."""
        logger.info(f"Shutting down {settings.APP_NAME}")
        shutdown_url_logging()
        shutdown_telemetry()

    return app


app = create_app()
