"""Test fixtures for the Shortlink application."""

import os

# Settings are read at import time, so configure the environment first
os.environ["ENVIRONMENT"] = "testing"
os.environ["LOG_FILE_ENABLED"] = "false"
os.environ["OTEL_ENABLED"] = "false"
os.environ["BASE_URL"] = ""

import pytest
from typing import Generator
from fastapi import FastAPI
from fastapi.testclient import TestClient

from shortlink.main import create_app
from shortlink.repositories.url_repository import InMemoryURLRepository
from shortlink.services.shortener import ShortenedURLService
from tests.utils import FakeClock


@pytest.fixture
def clock() -> FakeClock:
    """Return a controllable clock for the mapping store."""
    return FakeClock()


@pytest.fixture
def url_repository(clock) -> InMemoryURLRepository:
    """Return an empty in-memory mapping store."""
    return InMemoryURLRepository(clock=clock)


@pytest.fixture
def shortener_service(url_repository) -> ShortenedURLService:
    """Return a shortening service over the test store."""
    return ShortenedURLService(url_repository=url_repository)


@pytest.fixture
def test_app(url_repository) -> FastAPI:
    """Create a FastAPI app serving the test store."""
    return create_app(url_repository=url_repository)


@pytest.fixture
def client(test_app) -> Generator[TestClient, None, None]:
    """Return FastAPI TestClient instance."""
    with TestClient(test_app) as test_client:
        yield test_client
