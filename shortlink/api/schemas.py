"""API request and response schemas.

This module contains Pydantic models for API request validation
and response serialization. Fields use camelCase on the wire.
"""

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictStr
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model exchanging camelCase JSON while using snake_case in Python."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ShortenRequest(CamelModel):
    """Request schema for shortening a URL."""
    url: StrictStr = Field(min_length=1)


class ShortenResponse(CamelModel):
    """Response schema for a shortened URL."""
    short_code: str
    short_url: str  # Full URL including base domain
    original_url: str


class URLInfoResponse(ShortenResponse):
    """Response schema for looking up a short code."""
    created_at: datetime


class UpdateShortCodeRequest(CamelModel):
    """Request schema for renaming a short code."""
    old_short_code: StrictStr = Field(min_length=1)
    new_short_code: StrictStr = Field(min_length=1)
    original_url: StrictStr = Field(min_length=1)


class DeleteShortCodeRequest(CamelModel):
    """Request schema for deleting a short code."""
    short_code: StrictStr = Field(min_length=1)


class SyncURLsRequest(CamelModel):
    """Request schema for pushing client-known mappings.

    Entries stay untyped here; malformed ones are skipped by the service
    instead of failing the whole batch.
    """
    urls: List[Any]


class SuccessResponse(CamelModel):
    """Response schema for maintenance operations."""
    success: bool = True
    message: Optional[str] = None


class ErrorResponse(BaseModel):
    """Response schema for errors."""
    error: str
    error_id: Optional[str] = None


class StoreHealth(BaseModel):
    """State of the in-memory mapping store."""
    status: str
    mappings: Optional[int] = None
    error: Optional[str] = None


class HealthResponse(BaseModel):
    """Response schema for the health endpoint."""
    status: str
    version: str
    environment: str
    uptime_seconds: float
    store: StoreHealth
