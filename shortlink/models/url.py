"""URL shortener data models.

This module defines the UrlMapping model held by the mapping store and the
MappingPair model used to accept client-pushed mappings.
"""
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, StrictStr
from pydantic.alias_generators import to_camel


def utcnow() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


class UrlMapping(BaseModel):
    """
    One shortened link.

    The mapping store keeps exactly one UrlMapping per live short code and
    exactly one per original URL.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    short_code: str = Field(description="Unique code for the shortened URL")
    original_url: str = Field(description="The original (long) URL to redirect to")
    created_at: datetime = Field(
        default_factory=utcnow,
        description="Timestamp when this short code was bound to its URL"
    )


class MappingPair(BaseModel):
    """A (originalUrl, shortCode) pair pushed by a client during sync."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    original_url: StrictStr = Field(min_length=1)
    short_code: StrictStr = Field(min_length=1)
