"""
Data models for the Shortlink application.
"""

from shortlink.models.url import MappingPair, UrlMapping, utcnow

__all__ = [
    "MappingPair",
    "UrlMapping",
    "utcnow",
]
