"""Exceptions for the Shortlink service layer.

This module contains the exception hierarchy for the service layer,
providing domain-specific exceptions that abstract underlying implementation details.
"""


class ServiceError(Exception):
    """Base exception for all service-level errors."""
    pass


class InvalidInputError(ServiceError):
    """A required field is missing or has the wrong type."""
    pass


class URLError(ServiceError):
    """Base exception for URL-related errors."""
    pass


class InvalidURLError(URLError):
    """The URL cannot be parsed or does not use http/https."""
    pass


class URLNotFoundError(URLError):
    """URL with the specified short code was not found."""
    pass


class URLCreationError(URLError):
    """Error occurred during URL creation."""
    pass


class ShortCodeGenerationError(URLCreationError):
    """Failed to generate a unique short code."""
    pass


class ShortCodeValidationError(URLError):
    """The requested short code doesn't meet requirements."""
    pass


class ShortCodeConflictError(URLError):
    """The requested short code is already in use by another URL."""
    pass
