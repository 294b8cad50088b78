"""Exceptions raised by the Shortlink client."""

from typing import Optional


class ClientError(Exception):
    """Base exception for all client-side errors."""
    pass


class ClientConnectionError(ClientError):
    """The server could not be reached or did not answer in time."""
    pass


class APIError(ClientError):
    """The server answered with an error status."""

    def __init__(self, status_code: int, message: str, error_id: Optional[str] = None):
        self.status_code = status_code
        self.message = message
        self.error_id = error_id
        super().__init__(f"HTTP {status_code}: {message}")


class ShortCodeConflictError(APIError):
    """The requested short code is already taken on the server."""
    pass


class RecordNotFoundError(ClientError):
    """No saved URL with the given id exists in local storage."""
    pass
