"""Client side of the Shortlink application.

Keeps the user's history of shortened URLs in local storage and talks to the
server API.
"""

from shortlink.client.api_client import ShortenerClient
from shortlink.client.history import URLHistory
from shortlink.client.local_storage import LocalStorage, SavedURL, SavedURLStorage

__all__ = [
    "LocalStorage",
    "SavedURL",
    "SavedURLStorage",
    "ShortenerClient",
    "URLHistory",
]
