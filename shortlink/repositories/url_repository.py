"""In-memory URL repository for the Shortlink application.

This module provides InMemoryURLRepository, the process-local mapping store.
It holds three associations (original URL -> code, code -> original URL and
code -> creation metadata) and loses everything on restart.
"""

import logging
from datetime import datetime
from typing import Callable, Dict, List, Optional

from shortlink.models.url import UrlMapping, utcnow
from shortlink.repositories.base import RepositoryError, URLRepository

logger = logging.getLogger(__name__)


class InMemoryURLRepository(URLRepository):
    """
    Dictionary-backed mapping store.

    Methods never suspend, so when called from the event loop one request's
    mutation always completes before another request's begins. No locking is
    done; a store instance must not be shared across threads.
    """

    def __init__(
        self,
        clock: Callable[[], datetime] = utcnow,
        preserve_created_at_on_rename: bool = False,
    ):
        """
        Initialize an empty store.

        Args:
            clock: Returns the timestamp stamped on new mappings
            preserve_created_at_on_rename: Keep the old code's creation time
                when a mapping is renamed instead of resetting it to now
        """
        self._clock = clock
        self._preserve_created_at = preserve_created_at_on_rename
        self._url_to_code: Dict[str, str] = {}
        self._code_to_url: Dict[str, str] = {}
        self._created_at: Dict[str, datetime] = {}

    def put(self, original_url: str, short_code: str) -> UrlMapping:
        """
        Bind short_code to original_url and stamp its creation time.

        Any stale counterpart is released: if the code pointed at another URL
        that URL loses its code, and if the URL had another code that code is
        removed.

        Raises:
            RepositoryError: If either value is empty
        """
        if not original_url or not short_code:
            raise RepositoryError("Both original_url and short_code are required")
        return self._bind(original_url, short_code, self._clock())

    def get_by_short_code(self, short_code: str) -> Optional[str]:
        return self._code_to_url.get(short_code)

    def get_by_original_url(self, original_url: str) -> Optional[str]:
        return self._url_to_code.get(original_url)

    def get_mapping(self, short_code: str) -> Optional[UrlMapping]:
        original_url = self._code_to_url.get(short_code)
        if original_url is None:
            return None
        return UrlMapping(
            short_code=short_code,
            original_url=original_url,
            created_at=self._created_at[short_code],
        )

    def check_short_code_exists(self, short_code: str) -> bool:
        return short_code in self._code_to_url

    def check_original_url_exists(self, original_url: str) -> bool:
        return original_url in self._url_to_code

    def rename_short_code(self, old_code: str, new_code: str, original_url: str) -> bool:
        """
        Move original_url from old_code to new_code.

        Renaming a code to itself is allowed. The old code becomes
        unresolvable. The new code's creation time is reset to now unless the
        store was built with preserve_created_at_on_rename.

        Args:
            old_code: Code currently in use
            new_code: Replacement code
            original_url: URL the new code must resolve to

        Returns:
            bool: False if new_code already belongs to another mapping
        """
        if new_code != old_code and new_code in self._code_to_url:
            logger.debug(f"Rename {old_code} -> {new_code} refused, code taken")
            return False

        created_at = self._clock()
        if self._preserve_created_at and old_code in self._created_at:
            created_at = self._created_at[old_code]

        self.remove_by_short_code(old_code)
        self._bind(original_url, new_code, created_at)
        return True

    def remove_by_short_code(self, short_code: str) -> None:
        original_url = self._code_to_url.pop(short_code, None)
        if original_url is None:
            return
        if self._url_to_code.get(original_url) == short_code:
            del self._url_to_code[original_url]
        self._created_at.pop(short_code, None)

    def get_all(self) -> List[UrlMapping]:
        return [self.get_mapping(code) for code in self._created_at]

    def count(self) -> int:
        return len(self._code_to_url)

    def _bind(self, original_url: str, short_code: str, created_at: datetime) -> UrlMapping:
        previous_url = self._code_to_url.get(short_code)
        if previous_url is not None and previous_url != original_url:
            self._url_to_code.pop(previous_url, None)

        previous_code = self._url_to_code.get(original_url)
        if previous_code is not None and previous_code != short_code:
            self._code_to_url.pop(previous_code, None)
            self._created_at.pop(previous_code, None)

        # Re-inserting moves the code to the end of the creation order
        self._created_at.pop(short_code, None)

        self._url_to_code[original_url] = short_code
        self._code_to_url[short_code] = original_url
        self._created_at[short_code] = created_at

        return UrlMapping(
            short_code=short_code,
            original_url=original_url,
            created_at=created_at,
        )
