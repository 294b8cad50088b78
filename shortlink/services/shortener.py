"""URL shortening service for the Shortlink application.

This module contains the ShortenedURLService class which implements business logic
for URL shortening, resolution, renaming, deletion and client sync.
"""

import logging
import random
import re
from typing import Annotated, Any, Iterable, Optional, Tuple

from pydantic import AnyUrl, TypeAdapter, UrlConstraints, ValidationError

from shortlink.core.config import settings
from shortlink.core.telemetry import get_meter
from shortlink.models.url import MappingPair, UrlMapping
from shortlink.repositories.base import RepositoryError, URLRepository
from shortlink.services.exceptions import (
    InvalidInputError,
    InvalidURLError,
    ShortCodeConflictError,
    ShortCodeGenerationError,
    ShortCodeValidationError,
    URLCreationError,
    URLNotFoundError,
)

logger = logging.getLogger(__name__)

SHORT_CODE_PATTERN = re.compile(r"[A-Za-z0-9]+")
ACCEPTED_PREFIXES = ("http://", "https://")

# No length cap, unlike pydantic.HttpUrl
_http_url = TypeAdapter(
    Annotated[AnyUrl, UrlConstraints(allowed_schemes=["http", "https"], host_required=True)]
)

meter = get_meter("shortlink.services")
urls_created_counter = meter.create_counter(
    name="shortlink.urls.created",
    description="Number of new short codes created",
    unit="1",
)
redirect_counter = meter.create_counter(
    name="shortlink.redirects",
    description="Number of short code lookups for redirection",
    unit="1",
)


class ShortenedURLService:
    """
    Service for URL shortening business logic.

    This service handles URL normalization and validation, short code
    generation, de-duplication and the maintenance operations (rename,
    delete, sync) performed against the mapping store.
    """

    def __init__(
        self,
        url_repository: URLRepository,
        code_length: Optional[int] = None,
        code_chars: Optional[str] = None,
        max_attempts: Optional[int] = None,
        length_steps: Optional[int] = None,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize the URL shortening service.

        Args:
            url_repository: Mapping store the service reads and writes
            code_length: Length of generated codes (default URL_CODE_LENGTH)
            code_chars: Alphabet of generated codes (default URL_CODE_CHARS)
            max_attempts: Draws per length before growing the code
            length_steps: Number of code lengths to try before giving up
            rng: Random source, mainly for tests
        """
        self.url_repository = url_repository
        self.code_length = code_length or settings.URL_CODE_LENGTH
        self.code_chars = code_chars or settings.URL_CODE_CHARS
        self.max_attempts = max_attempts or settings.URL_CODE_MAX_ATTEMPTS
        self.length_steps = length_steps or settings.URL_CODE_LENGTH_STEPS
        self._rng = rng or random.SystemRandom()

    def create_short_url(self, url: Any) -> UrlMapping:
        """
        Shorten a URL, reusing the existing code when it was shortened before.

        Args:
            url: The URL to shorten; a missing scheme defaults to https

        Returns:
            UrlMapping: The new or existing mapping

        Raises:
            InvalidInputError: If url is missing or not a string
            InvalidURLError: If the URL is malformed or not http/https
            ShortCodeGenerationError: If a unique short code cannot be generated
            URLCreationError: If storing the mapping fails
        """
        if not isinstance(url, str) or not url:
            raise InvalidInputError("URL is required")

        full_url = self.normalize_url(url)
        if not self._is_valid_url(full_url):
            raise InvalidURLError("Invalid URL format")

        existing_code = self.url_repository.get_by_original_url(full_url)
        if existing_code:
            logger.debug(f"Reusing short code {existing_code} for {full_url}")
            return self.url_repository.get_mapping(existing_code)

        short_code = self._generate_unique_short_code()

        try:
            mapping = self.url_repository.put(full_url, short_code)
        except RepositoryError as e:
            logger.error(f"Error creating short URL: {e}")
            raise URLCreationError(f"Failed to create short URL: {str(e)}")

        urls_created_counter.add(1)
        logger.info(f"Created short code {short_code} for {full_url}")
        return mapping

    def resolve(self, short_code: str) -> str:
        """
        Look up the original URL a short code redirects to.

        Raises:
            URLNotFoundError: If no URL with this code exists
        """
        original_url = self.url_repository.get_by_short_code(short_code)
        if original_url is None:
            raise URLNotFoundError(f"URL with code '{short_code}' not found")

        redirect_counter.add(1)
        return original_url

    def get_url_info(self, short_code: str) -> UrlMapping:
        """
        Get the stored mapping for a short code.

        Raises:
            URLNotFoundError: If no URL with this code exists
        """
        mapping = self.url_repository.get_mapping(short_code)
        if mapping is None:
            raise URLNotFoundError(f"URL with code '{short_code}' not found")
        return mapping

    def rename_short_code(self, old_code: Any, new_code: Any, original_url: Any) -> UrlMapping:
        """
        Replace a mapping's short code.

        Args:
            old_code: Code currently in use; it stops resolving afterwards
            new_code: Replacement code, letters and digits only
            original_url: URL the new code resolves to

        Returns:
            UrlMapping: The mapping under its new code

        Raises:
            InvalidInputError: If a field is missing or not a string, or if
                old_code points to a different URL
            ShortCodeValidationError: If new_code is not alphanumeric
            ShortCodeConflictError: If new_code is used by another mapping, or
                original_url is already shortened under a third code
        """
        for value in (old_code, new_code, original_url):
            if not isinstance(value, str) or not value:
                raise InvalidInputError("Missing required fields")

        if not self._is_valid_short_code(new_code):
            raise ShortCodeValidationError(
                "Short code can only contain letters and numbers"
            )

        # Only the mapping named by old_code may move
        current_url = self.url_repository.get_by_short_code(old_code)
        if current_url is not None and current_url != original_url:
            raise InvalidInputError(f"Short code '{old_code}' belongs to a different URL")

        current_code = self.url_repository.get_by_original_url(original_url)
        if current_code is not None and current_code not in (old_code, new_code):
            raise ShortCodeConflictError(
                f"URL is already shortened as '{current_code}'"
            )

        if not self.url_repository.rename_short_code(old_code, new_code, original_url):
            raise ShortCodeConflictError(f"Short code '{new_code}' already exists")

        logger.info(f"Renamed short code {old_code} -> {new_code}")
        return self.url_repository.get_mapping(new_code)

    def delete_short_code(self, short_code: Any) -> None:
        """
        Remove a mapping. Deleting an unknown code is not an error.

        Raises:
            InvalidInputError: If short_code is missing or not a string
        """
        if not isinstance(short_code, str) or not short_code:
            raise InvalidInputError("Short code is required")

        self.url_repository.remove_by_short_code(short_code)
        logger.info(f"Deleted short code {short_code}")

    def sync_urls(self, entries: Iterable[Any]) -> Tuple[int, int]:
        """
        Insert client-known mappings whose codes the store doesn't have yet.

        The first writer wins: existing codes are never overwritten, and a pair
        whose URL already has another code is skipped so the store stays
        bijective. Malformed entries are skipped silently.

        Args:
            entries: Raw {originalUrl, shortCode} objects from the client

        Returns:
            Tuple[int, int]: Number of inserted and skipped entries
        """
        synced = 0
        skipped = 0

        for entry in entries:
            try:
                pair = MappingPair.model_validate(entry)
            except ValidationError:
                skipped += 1
                continue

            if not self._is_valid_short_code(pair.short_code) or not self._is_valid_url(pair.original_url):
                skipped += 1
                continue

            if self.url_repository.check_short_code_exists(pair.short_code):
                skipped += 1
                continue

            if self.url_repository.check_original_url_exists(pair.original_url):
                logger.debug(
                    f"Sync skipped {pair.short_code}: {pair.original_url} already has a code"
                )
                skipped += 1
                continue

            self.url_repository.put(pair.original_url, pair.short_code)
            synced += 1

        logger.info(f"Synced {synced} URLs from client ({skipped} skipped)")
        return synced, skipped

    @staticmethod
    def normalize_url(url: str) -> str:
        """Prefix the default scheme when the URL has no http(s) scheme."""
        if url.startswith(ACCEPTED_PREFIXES):
            return url
        return f"{settings.DEFAULT_URL_SCHEME}://{url}"

    def _generate_unique_short_code(self) -> str:
        """
        Generate a short code that isn't already in use.

        Each length gets max_attempts draws; after that the length grows by
        one, for length_steps lengths in total.

        Raises:
            ShortCodeGenerationError: If unable to generate a unique code
        """
        for step in range(self.length_steps):
            length = self.code_length + step
            for _ in range(self.max_attempts):
                candidate_code = self._generate_short_code(length)
                if not self.url_repository.check_short_code_exists(candidate_code):
                    return candidate_code
            logger.warning(f"Short code space at length {length} looks crowded, growing code")

        raise ShortCodeGenerationError(
            "Failed to generate unique short code after multiple attempts"
        )

    def _generate_short_code(self, length: int) -> str:
        """Draw each character uniformly from the code alphabet."""
        return "".join(self._rng.choice(self.code_chars) for _ in range(length))

    @staticmethod
    def _is_valid_url(url: str) -> bool:
        """Check that the URL parses with an http or https scheme and a host."""
        try:
            _http_url.validate_python(url)
        except ValidationError:
            return False
        return True

    @staticmethod
    def _is_valid_short_code(code: str) -> bool:
        return bool(SHORT_CODE_PATTERN.fullmatch(code))
