"""Test utilities for Shortlink tests."""

import random
import string
from datetime import datetime, timedelta, timezone


def random_string(length: int = 10) -> str:
    """Generate a random alphanumeric string."""
    return ''.join(random.choice(string.ascii_letters + string.digits) for _ in range(length))


def random_url() -> str:
    """Generate a random URL for testing."""
    domain = f"{random_string(8).lower()}.com"
    path = random_string(12)
    return f"https://{domain}/{path}"


class FakeClock:
    """Clock returning a fixed UTC time that tests move forward explicitly."""

    def __init__(self, start: datetime = datetime(2024, 1, 1, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


class SequenceRandom(random.Random):
    """Random source whose choice() replays a fixed list of codes.

    Each queued code is consumed one character at a time, which lets tests
    force specific short codes out of the generator.
    """

    def __init__(self, *codes: str):
        super().__init__(0)
        self._chars = [c for code in codes for c in code]

    def choice(self, seq):
        if self._chars:
            return self._chars.pop(0)
        return super().choice(seq)
