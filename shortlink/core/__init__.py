"""Core module for the Shortlink application."""

from shortlink.core.config import settings

__all__ = ["settings"]
