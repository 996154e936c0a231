"""Exceptions raised by feedcache."""

from typing import Any, Optional


class FeedCacheError(Exception):
    """Base class for feedcache errors."""


class DocumentError(FeedCacheError, ValueError):
    """A value cannot be represented as a cache document."""

    def __init__(self, message: str, value: Any = None):
        super().__init__(message)
        self.value = value


class ConfigError(FeedCacheError):
    """Configuration file could not be read or validated."""

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.path = path
        self.original_error = original_error
