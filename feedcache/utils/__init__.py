"""Shared helpers for feedcache."""

from feedcache.utils.dates import format_iso8601, parse_iso8601, utc_now
from feedcache.utils.formatting import format_size, parse_size
from feedcache.utils.logging_setup import setup_logging, setup_logging_from_config

__all__ = [
    "format_iso8601",
    "parse_iso8601",
    "utc_now",
    "format_size",
    "parse_size",
    "setup_logging_from_config",
    "setup_logging",
]
