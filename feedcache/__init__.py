"""
feedcache - Per-account video feed cache

Disk + memory backed cache of video feeds for a streaming client:
- Two-tier (memory LRU + SQLite) document store
- Feed payloads bounded to the first 30 videos, in caller order
- Advisory "last refreshed" timestamp per account
- Failures degrade to cache misses, never to errors
"""

__version__ = "1.0.0"
__author__ = "feedcache Contributors"
__license__ = "MIT"

from feedcache.config import get_config, load_config

__all__ = [
    "__version__",
    "get_config",
    "load_config",
]
