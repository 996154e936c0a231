"""
feedcache storage layer

Two-tier document store:
- MemoryCache: in-process LRU tier
- DiskCache: SQLite persistent tier, one file per namespace
- Storage: read-through / write-through composition of both
"""

from feedcache.cache.base import CacheBackend, CacheStats
from feedcache.cache.disk import DiskCache
from feedcache.cache.memory import MemoryCache
from feedcache.cache.storage import Storage
from feedcache.cache.transformer import JSONTransformer, json_transformer

__all__ = [
    "CacheBackend",
    "CacheStats",
    "DiskCache",
    "MemoryCache",
    "Storage",
    "JSONTransformer",
    "json_transformer",
]
