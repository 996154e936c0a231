"""Domain-facing cache services."""

from feedcache.services.cache_manager import CacheManager, CacheModel
from feedcache.services.feed_cache import (
    DEFAULT_FEED_LIMIT,
    FEED_TIME_SUFFIX,
    FeedCacheService,
    feed_time_cache_key,
)

__all__ = [
    "CacheManager",
    "CacheModel",
    "DEFAULT_FEED_LIMIT",
    "FEED_TIME_SUFFIX",
    "FeedCacheService",
    "feed_time_cache_key",
]
