"""
Composition root.

The host application builds one storage and one feed cache per process
here and passes them to whatever needs them; nothing in the package keeps
a hidden global store.
"""

import logging
from typing import Optional

from feedcache.cache.storage import Storage
from feedcache.config import DiskCacheConfig, FeedCacheAppConfig, MemoryCacheConfig, get_config
from feedcache.services.cache_manager import CacheManager
from feedcache.services.feed_cache import FeedCacheService

logger = logging.getLogger(__name__)


def create_storage(
    disk_config: Optional[DiskCacheConfig] = None,
    memory_config: Optional[MemoryCacheConfig] = None,
) -> Storage:
    """Build a two-tier storage for one namespace."""
    storage = Storage(disk_config=disk_config, memory_config=memory_config)
    if not storage.disk.is_available:
        logger.warning(f"Cache '{storage.name}' running without persistence")
    return storage


def create_feed_cache(config: Optional[FeedCacheAppConfig] = None) -> FeedCacheService:
    """Build the feed cache service from configuration."""
    config = config or get_config()
    feed = config.feed
    storage = create_storage(disk_config=feed.disk, memory_config=feed.memory)
    logger.info(f"Feed cache ready at {storage.disk.path} (limit {feed.limit})")
    return FeedCacheService(storage, limit=feed.limit)


def create_cache_manager(config: Optional[FeedCacheAppConfig] = None) -> CacheManager:
    """Build a cache manager with the feed cache registered as "feed"."""
    manager = CacheManager()
    manager.register("feed", create_feed_cache(config))
    return manager
