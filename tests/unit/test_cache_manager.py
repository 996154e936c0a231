"""
Unit tests for the cache manager.
"""

from unittest.mock import MagicMock

import pytest

from feedcache.services.cache_manager import CacheManager, CacheModel
from feedcache.services.feed_cache import FeedCacheService


class SizedCache:
    """Minimal cache model for tests."""

    def __init__(self, size: int):
        self.size = size
        self.cleared = 0

    def clear(self) -> None:
        self.cleared += 1
        self.size = 0

    def total_size(self) -> int:
        return self.size


@pytest.mark.unit
class TestCacheManager:
    """Tests for CacheManager."""

    def test_feed_cache_is_a_cache_model(self, feed_cache: FeedCacheService):
        assert isinstance(feed_cache, CacheModel)

    def test_register_and_get(self):
        manager = CacheManager()
        cache = SizedCache(10)

        manager.register("a", cache)

        assert manager.get("a") is cache
        assert manager.get("b") is None
        assert manager.names == ["a"]

    def test_register_replaces(self):
        manager = CacheManager()
        manager.register("a", SizedCache(1))
        replacement = SizedCache(2)

        manager.register("a", replacement)

        assert manager.get("a") is replacement
        assert manager.total_size() == 2

    def test_unregister(self):
        manager = CacheManager()
        cache = SizedCache(1)
        manager.register("a", cache)

        assert manager.unregister("a") is cache
        assert manager.unregister("a") is None
        assert manager.names == []

    def test_total_size(self):
        manager = CacheManager()
        manager.register("a", SizedCache(1024))
        manager.register("b", SizedCache(512))

        assert manager.total_size() == 1536
        assert manager.total_size_formatted == "1.5 KB"

    def test_clear_one(self):
        manager = CacheManager()
        a, b = SizedCache(5), SizedCache(7)
        manager.register("a", a)
        manager.register("b", b)

        assert manager.clear("a") is True
        assert manager.clear("missing") is False
        assert a.cleared == 1
        assert b.cleared == 0

    def test_clear_all(self):
        manager = CacheManager()
        a, b = SizedCache(5), SizedCache(7)
        manager.register("a", a)
        manager.register("b", b)

        manager.clear_all()

        assert a.cleared == b.cleared == 1
        assert manager.total_size() == 0

    def test_detailed_stats(self, feed_cache: FeedCacheService, account, videos):
        feed_cache.store_feed(account, videos)
        manager = CacheManager()
        manager.register("feed", feed_cache)
        manager.register("plain", SizedCache(100))

        stats = manager.get_detailed_stats()

        assert stats["total_size_bytes"] == feed_cache.total_size() + 100
        assert stats["caches"]["plain"] == {"size_bytes": 100, "size": "100 B"}
        assert stats["caches"]["feed"]["storage"]["name"] == "feed"
        assert stats["caches"]["feed"]["storage"]["disk"]["sets"] == 2

    def test_detailed_stats_ignores_models_without_storage(self):
        manager = CacheManager()
        model = MagicMock(spec=["clear", "total_size"])
        model.total_size.return_value = 3
        manager.register("m", model)

        assert "storage" not in manager.get_detailed_stats()["caches"]["m"]
