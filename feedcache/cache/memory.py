"""
In-memory LRU cache tier with optional expiry.
"""

import fnmatch
import time
from collections import OrderedDict
from dataclasses import dataclass
from threading import Lock
from typing import Any, Dict, List, Optional

from feedcache.cache.base import CacheBackend
from feedcache.config import MemoryCacheConfig


@dataclass
class CacheEntry:
    """A single cache entry with metadata."""
    value: Any
    size_bytes: int
    expires_at: Optional[float] = None  # None = never expires

    @property
    def is_expired(self) -> bool:
        """Check if entry has expired."""
        return self.expires_at is not None and time.time() >= self.expires_at

    @property
    def ttl_remaining(self) -> Optional[int]:
        """Get remaining TTL in seconds."""
        if self.expires_at is None:
            return None
        return max(0, int(self.expires_at - time.time()))


class MemoryCache(CacheBackend):
    """
    Thread-safe in-memory LRU cache.

    Features:
    - LRU eviction when max entries or max bytes reached
    - Optional time-based expiration
    - Memory size tracking (caller-supplied entry sizes)
    """

    def __init__(self, config: Optional[MemoryCacheConfig] = None):
        self.config = config or MemoryCacheConfig()
        super().__init__(enable_stats=self.config.enable_stats)
        self._cache: OrderedDict[str, CacheEntry] = OrderedDict()
        self._lock = Lock()
        self._total_size = 0

    def _pop(self, key: str) -> CacheEntry:
        entry = self._cache.pop(key)
        self._total_size -= entry.size_bytes
        return entry

    def _update_counts(self) -> None:
        if self.enable_stats:
            self.stats.entry_count = len(self._cache)
            self.stats.size_bytes = self._total_size

    def _evict_lru(self, incoming_size: int) -> None:
        """Evict least recently used entries until the new entry fits."""
        max_entries = self.config.max_entries
        max_bytes = self.config.max_memory_bytes
        while self._cache and (
            (max_entries and len(self._cache) >= max_entries)
            or (max_bytes and self._total_size + incoming_size > max_bytes)
        ):
            key = next(iter(self._cache))
            self._pop(key)
            if self.enable_stats:
                self.stats.evictions += 1

    def get(self, key: str) -> Optional[Any]:
        """Get a value from cache."""
        with self._lock:
            entry = self._cache.get(key)

            if entry is None:
                if self.enable_stats:
                    self.stats.misses += 1
                return None

            if entry.is_expired:
                self._pop(key)
                if self.enable_stats:
                    self.stats.misses += 1
                    self.stats.evictions += 1
                self._update_counts()
                return None

            # Move to end (most recently used)
            self._cache.move_to_end(key)

            if self.enable_stats:
                self.stats.hits += 1

            return entry.value

    def set(self, key: str, value: Any, size_bytes: int = 0) -> bool:
        """
        Set a value in cache.

        Entries larger than max_memory_bytes are not kept at all.
        """
        max_bytes = self.config.max_memory_bytes
        if max_bytes and size_bytes > max_bytes:
            self.delete(key)
            return False

        expiry = self.config.expiry_seconds
        entry = CacheEntry(
            value=value,
            size_bytes=size_bytes,
            expires_at=time.time() + expiry if expiry else None,
        )

        with self._lock:
            if key in self._cache:
                self._pop(key)

            self._evict_lru(size_bytes)

            self._cache[key] = entry
            self._total_size += size_bytes

            if self.enable_stats:
                self.stats.sets += 1
            self._update_counts()

        return True

    def delete(self, key: str) -> bool:
        """Delete a value from cache."""
        with self._lock:
            if key in self._cache:
                self._pop(key)
                if self.enable_stats:
                    self.stats.deletes += 1
                self._update_counts()
                return True
            return False

    def exists(self, key: str) -> bool:
        """Check if key exists in cache."""
        with self._lock:
            entry = self._cache.get(key)
            if entry is None:
                return False
            if entry.is_expired:
                self._pop(key)
                self._update_counts()
                return False
            return True

    def clear(self, pattern: Optional[str] = None) -> int:
        """Clear cache entries, optionally only keys matching a glob pattern."""
        with self._lock:
            if pattern is None:
                count = len(self._cache)
                self._cache.clear()
                self._total_size = 0
            else:
                keys_to_delete = [
                    key for key in self._cache.keys()
                    if fnmatch.fnmatch(key, pattern)
                ]
                count = len(keys_to_delete)
                for key in keys_to_delete:
                    self._pop(key)

            self._update_counts()
            return count

    def remove_expired(self) -> int:
        """Remove expired entries."""
        with self._lock:
            expired_keys = [
                key for key, entry in self._cache.items()
                if entry.is_expired
            ]
            for key in expired_keys:
                self._pop(key)
                if self.enable_stats:
                    self.stats.evictions += 1
            self._update_counts()
            return len(expired_keys)

    def keys(self, pattern: Optional[str] = None) -> List[str]:
        """Get all cache keys, optionally matching a glob pattern."""
        with self._lock:
            live = [key for key, entry in self._cache.items() if not entry.is_expired]
        if pattern is None:
            return live
        return [key for key in live if fnmatch.fnmatch(key, pattern)]

    def total_size(self) -> int:
        with self._lock:
            return self._total_size

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)

    def get_entry_info(self, key: str) -> Optional[Dict[str, Any]]:
        """Get metadata about a cache entry."""
        with self._lock:
            entry = self._cache.get(key)
            if entry is None or entry.is_expired:
                return None

            return {
                "key": key,
                "size_bytes": entry.size_bytes,
                "ttl_remaining": entry.ttl_remaining,
            }
