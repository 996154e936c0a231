"""
Two-tier document storage: memory in front of disk.
"""

import logging
from threading import RLock
from typing import Any, Dict, Optional

from feedcache.cache.disk import DiskCache
from feedcache.cache.memory import MemoryCache
from feedcache.cache.transformer import JSONTransformer, json_transformer
from feedcache.config import DiskCacheConfig, MemoryCacheConfig
from feedcache.document import Document
from feedcache.exceptions import DocumentError

logger = logging.getLogger(__name__)


class Storage:
    """
    Key -> Document store with a memory tier in front of a disk tier.

    - get() reads memory first, then disk, and copies disk hits into memory
    - set() writes through both tiers
    - No method raises on storage or serialization faults: reads return
      None and writes return False

    One storage-wide lock orders tier writes, so the last writer of a key
    wins in both tiers. There are no transactions across keys.

    Usage:
        storage = Storage(DiskCacheConfig(name="feed"), MemoryCacheConfig())
        storage.set("key", Document({"a": 1}))
        storage.get("key")
    """

    def __init__(
        self,
        disk_config: Optional[DiskCacheConfig] = None,
        memory_config: Optional[MemoryCacheConfig] = None,
        transformer: Optional[JSONTransformer] = None,
        memory: Optional[MemoryCache] = None,
        disk: Optional[DiskCache] = None,
    ):
        self.memory = memory if memory is not None else MemoryCache(memory_config)
        self.disk = disk if disk is not None else DiskCache(disk_config)
        self.transformer = transformer if transformer is not None else json_transformer
        self._lock = RLock()

    @property
    def name(self) -> str:
        return self.disk.config.name

    def get(self, key: str) -> Optional[Document]:
        """Get a document; None on miss or on any fault."""
        with self._lock:
            document = self.memory.get(key)
            if document is not None:
                return document

            data = self.disk.get(key)
            if data is None:
                return None

            try:
                document = self.transformer.from_data(data)
            except DocumentError as e:
                logger.debug(f"Ignoring corrupt cache entry '{key}' in '{self.name}': {e}")
                return None

            self.memory.set(key, document, size_bytes=len(data))
            return document

    def set(self, key: str, document: Document) -> bool:
        """Write a document to both tiers; False if it was not persisted."""
        try:
            data = self.transformer.to_data(document)
        except (DocumentError, ValueError, TypeError) as e:
            logger.debug(f"Cannot serialize cache entry '{key}' in '{self.name}': {e}")
            return False

        with self._lock:
            self.memory.set(key, document, size_bytes=len(data))
            return self.disk.set(key, data)

    def remove(self, key: str) -> bool:
        """Remove a key from both tiers."""
        with self._lock:
            in_memory = self.memory.delete(key)
            on_disk = self.disk.delete(key)
            return in_memory or on_disk

    def remove_all(self) -> bool:
        """Remove every entry from both tiers."""
        with self._lock:
            self.memory.clear()
            self.disk.clear()
            return self.disk.is_available

    def remove_expired(self) -> int:
        """Drop expired entries from both tiers; returns the disk count."""
        with self._lock:
            self.memory.remove_expired()
            return self.disk.remove_expired()

    def exists(self, key: str) -> bool:
        return self.memory.exists(key) or self.disk.exists(key)

    def total_size(self) -> int:
        """Bytes held by the persistent tier."""
        return self.disk.total_size()

    def stats(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "memory": self.memory.get_stats().to_dict(),
            "disk": self.disk.get_stats().to_dict(),
            "disk_available": self.disk.is_available,
            "disk_path": str(self.disk.path),
        }

    def close(self) -> None:
        with self._lock:
            self.memory.clear()
            self.disk.close()
