"""
Cache manager - one place to size, inspect and clear every cache model.
"""

import logging
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

from feedcache.utils.formatting import format_size

logger = logging.getLogger(__name__)


@runtime_checkable
class CacheModel(Protocol):
    """A cache the settings screen can size and clear."""

    def clear(self) -> None:
        ...

    def total_size(self) -> int:
        ...


class CacheManager:
    """
    Registry of named cache models.

    Usage:
        manager = CacheManager()
        manager.register("feed", feed_cache)
        manager.total_size_formatted   # "1.2 MB"
        manager.clear_all()
    """

    def __init__(self):
        self._models: Dict[str, CacheModel] = {}

    def register(self, name: str, model: CacheModel) -> None:
        if name in self._models:
            logger.debug(f"Replacing cache model '{name}'")
        self._models[name] = model

    def unregister(self, name: str) -> Optional[CacheModel]:
        return self._models.pop(name, None)

    def get(self, name: str) -> Optional[CacheModel]:
        return self._models.get(name)

    @property
    def names(self) -> List[str]:
        return list(self._models)

    def total_size(self) -> int:
        return sum(model.total_size() for model in self._models.values())

    @property
    def total_size_formatted(self) -> str:
        return format_size(self.total_size())

    def clear(self, name: str) -> bool:
        model = self._models.get(name)
        if model is None:
            return False
        model.clear()
        logger.info(f"Cleared cache '{name}'")
        return True

    def clear_all(self) -> None:
        for name, model in self._models.items():
            model.clear()
            logger.info(f"Cleared cache '{name}'")

    def get_detailed_stats(self) -> Dict[str, Any]:
        """Per-model size, plus storage statistics where the model has them."""
        caches: Dict[str, Any] = {}
        for name, model in self._models.items():
            size = model.total_size()
            entry: Dict[str, Any] = {
                "size_bytes": size,
                "size": format_size(size),
            }
            storage = getattr(model, "storage", None)
            if storage is not None and hasattr(storage, "stats"):
                entry["storage"] = storage.stats()
            caches[name] = entry

        total = sum(entry["size_bytes"] for entry in caches.values())
        return {
            "total_size_bytes": total,
            "total_size": format_size(total),
            "caches": caches,
        }
