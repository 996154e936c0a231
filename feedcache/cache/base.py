"""
Cache backend interface and statistics.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional


@dataclass
class CacheStats:
    """Cache statistics."""
    hits: int = 0
    misses: int = 0
    sets: int = 0
    deletes: int = 0
    evictions: int = 0
    errors: int = 0
    size_bytes: int = 0
    entry_count: int = 0

    @property
    def hit_rate(self) -> float:
        """Calculate cache hit rate."""
        total = self.hits + self.misses
        return (self.hits / total * 100) if total > 0 else 0.0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "hits": self.hits,
            "misses": self.misses,
            "sets": self.sets,
            "deletes": self.deletes,
            "evictions": self.evictions,
            "errors": self.errors,
            "hit_rate": round(self.hit_rate, 2),
            "size_bytes": self.size_bytes,
            "entry_count": self.entry_count,
        }


class CacheBackend(ABC):
    """
    Abstract cache tier interface.

    Tiers never raise on ordinary storage faults: reads report a miss
    and writes report False.
    """

    def __init__(self, enable_stats: bool = True):
        self.enable_stats = enable_stats
        self.stats = CacheStats()

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        """Get a value from the tier."""
        pass

    @abstractmethod
    def set(self, key: str, value: Any) -> bool:
        """Set a value in the tier."""
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Delete a value from the tier."""
        pass

    @abstractmethod
    def exists(self, key: str) -> bool:
        """Check if key exists in the tier."""
        pass

    @abstractmethod
    def clear(self) -> int:
        """Remove every entry; returns the number removed."""
        pass

    @abstractmethod
    def remove_expired(self) -> int:
        """Remove expired entries; returns the number removed."""
        pass

    @abstractmethod
    def keys(self) -> List[str]:
        """All live keys."""
        pass

    @abstractmethod
    def total_size(self) -> int:
        """Bytes currently held by the tier."""
        pass

    def get_stats(self) -> CacheStats:
        """Get cache statistics."""
        return self.stats
