"""Generic LRU cache with TTL and statistics.

Entries are keyed by a tuple of string parts (for packages: insertion-order spec
JSON, generator version and options), hashed into a fixed-width key.
"""

import time
from typing import Callable, Generic, TypeVar, Any
from collections import OrderedDict
from dataclasses import dataclass

from .hash import hash_fields, Algorithm

T = TypeVar("T")

KeyParts = tuple[str, ...]


@dataclass
class Stats:
    """Cache statistics."""

    size: int = 0
    max_size: int = 0
    hits: int = 0
    misses: int = 0
    evictions: int = 0

    @property
    def hit_rate(self) -> float:
        """Calculate hit rate (0.0 to 1.0)."""
        total = self.hits + self.misses
        return self.hits / total if total > 0 else 0.0

    def to_dict(self) -> dict[str, Any]:
        """Export as dictionary."""
        return {
            "size": self.size,
            "max_size": self.max_size,
            "hits": self.hits,
            "misses": self.misses,
            "evictions": self.evictions,
            "hit_rate": self.hit_rate,
        }


class LRUCache(Generic[T]):
    """
    LRU cache with TTL support and statistics tracking.

    Examples:
        >>> cache = LRUCache[str](max_size=100, ttl_seconds=3600)
        >>> cache.set(("spec", "2.0.0"), "package")
        >>> cache.get(("spec", "2.0.0"))
        'package'
    """

    def __init__(
        self,
        max_size: int = 100,
        ttl_seconds: int | None = None,
        hash_algorithm: Algorithm = Algorithm.XXHASH64,
    ):
        if max_size <= 0:
            raise ValueError("max_size must be positive")

        self.max_size = max_size
        self.ttl_seconds = ttl_seconds
        self.hash_algorithm = hash_algorithm

        self._cache: OrderedDict[str, tuple[T, float]] = OrderedDict()
        self._stats = Stats(max_size=max_size)

    def _compute_key(self, parts: KeyParts) -> str:
        return hash_fields(*parts, algorithm=self.hash_algorithm)

    def _is_expired(self, timestamp: float) -> bool:
        if self.ttl_seconds is None:
            return False
        return time.monotonic() - timestamp >= self.ttl_seconds

    def get(self, parts: KeyParts) -> T | None:
        """Get cached value if available and not expired."""
        cache_key = self._compute_key(parts)

        if cache_key in self._cache:
            value, timestamp = self._cache[cache_key]

            if self._is_expired(timestamp):
                del self._cache[cache_key]
                self._stats.size = len(self._cache)
                self._stats.misses += 1
                return None

            self._cache.move_to_end(cache_key)
            self._stats.hits += 1
            return value

        self._stats.misses += 1
        return None

    def set(self, parts: KeyParts, value: T) -> None:
        """Cache value with current timestamp, evicting the oldest entry when full."""
        cache_key = self._compute_key(parts)

        if cache_key in self._cache:
            del self._cache[cache_key]

        self._cache[cache_key] = (value, time.monotonic())

        if len(self._cache) > self.max_size:
            self._cache.popitem(last=False)
            self._stats.evictions += 1

        self._stats.size = len(self._cache)

    def get_or_create(self, parts: KeyParts, factory: Callable[[], T]) -> T:
        """Return the cached value, or build, cache and return a new one."""
        cached = self.get(parts)
        if cached is not None:
            return cached
        value = factory()
        self.set(parts, value)
        return value

    def clear(self) -> None:
        """Clear entire cache."""
        self._cache.clear()
        self._stats.size = 0

    @property
    def stats(self) -> Stats:
        """Get cache statistics."""
        return self._stats

    def __len__(self) -> int:
        return len(self._cache)

    def __contains__(self, parts: KeyParts) -> bool:
        """Check if key exists (doesn't update LRU order or expire)."""
        return self._compute_key(parts) in self._cache


__all__ = ["LRUCache", "Stats", "KeyParts"]
