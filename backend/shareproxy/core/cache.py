"""
In-memory caching primitives.

Features:
- LRU eviction policy
- TTL-based expiration
- Item count limits
- Lock-guarded operations
"""
from collections import OrderedDict
from dataclasses import dataclass
from typing import TypeVar, Generic, Optional, Callable
import threading
import time

T = TypeVar('T')


@dataclass
class CacheEntry(Generic[T]):
    """Cache entry with value and metadata."""
    value: T
    created_at: float
    hits: int = 0
    key: str = ""


class LRUCache(Generic[T]):
    """
    Thread-safe LRU Cache with TTL and an item limit.

    Entries age from their last write; reads do not extend their life.
    """

    def __init__(
        self,
        name: str = "cache",
        max_items: int = 100,
        ttl_seconds: float = 300,
        clock: Callable[[], float] = time.time,
    ):
        self.name = name
        self.max_items = max_items
        self.ttl = ttl_seconds
        self._clock = clock
        self._cache: OrderedDict[str, CacheEntry[T]] = OrderedDict()
        self._lock = threading.RLock()
        self._total_hits = 0
        self._total_misses = 0

    def __len__(self) -> int:
        with self._lock:
            self._evict_expired()
            return len(self._cache)

    def _is_expired(self, entry: CacheEntry[T]) -> bool:
        return self._clock() - entry.created_at > self.ttl

    def _evict_expired(self) -> int:
        """Remove all expired entries. Returns count removed."""
        expired = [k for k, v in self._cache.items() if self._is_expired(v)]
        for key in expired:
            self._cache.pop(key, None)
        return len(expired)

    def _evict_lru(self) -> None:
        """Evict least recently used entries until there is room for one more."""
        while self._cache and len(self._cache) >= self.max_items:
            self._cache.popitem(last=False)

    def get(self, key: str) -> Optional[T]:
        """Get value from cache."""
        with self._lock:
            entry = self._cache.get(key)
            if entry is None:
                self._total_misses += 1
                return None

            if self._is_expired(entry):
                del self._cache[key]
                self._total_misses += 1
                return None

            # Move to end (most recently used)
            self._cache.move_to_end(key)
            entry.hits += 1
            self._total_hits += 1
            return entry.value

    def set(self, key: str, value: T) -> None:
        """Set value in cache, resetting its age."""
        with self._lock:
            self._cache.pop(key, None)
            self._evict_expired()
            self._evict_lru()
            self._cache[key] = CacheEntry(
                value=value,
                created_at=self._clock(),
                key=key,
            )

    def update(self, key: str, func: Callable[[Optional[T]], T]) -> T:
        """Atomically replace the value for key with func(current value)."""
        with self._lock:
            entry = self._cache.get(key)
            current = entry.value if entry is not None and not self._is_expired(entry) else None
            value = func(current)
            self.set(key, value)
            return value

    def delete(self, key: str) -> bool:
        """Delete a specific key."""
        with self._lock:
            return self._cache.pop(key, None) is not None

    def clear(self) -> None:
        """Clear all entries."""
        with self._lock:
            self._cache.clear()

    def stats(self) -> dict:
        """Get cache statistics."""
        with self._lock:
            self._evict_expired()
            lookups = self._total_hits + self._total_misses
            hit_rate = self._total_hits / lookups * 100 if lookups > 0 else 0
            return {
                "name": self.name,
                "items": len(self._cache),
                "max_items": self.max_items,
                "hits": self._total_hits,
                "misses": self._total_misses,
                "hit_rate": round(hit_rate, 1),
                "ttl_seconds": self.ttl,
            }
