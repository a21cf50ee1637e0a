"""
TTL cache for computed leaderboards and listings.

Each TTLCache wraps one computation, is constructed and owned by its
caller, and is labelled with invalidation tags ("leaderboard",
"equipment", "players", "tournaments"). A CacheGroup lets the sync job
drop every cache sharing a tag after new data lands. Entries also expire
on their own after ttl_seconds.

Usage:
    caches = CacheGroup()
    paddle_board = caches.add(TTLCache("equipment-leaderboard", 3600, {"leaderboard", "equipment"}))

    rows = paddle_board.get_or_compute(("PADDLE", 10), lambda: get_equipment_leaderboard(db, "PADDLE", 10))
    ...
    caches.invalidate_tag("leaderboard")
"""

import logging
import threading
import time
from typing import Any, Callable, Hashable, Iterable, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TTLCache:
    """Values of one computation, keyed by call arguments, valid for ttl_seconds."""

    def __init__(
        self,
        key: str,
        ttl_seconds: float,
        tags: Iterable[str] = (),
        clock: Callable[[], float] = time.monotonic,
    ):
        self.key = key
        self.ttl_seconds = ttl_seconds
        self.tags = frozenset(tags)
        self._clock = clock
        self._entries: dict[Hashable, tuple[float, Any]] = {}
        self._lock = threading.Lock()

    def get(self, args: Hashable) -> tuple[bool, Any]:
        """(hit, value) for args; expired entries count as misses."""
        with self._lock:
            entry = self._entries.get(args)
            if entry is None:
                return False, None
            stored_at, value = entry
            if self._clock() - stored_at >= self.ttl_seconds:
                del self._entries[args]
                return False, None
            return True, value

    def set(self, args: Hashable, value: Any) -> None:
        with self._lock:
            self._entries[args] = (self._clock(), value)

    def get_or_compute(self, args: Hashable, compute: Callable[[], T]) -> T:
        """Cached value for args, or compute() it and store the result."""
        hit, value = self.get(args)
        if hit:
            logger.debug("Cache hit for %s%r", self.key, args)
            return value

        logger.debug("Cache miss for %s%r", self.key, args)
        value = compute()
        self.set(args, value)
        return value

    def invalidate(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


class CacheGroup:
    """A set of caches that can be invalidated together by tag."""

    def __init__(self):
        self._caches: dict[str, TTLCache] = {}

    def add(self, cache: TTLCache) -> TTLCache:
        if cache.key in self._caches:
            raise ValueError(f"Cache '{cache.key}' already registered")
        self._caches[cache.key] = cache
        return cache

    def get(self, key: str) -> Optional[TTLCache]:
        return self._caches.get(key)

    def invalidate_tag(self, tag: str) -> list[str]:
        """Clear every cache carrying tag; returns the cleared cache keys."""
        cleared = []
        for cache in self._caches.values():
            if tag in cache.tags:
                cache.invalidate()
                cleared.append(cache.key)
        logger.info("Invalidated tag '%s': %s", tag, ", ".join(cleared) or "nothing")
        return cleared

    def invalidate_all(self) -> None:
        for cache in self._caches.values():
            cache.invalidate()
