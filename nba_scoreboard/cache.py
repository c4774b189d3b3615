# nba_scoreboard/cache.py
"""
Simple in-memory TTL cache for live payloads.

This is per-process cache. If you run multiple gunicorn workers, each worker has its own cache.
The season schedule is not stored here: it never expires and lives in ScheduleIndex.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass
class CacheEntry(Generic[T]):
    """A single cached value and the timestamp when it was set."""
    ts: float
    value: Optional[T]


class TTLCache:
    """A small key/value TTL cache with lazy loading."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._store: dict[str, CacheEntry] = {}
        self._clock = clock

    def get_or_set(self, key: str, ttl_seconds: int, loader: Callable[[], T]) -> T:
        """
        Retrieve a cached value if not expired, otherwise load & store a new value.

        A ttl of 0 (or less) bypasses the cache entirely. Exceptions raised by
        the loader propagate and nothing is stored, so failures are never cached.
        """
        if ttl_seconds <= 0:
            return loader()

        now = self._clock()
        entry = self._store.get(key)

        if entry and entry.value is not None and (now - entry.ts) < ttl_seconds:
            return entry.value

        value = loader()
        self._store[key] = CacheEntry(ts=now, value=value)
        return value

    def clear(self) -> None:
        """Clear all cached entries."""
        self._store.clear()
