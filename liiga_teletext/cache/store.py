"""Bounded, TTL-aware LRU store used by every cache tier."""

from __future__ import annotations

import asyncio
import copy
from collections import OrderedDict
from collections.abc import Callable, Hashable
from dataclasses import dataclass
from typing import Generic, TypeVar

from ..logging import logger
from ..utils.clock import SYSTEM_CLOCK, Clock

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


@dataclass
class CacheEntry(Generic[V]):
    """A cached payload plus the bookkeeping its TTL is derived from."""

    value: V
    inserted_at: float
    is_live: bool = False
    ttl_seconds: float | None = None

    def age(self, now: float) -> float:
        return now - self.inserted_at

    def is_expired(self, now: float, ttl_seconds: float) -> bool:
        return self.age(now) > ttl_seconds


TtlPolicy = Callable[[CacheEntry], float]


class TtlLruStore(Generic[K, V]):
    """
    An ``OrderedDict`` LRU guarded by one ``asyncio.Lock``.

    The effective TTL is computed at read time by ``ttl_policy`` from the
    entry's own flags, never stored at insert time. An expired entry found on
    read is evicted inside the same critical section, so any later read sees a
    miss until something is written again. Values are deep-copied on the way
    in and out; callers never share a payload with the store.
    """

    def __init__(self, name: str, capacity: int, ttl_policy: TtlPolicy, *, clock: Clock | None = None) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.name = name
        self.capacity = capacity
        self._ttl_policy = ttl_policy
        self._clock = clock or SYSTEM_CLOCK
        self._entries: OrderedDict[K, CacheEntry[V]] = OrderedDict()
        self._lock = asyncio.Lock()
        self.hits = 0
        self.misses = 0

    async def get_entry(self, key: K, *, ttl_seconds: float | None = None) -> CacheEntry[V] | None:
        """Return a copy of the live entry for ``key``, evicting it if expired.

        ``ttl_seconds`` overrides the store's policy for this read.
        """
        async with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self.misses += 1
                return None
            ttl = ttl_seconds if ttl_seconds is not None else self._ttl_policy(entry)
            if entry.is_expired(self._clock.monotonic(), ttl):
                del self._entries[key]
                self.misses += 1
                logger.debug("cache_expired", cache=self.name, key=str(key), ttl=ttl)
                return None
            self._entries.move_to_end(key)
            self.hits += 1
            return copy.deepcopy(entry)

    async def get(self, key: K, *, ttl_seconds: float | None = None) -> V | None:
        entry = await self.get_entry(key, ttl_seconds=ttl_seconds)
        return entry.value if entry is not None else None

    async def peek(self, key: K) -> CacheEntry[V] | None:
        """Copy of the entry regardless of expiry; does not touch LRU order."""
        async with self._lock:
            entry = self._entries.get(key)
            return copy.deepcopy(entry) if entry is not None else None

    async def put(self, key: K, value: V, *, is_live: bool = False, ttl_seconds: float | None = None) -> None:
        entry = CacheEntry(
            value=copy.deepcopy(value),
            inserted_at=self._clock.monotonic(),
            is_live=is_live,
            ttl_seconds=ttl_seconds,
        )
        async with self._lock:
            self._entries[key] = entry
            self._entries.move_to_end(key)
            while len(self._entries) > self.capacity:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("cache_lru_evicted", cache=self.name, key=str(evicted))

    async def remove(self, key: K) -> bool:
        async with self._lock:
            return self._entries.pop(key, None) is not None

    async def remove_where(self, predicate: Callable[[K], bool]) -> list[K]:
        async with self._lock:
            doomed = [key for key in self._entries if predicate(key)]
            for key in doomed:
                del self._entries[key]
            return doomed

    async def clear(self) -> None:
        async with self._lock:
            self._entries.clear()

    async def size(self) -> int:
        async with self._lock:
            return len(self._entries)

    async def keys(self) -> list[K]:
        async with self._lock:
            return list(self._entries)
