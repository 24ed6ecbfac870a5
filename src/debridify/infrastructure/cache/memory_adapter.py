"""In-process LRU cache with optional per-entry expiry."""

from __future__ import annotations

import time
from collections import OrderedDict
from collections.abc import Callable
from typing import Any, Optional

import structlog

log = structlog.get_logger(__name__)

Clock = Callable[[], float]


class MemoryCacheAdapter:
    """Bounded in-memory ``CachePort`` implementation.

    Entries live in an ``OrderedDict`` kept in recency order: reads and
    writes move a key to the end, and inserting beyond ``max_entries``
    pops from the front. Expired entries are dropped lazily when read.

    All access happens on the event loop thread, so no locking is done.

    Args:
        max_entries: Capacity before least recently used keys are evicted.
        default_ttl: Expiry in seconds for ``set()`` without ``ttl``.
            ``None`` stores entries without expiry.
        clock: Time source in epoch seconds (tests inject a fake).
        name: Label used in log events.
    """

    def __init__(
        self,
        *,
        max_entries: int = 10_000,
        default_ttl: int | None = None,
        clock: Clock = time.time,
        name: str = "memory",
    ) -> None:
        if max_entries <= 0:
            raise ValueError("max_entries must be > 0")
        self.max_entries = max_entries
        self.default_ttl = default_ttl
        self.name = name
        self._clock = clock
        # key -> (expires_at or None, value)
        self._data: OrderedDict[str, tuple[Optional[float], Any]] = OrderedDict()

    def __len__(self) -> int:
        return len(self._data)

    async def __aenter__(self) -> MemoryCacheAdapter:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        self._data.clear()

    async def get(self, key: str) -> Optional[Any]:
        entry = self._data.get(key)
        if entry is None:
            log.debug("cache_get", cache=self.name, key=key, hit=False)
            return None

        expires_at, value = entry
        if expires_at is not None and self._clock() >= expires_at:
            del self._data[key]
            log.debug("cache_expired", cache=self.name, key=key)
            return None

        self._data.move_to_end(key)
        log.debug("cache_get", cache=self.name, key=key, hit=True)
        return value

    async def set(self, key: str, value: Any, *, ttl: int | None = None) -> None:
        effective_ttl = ttl if ttl is not None else self.default_ttl
        expires_at = (
            self._clock() + effective_ttl if effective_ttl is not None else None
        )
        self._data[key] = (expires_at, value)
        self._data.move_to_end(key)

        while len(self._data) > self.max_entries:
            evicted, _ = self._data.popitem(last=False)
            log.debug("cache_evicted", cache=self.name, key=evicted)

    async def delete(self, key: str) -> bool:
        return self._data.pop(key, None) is not None

    async def clear(self) -> None:
        self._data.clear()
        log.info("cache_cleared", cache=self.name)
