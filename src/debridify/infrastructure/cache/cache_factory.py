"""Builds the process-wide cache instances."""

from __future__ import annotations

import time

import structlog

from debridify.domain.ports.cache import CachePort
from debridify.infrastructure.cache.memory_adapter import Clock, MemoryCacheAdapter

log = structlog.get_logger(__name__)


def create_cache(
    name: str,
    *,
    max_entries: int,
    ttl_seconds: int | None = None,
    clock: Clock = time.time,
) -> CachePort:
    """Create a bounded in-memory cache.

    Args:
        name: Label for log events (``metadata``, ``resolved_links``).
        max_entries: LRU bound.
        ttl_seconds: Default expiry; ``None`` keeps entries until evicted.
        clock: Time source in epoch seconds.
    """
    log.info(
        "cache_factory_create",
        cache=name,
        max_entries=max_entries,
        ttl=ttl_seconds,
    )
    return MemoryCacheAdapter(
        max_entries=max_entries,
        default_ttl=ttl_seconds,
        clock=clock,
        name=name,
    )
