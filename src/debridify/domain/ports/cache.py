"""Cache port shared by the metadata client and the resolved-link store."""

from __future__ import annotations

from typing import Any, Protocol


class CachePort(Protocol):
    """Async key-value store with optional per-entry expiry.

    Adapters are bounded: once ``max_entries`` is reached the least
    recently used key is evicted. Usable as ``async with cache: ...``.
    """

    max_entries: int

    async def get(self, key: str) -> Any:
        """Return the stored value, or None when missing or expired."""
        ...

    async def set(self, key: str, value: Any, *, ttl: int | None = None) -> None:
        """Store *value*; ``ttl=None`` falls back to the adapter default."""
        ...

    async def delete(self, key: str) -> bool:
        """Remove *key*. Returns False if nothing was stored."""
        ...

    async def clear(self) -> None: ...

    async def aclose(self) -> None: ...

    async def __aenter__(self) -> CachePort: ...

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None: ...
