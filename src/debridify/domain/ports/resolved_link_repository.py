"""Port for memoized magnet resolutions."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from debridify.domain.entities.debrid import ResolvedLink


@runtime_checkable
class ResolvedLinkRepository(Protocol):
    async def save(self, link: ResolvedLink) -> None: ...

    async def get(self, magnet: str) -> ResolvedLink | None:
        """Return the stored resolution only while it has not expired."""
        ...
