"""Port for anime title search."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from debridify.domain.entities.media import AnimeTitle


@runtime_checkable
class AnimeSearchPort(Protocol):
    async def search_anime(self, search: str) -> list[AnimeTitle]:
        """Search anime by free text. Best match first, ``[]`` when none."""
        ...
