"""Port for movie/series metadata lookups."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from debridify.domain.entities.media import MediaMetadata


@runtime_checkable
class MetadataProviderPort(Protocol):
    async def get_metadata(self, imdb_id: str) -> MediaMetadata | None:
        """Return movie or series metadata, None if unknown or on error."""
        ...
