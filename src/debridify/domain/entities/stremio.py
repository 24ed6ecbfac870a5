"""Stremio protocol entities."""

from __future__ import annotations

from dataclasses import dataclass

from debridify.domain.entities.media import ContentType


@dataclass(frozen=True)
class StreamRequest:
    """Parsed Stremio stream request.

    Created from URL path: ``tt1234567`` (movie) or
    ``tt1234567:1:5`` (series, season 1, episode 5).
    """

    imdb_id: str
    content_type: ContentType
    season: int | None = None
    episode: int | None = None


@dataclass(frozen=True)
class StremioStream:
    """Stremio Stream object (JSON-serializable)."""

    name: str  # e.g. "Debridify (4K)"
    description: str  # title / size / indexer, one per line
    url: str  # /resolve URL for the candidate
