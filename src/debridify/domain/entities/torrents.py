"""Domain entities for indexer search results.

Pure value objects, no framework dependencies, no I/O.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class QualityTier(Enum):
    """Resolution tiers, declared best first.

    Declaration order is the ranking order; ``UNKNOWN`` always sorts last.
    """

    UHD_2160 = ("2160p", "4K")
    UHD_1440 = ("1440p", "UHD")
    FHD_1080 = ("1080p", "1080p")
    HD_720 = ("720p", "720p")
    SD_480 = ("480p", "480p")
    SD_360 = ("360p", "360p")
    UNKNOWN = ("", "Unknown")

    def __init__(self, token: str, label: str) -> None:
        self.token = token
        self.label = label

    @property
    def rank(self) -> int:
        return _TIER_ORDER.index(self)


_TIER_ORDER: tuple[QualityTier, ...] = tuple(QualityTier)

# Tokens in fixed priority order (UNKNOWN has no token).
QUALITY_TOKENS: tuple[tuple[str, QualityTier], ...] = tuple(
    (tier.token, tier) for tier in QualityTier if tier.token
)


@dataclass(frozen=True)
class Candidate:
    """A single normalized item from an indexer feed."""

    title: str
    identifier: str  # magnet URI or indexer link token
    source_name: str = ""  # e.g. "1337x", "Nyaa.si"
    size_bytes: int = 0
    published_at: datetime | None = None
    category_tags: tuple[int, ...] = ()


@dataclass(frozen=True)
class RankedCandidate:
    """Candidate with its derived quality tier."""

    candidate: Candidate
    quality_tier: QualityTier = QualityTier.UNKNOWN

    @property
    def title(self) -> str:
        return self.candidate.title

    @property
    def identifier(self) -> str:
        return self.candidate.identifier

    @property
    def source_name(self) -> str:
        return self.candidate.source_name

    @property
    def size_bytes(self) -> int:
        return self.candidate.size_bytes


@dataclass(frozen=True)
class SearchQuery:
    """Torznab search parameters for one indexer request.

    ``search_type`` maps to the Torznab ``t`` parameter
    (``search``, ``movie``, ``tvsearch``).
    """

    title: str
    season: int | None = None
    episode: int | None = None
    search_type: str = "search"
    imdb_id: str | None = None
    year: str | None = None
    category: int | None = None
    limit: int | None = None

    @property
    def text(self) -> str:
        """Free-text ``q`` value, with an ``SxxEyy`` suffix for episodes."""
        if self.season is not None and self.episode is not None:
            return f"{self.title} {episode_token(self.season, self.episode)}"
        return self.title


def episode_token(season: int, episode: int) -> str:
    """``S01E03`` style token, zero padded to two digits."""
    return f"S{season:02d}E{episode:02d}"
