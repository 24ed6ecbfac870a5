"""Media metadata entities (movie/series tagged variant)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Union

ContentType = Literal["movie", "series"]

ANIME_COUNTRIES: frozenset[str] = frozenset({"Japan", "China", "South Korea"})


@dataclass(frozen=True)
class MovieMetadata:
    imdb_id: str
    title: str
    year: str = ""
    countries: tuple[str, ...] = ()
    genres: tuple[str, ...] = ()
    kind: Literal["movie"] = "movie"


@dataclass(frozen=True)
class SeriesMetadata:
    imdb_id: str
    title: str
    year: str = ""
    countries: tuple[str, ...] = ()
    genres: tuple[str, ...] = ()
    total_seasons: int | None = None
    kind: Literal["series"] = "series"


MediaMetadata = Union[MovieMetadata, SeriesMetadata]


def is_anime(metadata: MediaMetadata) -> bool:
    """True for animated series produced in an anime country."""
    match metadata.kind:
        case "series":
            in_anime_country = any(c in ANIME_COUNTRIES for c in metadata.countries)
            return in_anime_country and "Animation" in metadata.genres
        case "movie":
            return False


@dataclass(frozen=True)
class AnimeTitle:
    """One AniList search hit."""

    id: int
    romaji: str | None = None
    english: str | None = None
    native: str | None = None
    episodes: int | None = None

    @property
    def preferred_title(self) -> str | None:
        return self.romaji or self.english or self.native
