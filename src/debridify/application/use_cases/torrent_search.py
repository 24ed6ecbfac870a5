"""Torrent aggregation pipeline.

Movie:  title + year + IMDb ID -> "all" indexer -> rank.
Series: anime -> AniList title -> anime indexers (parallel) -> rank.
        other -> "Title SxxEyy" on "all" -> season/episode filter -> rank.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from typing import Protocol

import structlog

from debridify.application.concurrency import gather_settled
from debridify.domain.entities.media import MovieMetadata, SeriesMetadata, is_anime
from debridify.domain.entities.torrents import (
    Candidate,
    RankedCandidate,
    SearchQuery,
    episode_token,
)
from debridify.domain.ports.anime import AnimeSearchPort
from debridify.domain.ports.indexer import IndexerClientPort

log = structlog.get_logger(__name__)

ALL_INDEXERS = "all"

_SEPARATORS_RE = re.compile(r"[\s\-]")


class _SearchConfig(Protocol):
    """Jackett settings consumed by TorrentSearchUseCase."""

    timeout_seconds: float
    movie_limit: int
    series_limit: int
    anime_limit: int
    anime_indexers: list[str]
    anime_category: int


class _Ranker(Protocol):
    def rank(self, candidates: Iterable[Candidate]) -> list[RankedCandidate]: ...


def filter_by_season_episode(
    items: Iterable[Candidate], season: int, episode: int
) -> list[Candidate]:
    """Keep items whose title contains ``sXXeYY``.

    Titles are lowercased with spaces and hyphens removed first, so
    ``"Show - S01 - E03"`` matches too. Numbers are padded to two digits.
    """
    target = episode_token(season, episode).lower()
    kept: list[Candidate] = []
    for item in items:
        if target in _SEPARATORS_RE.sub("", item.title.lower()):
            kept.append(item)
    return kept


def build_anime_search_term(series_title: str, season: int) -> str:
    """AniList search text: the plain title for season 1, else ``"Title Season N"``."""
    if season > 1:
        return f"{series_title} Season {season}"
    return series_title


class TorrentSearchUseCase:
    """Finds and ranks torrent candidates for a movie or an episode.

    Public methods never raise: every failure is logged and reported as
    an empty list.
    """

    def __init__(
        self,
        *,
        indexer: IndexerClientPort,
        anime_search: AnimeSearchPort,
        ranker: _Ranker,
        config: _SearchConfig,
    ) -> None:
        self._indexer = indexer
        self._anime_search = anime_search
        self._ranker = ranker
        self._config = config

    async def query_indexers(
        self, indexer_ids: Sequence[str], query: SearchQuery
    ) -> list[Candidate]:
        """Query every indexer concurrently and concatenate what succeeded.

        A failing or timed-out indexer is dropped without affecting the
        others. A repeated indexer id is queried once. No deduplication
        of results across indexers.
        """
        indexer_ids = list(dict.fromkeys(indexer_ids))
        settled = await gather_settled(
            {
                indexer_id: self._indexer.search(indexer_id, query)
                for indexer_id in indexer_ids
            },
            timeout=self._config.timeout_seconds,
        )

        candidates: list[Candidate] = []
        for indexer_id in indexer_ids:
            candidates.extend(settled.get(indexer_id, []))

        log.info(
            "indexers_queried",
            query=query.text,
            indexers=indexer_ids,
            succeeded=len(settled),
            result_count=len(candidates),
        )
        return candidates

    async def resolve_anime_title(self, series_title: str, season: int) -> str | None:
        results = await self._anime_search.search_anime(
            build_anime_search_term(series_title, season)
        )
        if not results:
            return None
        return results[0].preferred_title

    async def search_movie(self, metadata: MovieMetadata) -> list[RankedCandidate]:
        try:
            query = SearchQuery(
                title=metadata.title,
                search_type="movie",
                imdb_id=metadata.imdb_id,
                year=metadata.year or None,
                limit=self._config.movie_limit,
            )
            candidates = await self.query_indexers([ALL_INDEXERS], query)
            return self._ranker.rank(candidates)
        except Exception:
            log.error("movie_search_failed", imdb_id=metadata.imdb_id, exc_info=True)
            return []

    async def search_series(
        self, metadata: SeriesMetadata, season: int, episode: int
    ) -> list[RankedCandidate]:
        try:
            if is_anime(metadata):
                candidates = await self._search_anime(metadata, season, episode)
            else:
                candidates = await self._search_regular_series(
                    metadata, season, episode
                )
            return self._ranker.rank(candidates)
        except Exception:
            log.error(
                "series_search_failed",
                imdb_id=metadata.imdb_id,
                season=season,
                episode=episode,
                exc_info=True,
            )
            return []

    async def _search_anime(
        self, metadata: SeriesMetadata, season: int, episode: int
    ) -> list[Candidate]:
        anime_title = await self.resolve_anime_title(metadata.title, season)
        if anime_title is None:
            log.info("anime_title_not_found", title=metadata.title, season=season)
            return []

        query = SearchQuery(
            title=anime_title,
            season=season,
            episode=episode,
            search_type="tvsearch",
            category=self._config.anime_category,
            limit=self._config.anime_limit,
        )
        return await self.query_indexers(self._config.anime_indexers, query)

    async def _search_regular_series(
        self, metadata: SeriesMetadata, season: int, episode: int
    ) -> list[Candidate]:
        query = SearchQuery(
            title=metadata.title,
            season=season,
            episode=episode,
            limit=self._config.series_limit,
        )
        candidates = await self.query_indexers([ALL_INDEXERS], query)
        return filter_by_season_episode(candidates, season, episode)
