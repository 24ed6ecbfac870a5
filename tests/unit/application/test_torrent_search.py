"""Tests for TorrentSearchUseCase and its pure helpers."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from debridify.application.use_cases.torrent_search import (
    ALL_INDEXERS,
    TorrentSearchUseCase,
    build_anime_search_term,
    filter_by_season_episode,
)
from debridify.domain.entities import (
    AnimeTitle,
    Candidate,
    IndexerError,
    MovieMetadata,
    QualityTier,
    SearchQuery,
    SeriesMetadata,
)
from debridify.infrastructure.config.schema import JackettConfig
from debridify.infrastructure.stremio.stream_sorter import CandidateRanker

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _candidate(title: str, *, source: str = "1337x", size: int = 0) -> Candidate:
    return Candidate(
        title=title,
        identifier=f"magnet:?xt=urn:btih:{abs(hash(title)):040x}",
        source_name=source,
        size_bytes=size,
    )


def _make_uc(
    indexer: AsyncMock,
    anime_search: AsyncMock,
    **config_overrides: object,
) -> TorrentSearchUseCase:
    return TorrentSearchUseCase(
        indexer=indexer,
        anime_search=anime_search,
        ranker=CandidateRanker(),
        config=JackettConfig(**config_overrides),
    )


# ---------------------------------------------------------------------------
# Pure helpers
# ---------------------------------------------------------------------------


class TestFilterBySeasonEpisode:
    def test_keeps_matching_titles(self) -> None:
        items = [
            _candidate("Breaking.Bad.S01E03.720p"),
            _candidate("Breaking Bad S01E04 1080p"),
        ]
        kept = filter_by_season_episode(items, 1, 3)
        assert [c.title for c in kept] == ["Breaking.Bad.S01E03.720p"]

    def test_ignores_spaces_and_hyphens(self) -> None:
        items = [_candidate("Breaking Bad - S01 - E03 - 720p")]
        assert len(filter_by_season_episode(items, 1, 3)) == 1

    def test_case_insensitive(self) -> None:
        items = [_candidate("breaking.bad.s01e03")]
        assert len(filter_by_season_episode(items, 1, 3)) == 1

    def test_drops_season_pack(self) -> None:
        items = [_candidate("Breaking.Bad.S01.Complete.1080p")]
        assert filter_by_season_episode(items, 1, 3) == []

    def test_two_digit_padding(self) -> None:
        items = [_candidate("Show.S10E12.1080p"), _candidate("Show.S1E3.1080p")]
        assert [c.title for c in filter_by_season_episode(items, 10, 12)] == [
            "Show.S10E12.1080p"
        ]
        assert filter_by_season_episode(items, 1, 3) == []


class TestBuildAnimeSearchTerm:
    def test_first_season_plain_title(self) -> None:
        assert build_anime_search_term("Attack on Titan", 1) == "Attack on Titan"

    def test_later_season_suffix(self) -> None:
        assert build_anime_search_term("Attack on Titan", 3) == (
            "Attack on Titan Season 3"
        )


# ---------------------------------------------------------------------------
# query_indexers
# ---------------------------------------------------------------------------


class TestQueryIndexers:
    @pytest.mark.asyncio()
    async def test_failing_indexer_is_dropped(
        self, mock_indexer: AsyncMock, mock_anime_search: AsyncMock
    ) -> None:
        results = {
            "nyaasi": [_candidate("A"), _candidate("B")],
            "animetosho": [_candidate("C")],
        }

        async def search(indexer_id: str, query: SearchQuery) -> list[Candidate]:
            if indexer_id == "subsplease":
                raise IndexerError("down", indexer=indexer_id)
            return results[indexer_id]

        mock_indexer.search.side_effect = search
        uc = _make_uc(mock_indexer, mock_anime_search)

        found = await uc.query_indexers(
            ["nyaasi", "subsplease", "animetosho"], SearchQuery(title="x")
        )

        assert [c.title for c in found] == ["A", "B", "C"]
        assert mock_indexer.search.await_count == 3

    @pytest.mark.asyncio()
    async def test_all_failing_returns_empty(
        self, mock_indexer: AsyncMock, mock_anime_search: AsyncMock
    ) -> None:
        mock_indexer.search.side_effect = IndexerError("down")
        uc = _make_uc(mock_indexer, mock_anime_search)
        assert await uc.query_indexers(["a", "b"], SearchQuery(title="x")) == []

    @pytest.mark.asyncio()
    async def test_no_deduplication(
        self, mock_indexer: AsyncMock, mock_anime_search: AsyncMock
    ) -> None:
        same = _candidate("Same.Title.1080p")
        mock_indexer.search.return_value = [same]
        uc = _make_uc(mock_indexer, mock_anime_search)
        found = await uc.query_indexers(["a", "b"], SearchQuery(title="x"))
        assert found == [same, same]

    @pytest.mark.asyncio()
    async def test_repeated_indexer_id_queried_once(
        self, mock_indexer: AsyncMock, mock_anime_search: AsyncMock
    ) -> None:
        mock_indexer.search.return_value = [_candidate("A")]
        uc = _make_uc(mock_indexer, mock_anime_search)

        found = await uc.query_indexers(
            ["nyaasi", "animetosho", "nyaasi"], SearchQuery(title="x")
        )

        assert [c.title for c in found] == ["A", "A"]
        assert [call.args[0] for call in mock_indexer.search.await_args_list] == [
            "nyaasi",
            "animetosho",
        ]


# ---------------------------------------------------------------------------
# search_movie
# ---------------------------------------------------------------------------


class TestSearchMovie:
    @pytest.mark.asyncio()
    async def test_queries_all_with_movie_params(
        self,
        mock_indexer: AsyncMock,
        mock_anime_search: AsyncMock,
        movie_metadata: MovieMetadata,
    ) -> None:
        uc = _make_uc(mock_indexer, mock_anime_search)
        await uc.search_movie(movie_metadata)

        indexer_id, query = mock_indexer.search.await_args.args
        assert indexer_id == ALL_INDEXERS
        assert query.search_type == "movie"
        assert query.title == "Iron Man"
        assert query.imdb_id == "tt0371746"
        assert query.year == "2008"
        assert query.limit == 50

    @pytest.mark.asyncio()
    async def test_results_ranked(
        self,
        mock_indexer: AsyncMock,
        mock_anime_search: AsyncMock,
        movie_metadata: MovieMetadata,
    ) -> None:
        mock_indexer.search.return_value = [
            _candidate("Iron.Man.720p", size=10),
            _candidate("Iron.Man.2160p", size=5),
            _candidate("Iron.Man.1080p", size=7),
        ]
        uc = _make_uc(mock_indexer, mock_anime_search)
        ranked = await uc.search_movie(movie_metadata)
        assert [r.quality_tier for r in ranked] == [
            QualityTier.UHD_2160,
            QualityTier.FHD_1080,
            QualityTier.HD_720,
        ]

    @pytest.mark.asyncio()
    async def test_indexer_failure_returns_empty(
        self,
        mock_indexer: AsyncMock,
        mock_anime_search: AsyncMock,
        movie_metadata: MovieMetadata,
    ) -> None:
        mock_indexer.search.side_effect = IndexerError("jackett down")
        uc = _make_uc(mock_indexer, mock_anime_search)
        assert await uc.search_movie(movie_metadata) == []

    @pytest.mark.asyncio()
    async def test_unexpected_error_returns_empty(
        self,
        mock_indexer: AsyncMock,
        mock_anime_search: AsyncMock,
        movie_metadata: MovieMetadata,
    ) -> None:
        ranker = MagicMock()
        ranker.rank.side_effect = ZeroDivisionError
        uc = TorrentSearchUseCase(
            indexer=mock_indexer,
            anime_search=mock_anime_search,
            ranker=ranker,
            config=JackettConfig(),
        )
        assert await uc.search_movie(movie_metadata) == []


# ---------------------------------------------------------------------------
# search_series
# ---------------------------------------------------------------------------


class TestSearchSeries:
    @pytest.mark.asyncio()
    async def test_regular_series_filters_episode(
        self,
        mock_indexer: AsyncMock,
        mock_anime_search: AsyncMock,
        series_metadata: SeriesMetadata,
    ) -> None:
        mock_indexer.search.return_value = [
            _candidate("Breaking.Bad.S01E03.720p"),
            _candidate("Breaking.Bad.S01E04.720p"),
            _candidate("Breaking.Bad.S01.Complete.1080p"),
        ]
        uc = _make_uc(mock_indexer, mock_anime_search)

        ranked = await uc.search_series(series_metadata, 1, 3)

        assert [r.title for r in ranked] == ["Breaking.Bad.S01E03.720p"]
        indexer_id, query = mock_indexer.search.await_args.args
        assert indexer_id == ALL_INDEXERS
        assert query.text == "Breaking Bad S01E03"
        assert query.limit == 100
        mock_anime_search.search_anime.assert_not_awaited()

    @pytest.mark.asyncio()
    async def test_anime_uses_anilist_title_and_anime_indexers(
        self,
        mock_indexer: AsyncMock,
        mock_anime_search: AsyncMock,
        anime_metadata: SeriesMetadata,
    ) -> None:
        mock_anime_search.search_anime.return_value = [
            AnimeTitle(id=1, romaji="Shingeki no Kyojin Season 3"),
            AnimeTitle(id=2, romaji="Other"),
        ]
        mock_indexer.search.return_value = [
            _candidate("[SubsPlease] Shingeki no Kyojin S3 - 05 (1080p)", source="nyaasi")
        ]
        uc = _make_uc(mock_indexer, mock_anime_search)

        ranked = await uc.search_series(anime_metadata, 3, 5)

        mock_anime_search.search_anime.assert_awaited_once_with(
            "Attack on Titan Season 3"
        )
        queried = [call.args[0] for call in mock_indexer.search.await_args_list]
        assert queried == ["nyaasi", "subsplease", "animetosho"]
        query = mock_indexer.search.await_args.args[1]
        assert query.title == "Shingeki no Kyojin Season 3"
        assert query.search_type == "tvsearch"
        assert query.category == 5070
        assert query.limit == 33
        # Anime results are not filtered by SxxEyy.
        assert len(ranked) == 3

    @pytest.mark.asyncio()
    async def test_anime_without_anilist_match(
        self,
        mock_indexer: AsyncMock,
        mock_anime_search: AsyncMock,
        anime_metadata: SeriesMetadata,
    ) -> None:
        uc = _make_uc(mock_indexer, mock_anime_search)
        assert await uc.search_series(anime_metadata, 1, 1) == []
        mock_indexer.search.assert_not_awaited()

    @pytest.mark.asyncio()
    async def test_anilist_error_returns_empty(
        self,
        mock_indexer: AsyncMock,
        mock_anime_search: AsyncMock,
        anime_metadata: SeriesMetadata,
    ) -> None:
        mock_anime_search.search_anime.side_effect = RuntimeError("graphql")
        uc = _make_uc(mock_indexer, mock_anime_search)
        assert await uc.search_series(anime_metadata, 1, 1) == []
