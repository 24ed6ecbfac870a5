"""Shared test fixtures for the Debridify test suite."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from debridify.domain.entities import (
    Candidate,
    DebridTorrentRecord,
    MovieMetadata,
    SeriesMetadata,
    UnrestrictedFile,
)

MAGNET = "magnet:?xt=urn:btih:ABCDEF0123456789ABCDEF0123456789ABCDEF01&dn=Iron.Man"
INFO_HASH = "abcdef0123456789abcdef0123456789abcdef01"


class FakeClock:
    """Manually advanced epoch clock."""

    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


# ---------------------------------------------------------------------------
# Domain entity fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def movie_metadata() -> MovieMetadata:
    return MovieMetadata(
        imdb_id="tt0371746",
        title="Iron Man",
        year="2008",
        countries=("United States", "Canada"),
        genres=("Action", "Adventure", "Sci-Fi"),
    )


@pytest.fixture()
def series_metadata() -> SeriesMetadata:
    return SeriesMetadata(
        imdb_id="tt0903747",
        title="Breaking Bad",
        year="2008-2013",
        countries=("United States",),
        genres=("Crime", "Drama", "Thriller"),
        total_seasons=5,
    )


@pytest.fixture()
def anime_metadata() -> SeriesMetadata:
    return SeriesMetadata(
        imdb_id="tt2560140",
        title="Attack on Titan",
        year="2013-2023",
        countries=("Japan",),
        genres=("Animation", "Action", "Adventure"),
        total_seasons=4,
    )


@pytest.fixture()
def candidate() -> Candidate:
    return Candidate(
        title="Iron.Man.2008.1080p.BluRay.x264",
        identifier=MAGNET,
        source_name="1337x",
        size_bytes=2_147_483_648,
    )


@pytest.fixture()
def downloaded_record() -> DebridTorrentRecord:
    return DebridTorrentRecord(
        id="RD123",
        hash=INFO_HASH,
        status="downloaded",
        links=(
            "https://real-debrid.com/d/SAMPLE",
            "https://real-debrid.com/d/MAIN",
        ),
        filename="Iron.Man.2008.1080p.BluRay.x264",
    )


@pytest.fixture()
def video_files() -> list[UnrestrictedFile]:
    return [
        UnrestrictedFile(
            download="https://dl.example.com/sample.mkv",
            filename="sample.mkv",
            mime_type="video/x-matroska",
            filesize=734_003_200,
        ),
        UnrestrictedFile(
            download="https://dl.example.com/main.mkv",
            filename="Iron.Man.2008.1080p.mkv",
            mime_type="video/x-matroska",
            filesize=1_503_238_554,
        ),
    ]


# ---------------------------------------------------------------------------
# Mock port fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def mock_cache() -> AsyncMock:
    """Mock CachePort."""
    cache = AsyncMock()
    cache.get = AsyncMock(return_value=None)
    cache.set = AsyncMock()
    cache.delete = AsyncMock(return_value=True)
    cache.clear = AsyncMock()
    cache.aclose = AsyncMock()
    return cache


@pytest.fixture()
def mock_debrid() -> AsyncMock:
    """Mock DebridClientPort with an empty account."""
    debrid = AsyncMock()
    debrid.list_torrents = AsyncMock(return_value=[])
    debrid.add_magnet = AsyncMock(return_value="RD123")
    debrid.select_files = AsyncMock(return_value=None)
    debrid.get_torrent_info = AsyncMock()
    debrid.unrestrict_link = AsyncMock()
    return debrid


@pytest.fixture()
def mock_link_repo() -> AsyncMock:
    """Mock ResolvedLinkRepository."""
    repo = AsyncMock()
    repo.save = AsyncMock()
    repo.get = AsyncMock(return_value=None)
    return repo


@pytest.fixture()
def mock_indexer() -> AsyncMock:
    """Mock IndexerClientPort."""
    indexer = AsyncMock()
    indexer.search = AsyncMock(return_value=[])
    return indexer


@pytest.fixture()
def mock_anime_search() -> AsyncMock:
    """Mock AnimeSearchPort."""
    anime = AsyncMock()
    anime.search_anime = AsyncMock(return_value=[])
    return anime
