"""Stremio stream use case.

IMDb ID -> OMDb metadata -> torrent search -> ranked candidates
-> StremioStream list.
"""

from __future__ import annotations

from collections.abc import Callable

import structlog

from debridify.application.use_cases.torrent_search import TorrentSearchUseCase
from debridify.domain.entities.stremio import StreamRequest, StremioStream
from debridify.domain.entities.torrents import RankedCandidate
from debridify.domain.ports.metadata import MetadataProviderPort

log = structlog.get_logger(__name__)

_ConvertFn = Callable[[list[RankedCandidate], str], list[StremioStream]]


class StremioStreamUseCase:
    """Builds the stream list for one Stremio request; never raises."""

    def __init__(
        self,
        *,
        metadata: MetadataProviderPort,
        search: TorrentSearchUseCase,
        convert_fn: _ConvertFn,
    ) -> None:
        self._metadata = metadata
        self._search = search
        self._convert = convert_fn

    async def execute(
        self, request: StreamRequest, *, base_url: str = ""
    ) -> list[StremioStream]:
        ranked = await self._find_candidates(request)
        log.info(
            "stremio_streams_built",
            imdb_id=request.imdb_id,
            content_type=request.content_type,
            season=request.season,
            episode=request.episode,
            count=len(ranked),
        )
        return self._convert(ranked, base_url)

    async def _find_candidates(self, request: StreamRequest) -> list[RankedCandidate]:
        try:
            metadata = await self._metadata.get_metadata(request.imdb_id)
        except Exception:
            log.error("metadata_lookup_failed", imdb_id=request.imdb_id, exc_info=True)
            return []

        if metadata is None:
            log.info("metadata_not_found", imdb_id=request.imdb_id)
            return []

        if metadata.kind != request.content_type:
            log.info(
                "metadata_type_mismatch",
                imdb_id=request.imdb_id,
                requested=request.content_type,
                actual=metadata.kind,
            )
            return []

        match metadata.kind:
            case "movie":
                return await self._search.search_movie(metadata)
            case "series":
                if request.season is None or request.episode is None:
                    log.info("series_request_without_episode", imdb_id=request.imdb_id)
                    return []
                return await self._search.search_series(
                    metadata, request.season, request.episode
                )
