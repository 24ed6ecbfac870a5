"""Composition root: dependency injection via FastAPI lifespan."""

from __future__ import annotations

from contextlib import asynccontextmanager
from pathlib import PurePosixPath
from typing import AsyncIterator, cast

import httpx
import structlog
from fastapi import FastAPI

from debridify.application.use_cases import (
    DebridResolveUseCase,
    StremioStreamUseCase,
    TorrentSearchUseCase,
)
from debridify.application.use_cases.debrid_resolve import (
    ERROR_PLACEHOLDER_PATH,
    PENDING_PLACEHOLDER_PATH,
)
from debridify.infrastructure.anilist import AniListClient
from debridify.infrastructure.cache import create_cache
from debridify.infrastructure.common.retry_transport import RetryTransport
from debridify.infrastructure.config.schema import AppConfig
from debridify.infrastructure.omdb import OmdbMetadataClient
from debridify.infrastructure.persistence import CacheResolvedLinkRepository
from debridify.infrastructure.realdebrid import RealDebridClient
from debridify.infrastructure.stremio.stream_converter import convert_candidates
from debridify.infrastructure.stremio.stream_sorter import CandidateRanker
from debridify.infrastructure.torznab import JackettIndexerClient
from debridify.interfaces.app_state import AppState

log = structlog.get_logger(__name__)


def _build_http_client(config: AppConfig) -> httpx.AsyncClient:
    transport = RetryTransport(
        httpx.AsyncHTTPTransport(),
        max_retries=config.http_retry_max_attempts,
        backoff_base=config.http_retry_backoff_base,
        max_backoff=config.http_retry_max_backoff,
    )
    return httpx.AsyncClient(
        transport=transport,
        timeout=httpx.Timeout(config.http_timeout_seconds),
        headers={"User-Agent": config.http_user_agent},
        follow_redirects=config.http_follow_redirects,
    )


def _warn_missing_credentials(config: AppConfig) -> None:
    missing = [
        name
        for name, value in (
            ("jackett.api_key", config.jackett.api_key),
            ("omdb.api_key", config.omdb.api_key),
            ("realdebrid.api_key", config.realdebrid.api_key),
        )
        if not value
    ]
    if missing:
        log.warning("credentials_missing", keys=missing)


def _warn_missing_placeholders(config: AppConfig) -> None:
    public_dir = config.server.public_dir
    missing = [
        name
        for name in (
            PurePosixPath(PENDING_PLACEHOLDER_PATH).name,
            PurePosixPath(ERROR_PLACEHOLDER_PATH).name,
        )
        if not (public_dir / name).is_file()
    ]
    if missing:
        log.warning("placeholders_missing", public_dir=str(public_dir), files=missing)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan hook: build and tear down all resources.

    Order matters:
        1. Caches (metadata without expiry, resolved links with TTL)
        2. HTTP client (shared by every upstream client)
        3. Upstream clients (OMDb, Jackett, AniList, Real-Debrid)
        4. Use cases
    """
    state = cast(AppState, app.state)
    config = state.config

    _warn_missing_credentials(config)
    _warn_missing_placeholders(config)

    # 1) Caches
    state.metadata_cache = create_cache(
        "metadata", max_entries=config.cache.max_entries
    )
    state.resolved_link_cache = create_cache(
        "resolved_links",
        max_entries=config.cache.max_entries,
        ttl_seconds=config.cache.resolved_link_ttl_seconds,
    )
    await state.metadata_cache.__aenter__()
    await state.resolved_link_cache.__aenter__()
    log.info("caches_initialized", max_entries=config.cache.max_entries)

    # 2) HTTP client with 429/5xx retry
    state.http_client = _build_http_client(config)
    log.info(
        "http_client_initialized",
        timeout_seconds=config.http_timeout_seconds,
        retry_max_attempts=config.http_retry_max_attempts,
    )

    # 3) Upstream clients
    state.metadata_provider = OmdbMetadataClient(
        url=config.omdb.url,
        api_key=config.omdb.api_key,
        http_client=state.http_client,
        cache=state.metadata_cache,
    )
    indexer = JackettIndexerClient(
        base_url=config.jackett.url,
        api_key=config.jackett.api_key,
        http_client=state.http_client,
    )
    anime_search = AniListClient(
        http_client=state.http_client,
        url=config.anilist.url,
    )
    state.debrid_client = RealDebridClient(
        api_key=config.realdebrid.api_key,
        http_client=state.http_client,
        base_url=config.realdebrid.url,
    )
    state.resolved_link_repo = CacheResolvedLinkRepository(state.resolved_link_cache)
    log.info("upstream_clients_initialized", jackett_url=config.jackett.url)

    # 4) Use cases
    state.torrent_search_uc = TorrentSearchUseCase(
        indexer=indexer,
        anime_search=anime_search,
        ranker=CandidateRanker(config.ranking.indexer_priority),
        config=config.jackett,
    )
    state.stremio_stream_uc = StremioStreamUseCase(
        metadata=state.metadata_provider,
        search=state.torrent_search_uc,
        convert_fn=convert_candidates,
    )
    state.debrid_resolve_uc = DebridResolveUseCase(
        debrid=state.debrid_client,
        link_repo=state.resolved_link_repo,
        ttl_seconds=config.cache.resolved_link_ttl_seconds,
    )

    log.info("app_startup_complete")

    try:
        yield
    finally:
        await state.http_client.aclose()
        log.info("http_client_closed")

        await state.resolved_link_cache.aclose()
        await state.metadata_cache.aclose()
        log.info("caches_closed")

        log.info("app_shutdown_complete")
