"""Application state container for FastAPI dependency injection."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
from starlette.datastructures import State

from debridify.infrastructure.config import AppConfig

if TYPE_CHECKING:
    from debridify.application.use_cases import (
        DebridResolveUseCase,
        StremioStreamUseCase,
        TorrentSearchUseCase,
    )
    from debridify.domain.ports import (
        CachePort,
        DebridClientPort,
        MetadataProviderPort,
        ResolvedLinkRepository,
    )


class AppState(State):
    """FastAPI application state with all DI resources.

    Lifecycle managed by composition.py::lifespan().
    """

    config: AppConfig

    # Infrastructure
    http_client: httpx.AsyncClient
    metadata_cache: CachePort
    resolved_link_cache: CachePort

    # Ports
    metadata_provider: MetadataProviderPort
    debrid_client: DebridClientPort
    resolved_link_repo: ResolvedLinkRepository

    # Use cases
    torrent_search_uc: TorrentSearchUseCase
    stremio_stream_uc: StremioStreamUseCase
    debrid_resolve_uc: DebridResolveUseCase
