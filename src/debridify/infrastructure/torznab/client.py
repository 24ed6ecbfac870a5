"""Jackett Torznab client (httpx)."""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from debridify.domain.entities.errors import IndexerError
from debridify.domain.entities.torrents import Candidate, SearchQuery
from debridify.infrastructure.torznab.parser import parse_torznab_feed

log = structlog.get_logger(__name__)


class JackettIndexerClient:
    """Queries ``{base_url}/indexers/{id}/results/torznab``.

    Implements ``IndexerClientPort``. Every failure is raised as
    ``IndexerError``; deciding whether a failure is fatal is up to the
    caller.
    """

    def __init__(
        self,
        *,
        base_url: str,
        api_key: str,
        http_client: httpx.AsyncClient,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._http = http_client

    def build_params(self, query: SearchQuery) -> dict[str, Any]:
        params: dict[str, Any] = {
            "apikey": self._api_key,
            "t": query.search_type,
            "q": query.text,
        }
        if query.imdb_id:
            params["imdbid"] = query.imdb_id
        if query.year:
            params["year"] = query.year
        if query.category is not None:
            params["cat"] = query.category
        if query.limit is not None:
            params["limit"] = query.limit
        return params

    async def search(self, indexer_id: str, query: SearchQuery) -> list[Candidate]:
        url = f"{self._base_url}/indexers/{indexer_id}/results/torznab"
        try:
            resp = await self._http.get(url, params=self.build_params(query))
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise IndexerError(
                f"HTTP {e.response.status_code} from indexer",
                indexer=indexer_id,
            ) from e
        except httpx.HTTPError as e:
            raise IndexerError(f"request failed: {e!r}", indexer=indexer_id) from e

        candidates = parse_torznab_feed(resp.content, indexer=indexer_id)
        log.debug(
            "indexer_search_done",
            indexer=indexer_id,
            query=query.text,
            result_count=len(candidates),
        )
        return candidates
