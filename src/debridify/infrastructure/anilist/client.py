"""AniList GraphQL client for anime title search."""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from debridify.domain.entities.media import AnimeTitle

log = structlog.get_logger(__name__)

ANILIST_GRAPHQL_URL = "https://graphql.anilist.co"

SEARCH_ANIME_QUERY = """
query ($search: String!) {
  Page {
    media(search: $search, type: ANIME) {
      id
      title {
        romaji
        english
        native
      }
      episodes
    }
  }
}
"""


def _to_anime_title(media: dict[str, Any]) -> AnimeTitle | None:
    media_id = media.get("id")
    if media_id is None:
        return None
    title = media.get("title") or {}
    return AnimeTitle(
        id=int(media_id),
        romaji=title.get("romaji") or None,
        english=title.get("english") or None,
        native=title.get("native") or None,
        episodes=media.get("episodes"),
    )


class AniListClient:
    """Implements ``AnimeSearchPort``.

    Transport errors, HTTP errors and GraphQL ``errors`` payloads are
    logged and reported as an empty result.
    """

    def __init__(
        self,
        *,
        http_client: httpx.AsyncClient,
        url: str = ANILIST_GRAPHQL_URL,
    ) -> None:
        self._http = http_client
        self._url = url

    async def _post(
        self, query: str, variables: dict[str, Any]
    ) -> dict[str, Any] | None:
        try:
            resp = await self._http.post(
                self._url,
                json={"query": query, "variables": variables},
                headers={"Accept": "application/json"},
            )
            resp.raise_for_status()
            payload = resp.json()
        except httpx.HTTPStatusError:
            log.warning("anilist_http_error", exc_info=True)
            return None
        except httpx.HTTPError:
            log.warning("anilist_network_error", exc_info=True)
            return None
        except ValueError:
            log.warning("anilist_invalid_json", exc_info=True)
            return None

        if payload.get("errors"):
            log.warning("anilist_graphql_errors", errors=payload["errors"])
            return None
        return payload.get("data")

    async def search_anime(self, search: str) -> list[AnimeTitle]:
        data = await self._post(SEARCH_ANIME_QUERY, {"search": search})
        if not data:
            return []

        media = (data.get("Page") or {}).get("media") or []
        titles = [t for t in (_to_anime_title(m) for m in media) if t is not None]
        log.debug("anilist_search_done", search=search, result_count=len(titles))
        return titles
