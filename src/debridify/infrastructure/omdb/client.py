"""OMDb API client: IMDb ID -> movie/series metadata, cached without expiry."""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from debridify.domain.entities.media import MediaMetadata, MovieMetadata, SeriesMetadata
from debridify.domain.ports.cache import CachePort

log = structlog.get_logger(__name__)

_NOT_AVAILABLE = "N/A"


def _split_list(raw: Any) -> tuple[str, ...]:
    """``"Japan, United States"`` -> ``("Japan", "United States")``."""
    if not isinstance(raw, str) or raw == _NOT_AVAILABLE:
        return ()
    return tuple(part.strip() for part in raw.split(",") if part.strip())


def _parse_int(raw: Any) -> int | None:
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None


def to_metadata(imdb_id: str, data: dict[str, Any]) -> MediaMetadata | None:
    """Map an OMDb payload to the tagged metadata variant.

    Returns None for ``Response: "False"`` and for types other than
    movie or series.
    """
    if str(data.get("Response", "True")).lower() == "false":
        return None

    title = data.get("Title") or ""
    year = data.get("Year") or ""
    countries = _split_list(data.get("Country"))
    genres = _split_list(data.get("Genre"))

    match data.get("Type"):
        case "movie":
            return MovieMetadata(
                imdb_id=imdb_id,
                title=title,
                year=year,
                countries=countries,
                genres=genres,
            )
        case "series":
            return SeriesMetadata(
                imdb_id=imdb_id,
                title=title,
                year=year,
                countries=countries,
                genres=genres,
                total_seasons=_parse_int(data.get("totalSeasons")),
            )
        case _:
            return None


class OmdbMetadataClient:
    """Async OMDb client using httpx + CachePort.

    Implements ``MetadataProviderPort``. Metadata is treated as immutable
    for the process lifetime, so hits are stored without a TTL; the cache's
    LRU bound is the only eviction.
    """

    def __init__(
        self,
        *,
        url: str,
        api_key: str,
        http_client: httpx.AsyncClient,
        cache: CachePort,
    ) -> None:
        self._url = url
        self._api_key = api_key
        self._http = http_client
        self._cache = cache

    async def _get(self, imdb_id: str) -> dict[str, Any] | None:
        try:
            resp = await self._http.get(
                self._url, params={"i": imdb_id, "apikey": self._api_key}
            )
            if resp.status_code == 401:
                log.error("omdb_api_key_invalid", status=401)
                return None
            resp.raise_for_status()
            return resp.json()
        except httpx.HTTPStatusError:
            log.warning("omdb_http_error", imdb_id=imdb_id, exc_info=True)
            return None
        except httpx.HTTPError:
            log.warning("omdb_network_error", imdb_id=imdb_id, exc_info=True)
            return None
        except ValueError:
            log.warning("omdb_invalid_json", imdb_id=imdb_id, exc_info=True)
            return None

    async def get_metadata(self, imdb_id: str) -> MediaMetadata | None:
        cache_key = f"omdb:{imdb_id}"
        cached = await self._cache.get(cache_key)
        if cached is not None:
            return cached

        if not self._url:
            log.warning("omdb_url_missing")
            return None

        data = await self._get(imdb_id)
        if data is None:
            return None

        metadata = to_metadata(imdb_id, data)
        if metadata is None:
            log.info("omdb_not_found", imdb_id=imdb_id, error=data.get("Error"))
            return None

        await self._cache.set(cache_key, metadata)
        return metadata
