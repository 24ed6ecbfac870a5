"""Stremio addon API endpoints (manifest, stream)."""

from __future__ import annotations

from typing import Any, cast

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from debridify.domain.entities.media import ContentType
from debridify.domain.entities.stremio import StreamRequest, StremioStream
from debridify.interfaces.api.base_url import public_base_url
from debridify.interfaces.app_state import AppState

log = structlog.get_logger(__name__)

router = APIRouter(tags=["stremio"])

ADDON_ID = "com.AbdulWasayWk.Debridify"
ADDON_VERSION = "1.0.0"

_CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "*",
}


def build_manifest() -> dict[str, Any]:
    return {
        "id": ADDON_ID,
        "version": ADDON_VERSION,
        "name": "Debridify",
        "description": "Local Stremio addon for direct Real-Debrid streams",
        "resources": ["stream"],
        "types": ["movie", "series"],
        "catalogs": [],
        "idPrefixes": ["tt"],
    }


def parse_stream_id(content_type: str, raw_id: str) -> StreamRequest | None:
    """Parse a Stremio stream ID.

    Movies: ``tt1234567``
    Series: ``tt1234567:1:5`` (season 1, episode 5)
    """
    if content_type not in ("movie", "series"):
        return None
    ct = cast(ContentType, content_type)

    parts = raw_id.split(":")
    imdb_id = parts[0]
    if not imdb_id.startswith("tt"):
        return None

    if ct == "movie":
        return StreamRequest(imdb_id=imdb_id, content_type=ct)

    if len(parts) != 3:
        return None
    try:
        season = int(parts[1])
        episode = int(parts[2])
    except ValueError:
        return None
    if season < 0 or episode < 0:
        return None
    return StreamRequest(imdb_id=imdb_id, content_type=ct, season=season, episode=episode)


def _format_stream(stream: StremioStream) -> dict[str, str]:
    return {
        "name": stream.name,
        "description": stream.description,
        "url": stream.url,
    }


@router.get("/manifest.json")
async def stremio_manifest() -> JSONResponse:
    return JSONResponse(content=build_manifest(), headers=_CORS_HEADERS)


@router.get("/stream/{content_type}/{stream_id}.json")
async def stremio_stream(
    request: Request,
    content_type: str,
    stream_id: str,
) -> JSONResponse:
    """Ranked streams for a movie or episode; ``{"streams": []}`` on any failure."""
    state = cast(AppState, request.app.state)

    stream_request = parse_stream_id(content_type, stream_id)
    if stream_request is None:
        log.info("stremio_invalid_stream_id", content_type=content_type, id=stream_id)
        return JSONResponse(content={"streams": []}, headers=_CORS_HEADERS)

    try:
        streams = await state.stremio_stream_uc.execute(
            stream_request, base_url=public_base_url(request)
        )
    except Exception:
        log.error(
            "stremio_stream_failed",
            content_type=content_type,
            id=stream_id,
            exc_info=True,
        )
        streams = []

    return JSONResponse(
        content={"streams": [_format_stream(s) for s in streams]},
        headers=_CORS_HEADERS,
    )
