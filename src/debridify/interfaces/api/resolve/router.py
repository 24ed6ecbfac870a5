"""``GET /resolve``: magnet -> 302 to the direct URL or a placeholder video."""

from __future__ import annotations

from pathlib import Path, PurePosixPath
from typing import cast
from urllib.parse import urlsplit

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse, RedirectResponse
from starlette.responses import Response

from debridify.domain.entities.debrid import ResolveFailure, ResolveOutcome, ResolveState
from debridify.interfaces.api.base_url import public_base_url
from debridify.interfaces.app_state import AppState

log = structlog.get_logger(__name__)

router = APIRouter(tags=["resolve"])

PENDING_RETRY_AFTER_SECONDS = 30


def _placeholder_file(public_dir: Path, outcome: ResolveOutcome) -> Path | None:
    """Local file behind a placeholder redirect, None for resolved outcomes."""
    if outcome.state is ResolveState.RESOLVED:
        return None
    name = PurePosixPath(urlsplit(outcome.redirect_url).path).name
    return public_dir / name


def _fallback_response(outcome: ResolveOutcome) -> PlainTextResponse:
    """Plain status response used when the placeholder video is not installed."""
    if outcome.state is ResolveState.PENDING:
        return PlainTextResponse(
            "Torrent is being cached on Real-Debrid, try again shortly.",
            status_code=503,
            headers={"Retry-After": str(PENDING_RETRY_AFTER_SECONDS)},
        )
    if outcome.failure is ResolveFailure.MISSING_MAGNET:
        return PlainTextResponse("Missing magnet parameter.", status_code=400)
    return PlainTextResponse("Could not resolve the torrent.", status_code=502)


@router.get("/resolve")
async def resolve_magnet(request: Request, magnet: str | None = None) -> Response:
    state = cast(AppState, request.app.state)
    outcome = await state.debrid_resolve_uc.execute(
        magnet, base_url=public_base_url(request)
    )
    log.info(
        "resolve_outcome",
        state=outcome.state.value,
        failure=outcome.failure.value if outcome.failure else None,
        from_cache=outcome.from_cache,
    )

    placeholder = _placeholder_file(state.config.server.public_dir, outcome)
    if placeholder is not None and not placeholder.is_file():
        log.warning("placeholder_missing", file=placeholder.name)
        return _fallback_response(outcome)
    return RedirectResponse(url=outcome.redirect_url, status_code=302)
