"""Externally visible base URL for links handed to clients."""

from __future__ import annotations

from typing import cast

from fastapi import Request

from debridify.interfaces.app_state import AppState


def public_base_url(request: Request) -> str:
    """Configured ``server.public_base_url``, else the URL the request came in on."""
    state = cast(AppState, request.app.state)
    configured = state.config.server.public_base_url
    if configured:
        return configured.rstrip("/")
    return str(request.base_url).rstrip("/")
