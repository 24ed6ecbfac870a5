"""FastAPI application factory (create_app)."""

from __future__ import annotations

import time
from collections.abc import Awaitable, Callable

import structlog
from fastapi import FastAPI, Request
from fastapi.staticfiles import StaticFiles
from starlette.responses import Response

from debridify.infrastructure.config import AppConfig
from debridify.interfaces.app_state import AppState
from debridify.interfaces.composition import lifespan

log = structlog.get_logger(__name__)


def create_app(config: AppConfig) -> FastAPI:
    """Create the FastAPI app: configuration only, no resource initialization.

    Resources (HTTP client, caches, upstream clients) are created in lifespan().
    """
    app = FastAPI(
        title="Debridify",
        description="Stremio addon streaming torrents through Real-Debrid",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.state = AppState()
    app.state.config = config

    from debridify.interfaces.api.resolve import router as resolve_router
    from debridify.interfaces.api.stremio import router as stremio_router

    app.include_router(stremio_router)
    app.include_router(resolve_router)

    app.mount(
        "/public",
        StaticFiles(directory=config.server.public_dir, check_dir=False),
        name="public",
    )

    @app.get("/healthz")
    async def healthz() -> dict[str, str]:
        """Liveness probe."""
        return {"status": "ok"}

    @app.middleware("http")
    async def log_requests(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        start = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            duration_ms = (time.perf_counter() - start) * 1000.0
            # Query strings carry magnets; only the path is logged.
            log.info(
                "http_request",
                method=request.method,
                path=request.url.path,
                status_code=status_code,
                duration_ms=round(duration_ms, 2),
                client_host=(request.client.host if request.client else None),
            )

    return app
