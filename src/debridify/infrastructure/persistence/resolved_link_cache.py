"""Resolved-link repository backed by CachePort."""

from __future__ import annotations

import json
import time
from collections.abc import Callable

import structlog

from debridify.domain.entities.debrid import ResolvedLink
from debridify.domain.ports.cache import CachePort

log = structlog.get_logger(__name__)

_KEY_PREFIX = "resolved:"


def _serialize(link: ResolvedLink) -> str:
    return json.dumps(
        {"magnet": link.magnet, "url": link.url, "expires_at": link.expires_at}
    )


def _deserialize(data: str) -> ResolvedLink:
    d = json.loads(data)
    return ResolvedLink(
        magnet=d["magnet"],
        url=d["url"],
        expires_at=float(d["expires_at"]),
    )


class CacheResolvedLinkRepository:
    """Stores magnet -> direct URL resolutions.

    The cache entry TTL only bounds memory; whether a link may be served
    is decided here against ``expires_at`` so the check is exact at the
    serving instant.
    """

    def __init__(
        self,
        cache: CachePort,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.cache = cache
        self._clock = clock

    async def save(self, link: ResolvedLink) -> None:
        ttl = max(1, int(link.expires_at - self._clock()) + 1)
        await self.cache.set(_KEY_PREFIX + link.magnet, _serialize(link), ttl=ttl)
        log.debug("resolved_link_saved", expires_at=link.expires_at)

    async def get(self, magnet: str) -> ResolvedLink | None:
        data = await self.cache.get(_KEY_PREFIX + magnet)
        if data is None:
            return None

        try:
            link = _deserialize(data)
        except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
            log.error("resolved_link_deserialize_error", error=str(e))
            return None

        if not link.is_live(self._clock()):
            log.debug("resolved_link_stale", expires_at=link.expires_at)
            return None
        return link
