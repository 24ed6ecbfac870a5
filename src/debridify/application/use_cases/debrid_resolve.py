"""Debrid resolution state machine: magnet -> direct download URL.

REQUESTED -> (CACHE_HIT | ADDING) -> INFO_FETCHED -> (READY | PENDING)
          -> (RESOLVED | NO_PLAYABLE_FILE | FAILED)

Each non-terminal state has one handler returning the next state. The
decisions themselves live in small pure functions so they can be tested
without a debrid client.
"""

from __future__ import annotations

import re
import time
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass

import structlog

from debridify.application.concurrency import gather_fail_fast
from debridify.domain.entities.debrid import (
    DebridTorrentRecord,
    ResolvedLink,
    ResolveFailure,
    ResolveOutcome,
    ResolveState,
    UnrestrictedFile,
)
from debridify.domain.entities.errors import DebridError
from debridify.domain.ports.debrid import DebridClientPort
from debridify.domain.ports.resolved_link_repository import ResolvedLinkRepository

log = structlog.get_logger(__name__)

PENDING_PLACEHOLDER_PATH = "/public/being_cached_message.mp4"
ERROR_PLACEHOLDER_PATH = "/public/something_went_wrong.mp4"

DOWNLOADED_STATUS = "downloaded"

_BTIH_RE = re.compile(r"urn:btih:([a-fA-F0-9]+)")


# ---------------------------------------------------------------------------
# Pure transition helpers
# ---------------------------------------------------------------------------


def extract_info_hash(magnet: str) -> str | None:
    """Lowercase hex hash of the ``urn:btih:`` segment, None when absent."""
    match = _BTIH_RE.search(magnet)
    return match.group(1).lower() if match else None


def find_torrent_by_hash(
    torrents: Iterable[DebridTorrentRecord], info_hash: str
) -> DebridTorrentRecord | None:
    wanted = info_hash.lower()
    for torrent in torrents:
        if torrent.hash.lower() == wanted:
            return torrent
    return None


def classify_torrent_status(record: DebridTorrentRecord) -> ResolveState:
    """``downloaded`` is READY; any other provider status is PENDING."""
    if record.status == DOWNLOADED_STATUS:
        return ResolveState.READY
    return ResolveState.PENDING


def select_playable_file(files: Iterable[UnrestrictedFile]) -> UnrestrictedFile | None:
    """Largest ``video/*`` file with a download URL; first wins on equal size."""
    best: UnrestrictedFile | None = None
    for f in files:
        if not f.is_playable:
            continue
        if best is None or f.filesize > best.filesize:
            best = f
    return best


# ---------------------------------------------------------------------------
# State machine
# ---------------------------------------------------------------------------


@dataclass
class Resolution:
    """Mutable per-request data carried between state handlers."""

    magnet: str
    info_hash: str | None = None
    torrent_id: str | None = None
    record: DebridTorrentRecord | None = None
    playable: UnrestrictedFile | None = None
    failure: ResolveFailure | None = None


_Handler = Callable[[Resolution], Awaitable[ResolveState]]


class DebridResolveUseCase:
    """Resolves magnets through a debrid provider with a TTL'd result cache.

    ``execute`` never raises. Every outcome, including errors, carries a
    redirect URL: the direct download, the "being cached" placeholder for
    PENDING, or the error placeholder otherwise.
    """

    def __init__(
        self,
        *,
        debrid: DebridClientPort,
        link_repo: ResolvedLinkRepository,
        ttl_seconds: int = 3600,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._debrid = debrid
        self._link_repo = link_repo
        self._ttl = ttl_seconds
        self._clock = clock
        self._handlers: dict[ResolveState, _Handler] = {
            ResolveState.REQUESTED: self._on_requested,
            ResolveState.CACHE_HIT: self._on_cache_hit,
            ResolveState.ADDING: self._on_adding,
            ResolveState.INFO_FETCHED: self._on_info_fetched,
            ResolveState.READY: self._on_ready,
        }

    async def execute(self, magnet: str | None, *, base_url: str = "") -> ResolveOutcome:
        base_url = base_url.rstrip("/")

        if not magnet:
            log.error("resolve_missing_magnet")
            return self._outcome(
                ResolveState.FAILED, base_url, failure=ResolveFailure.MISSING_MAGNET
            )

        cached = await self._link_repo.get(magnet)
        if cached is not None:
            log.info("resolve_cache_hit")
            return ResolveOutcome(
                state=ResolveState.RESOLVED, redirect_url=cached.url, from_cache=True
            )

        try:
            state, resolution = await self.run(magnet)
        except Exception:
            log.error("resolve_failed_unexpectedly", exc_info=True)
            return self._outcome(
                ResolveState.FAILED, base_url, failure=ResolveFailure.GENERIC
            )

        if state is ResolveState.RESOLVED and resolution.playable is not None:
            url = resolution.playable.download
            await self._remember(magnet, url)
            log.info(
                "resolve_succeeded",
                torrent_id=resolution.torrent_id,
                filename=resolution.playable.filename,
                filesize=resolution.playable.filesize,
            )
            return ResolveOutcome(state=state, redirect_url=url)

        return self._outcome(state, base_url, failure=resolution.failure)

    async def run(self, magnet: str) -> tuple[ResolveState, Resolution]:
        """Drive the machine from REQUESTED to a terminal state."""
        resolution = Resolution(magnet=magnet)
        state = ResolveState.REQUESTED
        while not state.is_terminal:
            next_state = await self._handlers[state](resolution)
            log.debug(
                "resolve_transition",
                from_state=state.value,
                to_state=next_state.value,
                torrent_id=resolution.torrent_id,
            )
            state = next_state
        return state, resolution

    # --- handlers ---------------------------------------------------------

    async def _on_requested(self, r: Resolution) -> ResolveState:
        r.info_hash = extract_info_hash(r.magnet)
        if r.info_hash is None:
            return ResolveState.ADDING

        try:
            torrents = await self._debrid.list_torrents()
        except DebridError:
            log.warning("debrid_torrent_lookup_failed", exc_info=True)
            return ResolveState.ADDING

        existing = find_torrent_by_hash(torrents, r.info_hash)
        if existing is None:
            return ResolveState.ADDING
        r.torrent_id = existing.id
        return ResolveState.CACHE_HIT

    async def _on_cache_hit(self, r: Resolution) -> ResolveState:
        log.info("debrid_torrent_reused", torrent_id=r.torrent_id)
        return await self._fetch_info(r)

    async def _on_adding(self, r: Resolution) -> ResolveState:
        try:
            r.torrent_id = await self._debrid.add_magnet(r.magnet)
            await self._debrid.select_files(r.torrent_id)
        except DebridError:
            log.error("debrid_add_failed", torrent_id=r.torrent_id, exc_info=True)
            r.failure = ResolveFailure.DEBRID_ADD
            return ResolveState.FAILED
        return await self._fetch_info(r)

    async def _fetch_info(self, r: Resolution) -> ResolveState:
        assert r.torrent_id is not None
        try:
            r.record = await self._debrid.get_torrent_info(r.torrent_id)
        except DebridError:
            log.error("debrid_info_failed", torrent_id=r.torrent_id, exc_info=True)
            r.failure = ResolveFailure.DEBRID_INFO
            return ResolveState.FAILED
        return ResolveState.INFO_FETCHED

    async def _on_info_fetched(self, r: Resolution) -> ResolveState:
        assert r.record is not None
        state = classify_torrent_status(r.record)
        if state is ResolveState.PENDING:
            log.info(
                "debrid_torrent_not_cached",
                torrent_id=r.torrent_id,
                status=r.record.status,
            )
        return state

    async def _on_ready(self, r: Resolution) -> ResolveState:
        assert r.record is not None
        if not r.record.links:
            log.error("debrid_no_file_links", torrent_id=r.torrent_id)
            r.failure = ResolveFailure.NO_PLAYABLE_FILE
            return ResolveState.NO_PLAYABLE_FILE

        try:
            files = await gather_fail_fast(
                self._debrid.unrestrict_link(link) for link in r.record.links
            )
        except DebridError:
            log.error("debrid_unrestrict_failed", torrent_id=r.torrent_id, exc_info=True)
            r.failure = ResolveFailure.GENERIC
            return ResolveState.FAILED

        r.playable = select_playable_file(files)
        if r.playable is None:
            log.error("debrid_no_playable_file", torrent_id=r.torrent_id)
            r.failure = ResolveFailure.NO_PLAYABLE_FILE
            return ResolveState.NO_PLAYABLE_FILE
        return ResolveState.RESOLVED

    # --- outcome ------------------------------------------------------------

    async def _remember(self, magnet: str, url: str) -> None:
        link = ResolvedLink(magnet=magnet, url=url, expires_at=self._clock() + self._ttl)
        try:
            await self._link_repo.save(link)
        except Exception:
            log.warning("resolved_link_save_failed", exc_info=True)

    @staticmethod
    def _outcome(
        state: ResolveState,
        base_url: str,
        *,
        failure: ResolveFailure | None = None,
    ) -> ResolveOutcome:
        path = (
            PENDING_PLACEHOLDER_PATH
            if state is ResolveState.PENDING
            else ERROR_PLACEHOLDER_PATH
        )
        return ResolveOutcome(
            state=state, redirect_url=f"{base_url}{path}", failure=failure
        )
