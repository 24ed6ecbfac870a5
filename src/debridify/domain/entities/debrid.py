"""Debrid resolution entities and the resolution state enum."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ResolveState(Enum):
    REQUESTED = "requested"
    CACHE_HIT = "cache_hit"
    ADDING = "adding"
    INFO_FETCHED = "info_fetched"
    READY = "ready"
    PENDING = "pending"
    RESOLVED = "resolved"
    NO_PLAYABLE_FILE = "no_playable_file"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in _TERMINAL_STATES


_TERMINAL_STATES = frozenset(
    {
        ResolveState.PENDING,
        ResolveState.RESOLVED,
        ResolveState.NO_PLAYABLE_FILE,
        ResolveState.FAILED,
    }
)


class ResolveFailure(Enum):
    """Why a resolution ended without a playable URL."""

    MISSING_MAGNET = "missing_magnet"
    DEBRID_ADD = "debrid_add"
    DEBRID_INFO = "debrid_info"
    NO_PLAYABLE_FILE = "no_playable_file"
    GENERIC = "generic"


@dataclass(frozen=True)
class DebridTorrentRecord:
    """A torrent as reported by the debrid provider.

    ``hash`` is always stored as lowercase hex.
    """

    id: str
    hash: str = ""
    status: str = ""
    links: tuple[str, ...] = ()
    filename: str = ""


@dataclass(frozen=True)
class UnrestrictedFile:
    """Result of unrestricting one provider-internal file link."""

    download: str
    filename: str = ""
    mime_type: str = ""
    filesize: int = 0

    @property
    def is_video(self) -> bool:
        return self.mime_type.startswith("video/")

    @property
    def is_playable(self) -> bool:
        return self.is_video and bool(self.download)


@dataclass(frozen=True)
class ResolvedLink:
    """Memoized resolution for one magnet identifier."""

    magnet: str
    url: str
    expires_at: float  # epoch seconds

    def is_live(self, now: float) -> bool:
        return self.expires_at > now


@dataclass(frozen=True)
class ResolveOutcome:
    """What a resolve request ends in.

    ``redirect_url`` is always set: the direct download URL for
    ``RESOLVED``, otherwise a placeholder video.
    """

    state: ResolveState
    redirect_url: str
    failure: ResolveFailure | None = None
    from_cache: bool = False
