"""Port for the debrid provider API."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from debridify.domain.entities.debrid import DebridTorrentRecord, UnrestrictedFile


@runtime_checkable
class DebridClientPort(Protocol):
    """Async interface for a debrid account.

    Every method raises ``DebridError`` when the provider call fails.
    """

    async def list_torrents(self) -> list[DebridTorrentRecord]:
        """All torrents currently tracked by the account."""
        ...

    async def add_magnet(self, magnet: str) -> str:
        """Submit a magnet link and return the provider torrent ID."""
        ...

    async def select_files(self, torrent_id: str, file_ids: str = "all") -> None:
        """Choose which files of the torrent to download."""
        ...

    async def get_torrent_info(self, torrent_id: str) -> DebridTorrentRecord:
        """Fetch status and file links of one torrent."""
        ...

    async def unrestrict_link(self, link: str) -> UnrestrictedFile:
        """Turn a provider-internal file link into a direct download."""
        ...
