"""Real-Debrid REST 1.0 client (httpx)."""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from debridify.domain.entities.debrid import DebridTorrentRecord, UnrestrictedFile
from debridify.domain.entities.errors import DebridError

log = structlog.get_logger(__name__)

BASE_URL = "https://api.real-debrid.com/rest/1.0"

# Real-Debrid error_code -> short description
_ERROR_CODES: dict[int, str] = {
    8: "bad token",
    9: "permission denied",
    21: "active torrents limit reached",
    22: "IP address not allowed",
    23: "traffic exhausted",
    34: "too many requests",
    35: "content marked as infringing",
}


def _to_record(data: dict[str, Any]) -> DebridTorrentRecord:
    return DebridTorrentRecord(
        id=str(data.get("id", "")),
        hash=str(data.get("hash") or "").lower(),
        status=str(data.get("status") or ""),
        links=tuple(data.get("links") or ()),
        filename=str(data.get("filename") or ""),
    )


def _to_unrestricted(data: dict[str, Any]) -> UnrestrictedFile:
    return UnrestrictedFile(
        download=str(data.get("download") or ""),
        filename=str(data.get("filename") or ""),
        mime_type=str(data.get("mimeType") or ""),
        filesize=int(data.get("filesize") or 0),
    )


class RealDebridClient:
    """Implements ``DebridClientPort``.

    Authenticates with the ``auth_token`` query parameter and sends form
    bodies for POSTs. Any transport, HTTP or payload problem raises
    ``DebridError``.
    """

    def __init__(
        self,
        *,
        api_key: str,
        http_client: httpx.AsyncClient,
        base_url: str = BASE_URL,
    ) -> None:
        self._api_key = api_key
        self._http = http_client
        self._base_url = base_url.rstrip("/")

    async def _request(
        self,
        method: str,
        path: str,
        *,
        data: dict[str, str] | None = None,
    ) -> Any:
        url = f"{self._base_url}{path}"
        try:
            resp = await self._http.request(
                method, url, params={"auth_token": self._api_key}, data=data
            )
        except httpx.HTTPError as e:
            raise DebridError(f"{method} {path} failed: {e!r}") from e

        if resp.status_code >= 400:
            raise self._error_from_response(method, path, resp)

        if resp.status_code == 204 or not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as e:
            raise DebridError(f"{method} {path} returned invalid JSON") from e

    @staticmethod
    def _error_from_response(
        method: str, path: str, resp: httpx.Response
    ) -> DebridError:
        error_code: int | None = None
        message = resp.reason_phrase
        try:
            body = resp.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            error_code = body.get("error_code")
            message = body.get("error") or message
        if error_code in _ERROR_CODES:
            message = f"{message} ({_ERROR_CODES[error_code]})"
        return DebridError(
            f"{method} {path} -> HTTP {resp.status_code}: {message}",
            status_code=resp.status_code,
            error_code=error_code,
        )

    async def list_torrents(self) -> list[DebridTorrentRecord]:
        data = await self._request("GET", "/torrents")
        return [_to_record(item) for item in data or []]

    async def add_magnet(self, magnet: str) -> str:
        data = await self._request(
            "POST", "/torrents/addMagnet", data={"magnet": magnet}
        )
        torrent_id = (data or {}).get("id")
        if not torrent_id:
            raise DebridError("addMagnet response without torrent id")
        log.info("realdebrid_magnet_added", torrent_id=torrent_id)
        return str(torrent_id)

    async def select_files(self, torrent_id: str, file_ids: str = "all") -> None:
        await self._request(
            "POST", f"/torrents/selectFiles/{torrent_id}", data={"files": file_ids}
        )

    async def get_torrent_info(self, torrent_id: str) -> DebridTorrentRecord:
        data = await self._request("GET", f"/torrents/info/{torrent_id}")
        if not isinstance(data, dict):
            raise DebridError(f"empty torrent info for {torrent_id}")
        return _to_record(data)

    async def unrestrict_link(self, link: str) -> UnrestrictedFile:
        data = await self._request("POST", "/unrestrict/link", data={"link": link})
        if not isinstance(data, dict):
            raise DebridError("empty unrestrict response")
        return _to_unrestricted(data)
