"""Convert ranked candidates into Stremio stream objects.

Pure transformation logic, no I/O.
"""

from __future__ import annotations

from urllib.parse import quote

from debridify.domain.entities.stremio import StremioStream
from debridify.domain.entities.torrents import RankedCandidate

ADDON_NAME = "Debridify"

_KB = 1024
_MB = 1024**2
_GB = 1024**3


def format_bytes(size: int) -> str:
    """Human readable size with one decimal.

    Examples:
        1610612736 -> "1.5 GB"
        734003200 -> "700.0 MB"
        512 -> "512 B"
    """
    if size >= _GB:
        return f"{size / _GB:.1f} GB"
    if size >= _MB:
        return f"{size / _MB:.1f} MB"
    if size >= _KB:
        return f"{size / _KB:.1f} KB"
    return f"{size} B"


def build_resolve_url(base_url: str, identifier: str) -> str:
    return f"{base_url.rstrip('/')}/resolve?magnet={quote(identifier, safe='')}"


def _description(ranked: RankedCandidate) -> str:
    return "\n".join(
        (
            f"🎬 {ranked.title}",
            f"💾 Size: {format_bytes(ranked.size_bytes)}",
            f"⚙️ From: {ranked.source_name}",
        )
    )


def to_stremio_stream(ranked: RankedCandidate, base_url: str) -> StremioStream:
    return StremioStream(
        name=f"{ADDON_NAME} ({ranked.quality_tier.label})",
        description=_description(ranked),
        url=build_resolve_url(base_url, ranked.identifier),
    )


def convert_candidates(
    ranked: list[RankedCandidate], base_url: str
) -> list[StremioStream]:
    """Keep ranking order; one stream per candidate."""
    return [to_stremio_stream(r, base_url) for r in ranked]
