"""Quality tier detection from free-text release titles."""

from __future__ import annotations

from debridify.domain.entities.torrents import QUALITY_TOKENS, QualityTier


def extract_quality_tier(title: str) -> QualityTier:
    """Return the tier of the first listed token contained in *title*.

    Tokens are checked in fixed priority order (``2160p`` first), so a
    title mentioning both ``1080p`` and ``2160p`` is ``UHD_2160`` even if
    the 1080p token appears earlier in the text. Plain substring
    containment, case-insensitive.

    Examples:
        "Movie.2023.1080p.WEB-DL" -> FHD_1080
        "Show S01E01 [720P]" -> HD_720
        "Movie.DVDRip" -> UNKNOWN
    """
    lowered = title.lower()
    for token, tier in QUALITY_TOKENS:
        if token in lowered:
            return tier
    return QualityTier.UNKNOWN
