"""Tests for converting ranked candidates into Stremio streams."""

from __future__ import annotations

import pytest

from debridify.domain.entities.torrents import Candidate, QualityTier, RankedCandidate
from debridify.infrastructure.stremio.stream_converter import (
    build_resolve_url,
    convert_candidates,
    format_bytes,
    to_stremio_stream,
)

MAGNET = "magnet:?xt=urn:btih:abc&dn=Iron Man&tr=udp://tracker:1337"


def _ranked(
    *,
    title: str = "Iron.Man.2008.2160p",
    tier: QualityTier = QualityTier.UHD_2160,
    size: int = 1_610_612_736,
    source: str = "1337x",
    identifier: str = MAGNET,
) -> RankedCandidate:
    return RankedCandidate(
        candidate=Candidate(
            title=title, identifier=identifier, source_name=source, size_bytes=size
        ),
        quality_tier=tier,
    )


class TestFormatBytes:
    @pytest.mark.parametrize(
        ("size", "expected"),
        [
            (0, "0 B"),
            (512, "512 B"),
            (2048, "2.0 KB"),
            (734_003_200, "700.0 MB"),
            (1_610_612_736, "1.5 GB"),
        ],
    )
    def test_units(self, size: int, expected: str) -> None:
        assert format_bytes(size) == expected


class TestBuildResolveUrl:
    def test_identifier_fully_encoded(self) -> None:
        url = build_resolve_url("http://127.0.0.1:7000", MAGNET)
        assert url.startswith("http://127.0.0.1:7000/resolve?magnet=")
        encoded = url.split("magnet=", 1)[1]
        assert "&" not in encoded
        assert "/" not in encoded
        assert encoded.startswith("magnet%3A%3Fxt%3Durn%3Abtih%3Aabc%26dn%3DIron%20Man")

    def test_trailing_slash_on_base(self) -> None:
        url = build_resolve_url("http://host:7000/", "x")
        assert url == "http://host:7000/resolve?magnet=x"


class TestToStremioStream:
    def test_name_uses_tier_label(self) -> None:
        stream = to_stremio_stream(_ranked(), "http://host")
        assert stream.name == "Debridify (4K)"

    def test_unknown_tier_label(self) -> None:
        stream = to_stremio_stream(_ranked(tier=QualityTier.UNKNOWN), "http://host")
        assert stream.name == "Debridify (Unknown)"

    def test_description_lines(self) -> None:
        stream = to_stremio_stream(_ranked(), "http://host")
        assert stream.description.splitlines() == [
            "🎬 Iron.Man.2008.2160p",
            "💾 Size: 1.5 GB",
            "⚙️ From: 1337x",
        ]


class TestConvertCandidates:
    def test_keeps_order(self) -> None:
        ranked = [
            _ranked(title="A.2160p", identifier="a"),
            _ranked(title="B.1080p", tier=QualityTier.FHD_1080, identifier="b"),
        ]
        streams = convert_candidates(ranked, "http://host")
        assert [s.url for s in streams] == [
            "http://host/resolve?magnet=a",
            "http://host/resolve?magnet=b",
        ]

    def test_empty(self) -> None:
        assert convert_candidates([], "http://host") == []
