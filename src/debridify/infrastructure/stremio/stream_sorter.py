"""Deterministic candidate ordering.

Sort keys, ascending: quality tier rank, indexer priority, size (descending).
Python's sort is stable, so fully tied candidates keep their input order.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence

from debridify.domain.entities.torrents import Candidate, RankedCandidate
from debridify.infrastructure.config.schema import DEFAULT_INDEXER_PRIORITY
from debridify.infrastructure.stremio.release_parser import extract_quality_tier

_STRIP_RE = re.compile(r"[\s\-]+")


def normalize_indexer_name(name: str) -> str:
    """``"The Pirate Bay"`` -> ``"thepiratebay"``, ``"1337-x"`` -> ``"1337x"``."""
    return _STRIP_RE.sub("", name.lower())


class CandidateRanker:
    """Turns raw candidates into an ordered list of ``RankedCandidate``.

    Indexers missing from *indexer_priority* rank after every listed
    indexer and tie with each other.
    """

    def __init__(self, indexer_priority: Sequence[str] = DEFAULT_INDEXER_PRIORITY) -> None:
        self._priority: dict[str, int] = {}
        for idx, name in enumerate(indexer_priority):
            self._priority.setdefault(normalize_indexer_name(name), idx)
        self._unknown_rank = len(indexer_priority)

    def indexer_rank(self, source_name: str) -> int:
        key = normalize_indexer_name(source_name)
        if not key:
            return self._unknown_rank
        return self._priority.get(key, self._unknown_rank)

    def _sort_key(self, ranked: RankedCandidate) -> tuple[int, int, int]:
        return (
            ranked.quality_tier.rank,
            self.indexer_rank(ranked.source_name),
            -ranked.size_bytes,
        )

    def rank(self, candidates: Iterable[Candidate]) -> list[RankedCandidate]:
        ranked = [
            RankedCandidate(candidate=c, quality_tier=extract_quality_tier(c.title))
            for c in candidates
        ]
        ranked.sort(key=self._sort_key)
        return ranked
