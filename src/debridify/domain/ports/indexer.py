"""Port for Torznab indexer queries."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from debridify.domain.entities.torrents import Candidate, SearchQuery


@runtime_checkable
class IndexerClientPort(Protocol):
    """Queries one indexer (or the ``all`` aggregate) of a Torznab aggregator."""

    async def search(self, indexer_id: str, query: SearchQuery) -> list[Candidate]:
        """Return parsed candidates for *query*.

        An empty or missing feed yields ``[]``. Transport, HTTP and XML
        failures raise ``IndexerError``.
        """
        ...
