from __future__ import annotations


class DebridifyError(Exception):
    """Base error for all adapter failures."""


class IndexerError(DebridifyError):
    """Network / HTTP / feed parsing failure of a single indexer."""

    def __init__(self, message: str, *, indexer: str = "") -> None:
        super().__init__(message)
        self.indexer = indexer


class DebridError(DebridifyError):
    """A debrid provider request failed."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        error_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.error_code = error_code

