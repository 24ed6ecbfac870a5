from .debrid import (
    DebridTorrentRecord,
    ResolvedLink,
    ResolveFailure,
    ResolveOutcome,
    ResolveState,
    UnrestrictedFile,
)
from .errors import DebridError, DebridifyError, IndexerError
from .media import (
    AnimeTitle,
    ContentType,
    MediaMetadata,
    MovieMetadata,
    SeriesMetadata,
    is_anime,
)
from .stremio import StreamRequest, StremioStream
from .torrents import (
    QUALITY_TOKENS,
    Candidate,
    QualityTier,
    RankedCandidate,
    SearchQuery,
    episode_token,
)

__all__ = [
    "QUALITY_TOKENS",
    "AnimeTitle",
    "Candidate",
    "ContentType",
    "DebridError",
    "DebridTorrentRecord",
    "DebridifyError",
    "IndexerError",
    "MediaMetadata",
    "MovieMetadata",
    "QualityTier",
    "RankedCandidate",
    "ResolveFailure",
    "ResolveOutcome",
    "ResolveState",
    "ResolvedLink",
    "SearchQuery",
    "SeriesMetadata",
    "StreamRequest",
    "StremioStream",
    "UnrestrictedFile",
    "episode_token",
    "is_anime",
]
