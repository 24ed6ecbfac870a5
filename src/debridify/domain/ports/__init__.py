from .anime import AnimeSearchPort
from .cache import CachePort
from .debrid import DebridClientPort
from .indexer import IndexerClientPort
from .metadata import MetadataProviderPort
from .resolved_link_repository import ResolvedLinkRepository

__all__ = [
    "AnimeSearchPort",
    "CachePort",
    "DebridClientPort",
    "IndexerClientPort",
    "MetadataProviderPort",
    "ResolvedLinkRepository",
]
