from .debrid_resolve import DebridResolveUseCase
from .stremio_stream import StremioStreamUseCase
from .torrent_search import TorrentSearchUseCase

__all__ = ["DebridResolveUseCase", "StremioStreamUseCase", "TorrentSearchUseCase"]
