from .client import AniListClient

__all__ = ["AniListClient"]
