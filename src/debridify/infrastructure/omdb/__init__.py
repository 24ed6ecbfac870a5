from .client import OmdbMetadataClient

__all__ = ["OmdbMetadataClient"]
