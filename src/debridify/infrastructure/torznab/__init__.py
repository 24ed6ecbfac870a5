from .client import JackettIndexerClient
from .parser import parse_torznab_feed

__all__ = ["JackettIndexerClient", "parse_torznab_feed"]
