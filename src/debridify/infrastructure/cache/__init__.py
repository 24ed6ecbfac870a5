from .cache_factory import create_cache
from .memory_adapter import MemoryCacheAdapter

__all__ = ["MemoryCacheAdapter", "create_cache"]
