"""Cache backends."""

from .protocols import Cache
from .memory_cache import MemoryCache, MemoryCacheEntry
from .redis_cache import RedisCache

__all__ = ["Cache", "MemoryCache", "MemoryCacheEntry", "RedisCache"]
