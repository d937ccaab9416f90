"""Redis cache backend."""

import json
import logging
from typing import Any, Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from ...core.exceptions import CacheError

logger = logging.getLogger(__name__)


class RedisCache:
    """JSON-serializing cache on top of redis.asyncio."""
    
    def __init__(self, client: redis.Redis, default_ttl: Optional[int] = None):
        self._client = client
        self._default_ttl = default_ttl
    
    @classmethod
    def from_url(cls, url: str, default_ttl: Optional[int] = None) -> "RedisCache":
        return cls(redis.from_url(url, decode_responses=True), default_ttl=default_ttl)
    
    async def get(self, key: str) -> Optional[Any]:
        try:
            raw = await self._client.get(key)
        except RedisError as e:
            raise CacheError(f"Failed to get cache key {key}: {e}") from e
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except (TypeError, ValueError) as e:
            raise CacheError(f"Corrupt cache value for {key}: {e}") from e
    
    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        ttl = ttl if ttl is not None else self._default_ttl
        try:
            return bool(await self._client.set(key, json.dumps(value), ex=ttl))
        except RedisError as e:
            raise CacheError(f"Failed to set cache key {key}: {e}") from e
    
    async def delete(self, key: str) -> bool:
        try:
            return bool(await self._client.delete(key))
        except RedisError as e:
            raise CacheError(f"Failed to delete cache key {key}: {e}") from e
    
    async def clear(self) -> None:
        # Only authz keys, the database may be shared
        try:
            async for key in self._client.scan_iter(match="authz:*"):
                await self._client.delete(key)
        except RedisError as e:
            raise CacheError(f"Failed to clear cache: {e}") from e
    
    async def close(self) -> None:
        await self._client.aclose()
