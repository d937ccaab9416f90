"""Grant cache adapter on top of a key/value cache backend.

Caches the raw grant map of a (user, workspace) pair. Expiry is evaluated
on every read, so a cached map never outlives a grant's expires_at.
Cache failures are logged and treated as misses.

Every invalidation bumps a per-key generation. A reader passes the
generation it observed before loading from the store, and a fill whose
generation is stale is dropped so it cannot overwrite a newer write.
"""

import logging
from typing import Dict, Optional

from ....config.constants import CacheKeys, CacheTTL
from ....core.value_objects import UserId, WorkspaceId
from ....infrastructure.cache import Cache
from ..entities.grant import PermissionGrant, PermissionMap

logger = logging.getLogger(__name__)


class GrantCacheAdapter:
    """Read-through cache for explicit grant maps."""
    
    def __init__(self, cache_service: Cache, ttl: int = CacheTTL.GRANTS_SHORT):
        """Initialize with a cache backend.
        
        Args:
            cache_service: Memory or Redis cache backend
            ttl: Entry lifetime in seconds
        """
        self._cache = cache_service
        self._ttl = ttl
        self._generations: Dict[str, int] = {}
    
    def _make_key(self, user_id: UserId, workspace_id: WorkspaceId) -> str:
        return CacheKeys.USER_GRANTS.format(user_id=user_id.value, workspace_id=workspace_id.value)
    
    def generation(self, user_id: UserId, workspace_id: WorkspaceId) -> int:
        """Current invalidation count of a (user, workspace) entry."""
        return self._generations.get(self._make_key(user_id, workspace_id), 0)
    
    async def get_user_grants(
        self,
        user_id: UserId,
        workspace_id: WorkspaceId
    ) -> Optional[PermissionMap]:
        key = self._make_key(user_id, workspace_id)
        try:
            cached_data = await self._cache.get(key)
        except Exception as e:
            logger.error(f"Failed to read cached grants {key}: {e}")
            return None
        
        if cached_data is None:
            return None
        return {
            permission_id: PermissionGrant.from_dict(data)
            for permission_id, data in cached_data.items()
        }
    
    async def set_user_grants(
        self,
        user_id: UserId,
        workspace_id: WorkspaceId,
        permissions: PermissionMap,
        generation: Optional[int] = None
    ) -> bool:
        """Cache a grant map.
        
        Args:
            generation: Value of ``generation()`` taken before the map was
                read from the store. The fill is skipped, or undone, when an
                invalidation landed in between.
        """
        key = self._make_key(user_id, workspace_id)
        if generation is not None and self._generations.get(key, 0) != generation:
            logger.debug(f"Skipped caching stale grants {key}")
            return False
        
        payload = {permission_id: grant.to_dict() for permission_id, grant in permissions.items()}
        try:
            stored = await self._cache.set(key, payload, ttl=self._ttl)
            if generation is not None and self._generations.get(key, 0) != generation:
                await self._cache.delete(key)
                logger.debug(f"Dropped grants {key} invalidated while caching")
                return False
            return stored
        except Exception as e:
            logger.error(f"Failed to cache grants {key}: {e}")
            return False
    
    async def invalidate(self, user_id: UserId, workspace_id: WorkspaceId) -> bool:
        key = self._make_key(user_id, workspace_id)
        self._generations[key] = self._generations.get(key, 0) + 1
        try:
            return await self._cache.delete(key)
        except Exception as e:
            logger.error(f"Failed to invalidate cached grants {key}: {e}")
            return False
