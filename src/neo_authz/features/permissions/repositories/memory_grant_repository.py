"""In-memory permission grant repository."""

import asyncio
import copy
from typing import Dict, Optional, Tuple

from ....core.value_objects import UserId, WorkspaceId
from ..entities.grant import PermissionGrant, PermissionMap
from ..entities.permission import PermissionId


class MemoryPermissionGrantRepository:
    """Grant repository keyed by (user_id, workspace_id, permission_id).
    
    Each write replaces the whole record under a lock, so concurrent
    upserts to one key leave exactly one of the written records.
    """
    
    def __init__(self):
        self._grants: Dict[Tuple[str, str, str], PermissionGrant] = {}
        self._lock = asyncio.Lock()
    
    async def get_grant(
        self,
        user_id: UserId,
        workspace_id: WorkspaceId,
        permission_id: PermissionId
    ) -> Optional[PermissionGrant]:
        grant = self._grants.get((user_id.value, workspace_id.value, permission_id.value))
        return copy.deepcopy(grant) if grant else None
    
    async def get_user_grants(
        self,
        user_id: UserId,
        workspace_id: WorkspaceId
    ) -> Optional[PermissionMap]:
        permissions = {
            key[2]: copy.deepcopy(grant)
            for key, grant in sorted(self._grants.items())
            if key[0] == user_id.value and key[1] == workspace_id.value
        }
        return permissions or None
    
    async def upsert_grant(self, grant: PermissionGrant) -> PermissionGrant:
        async with self._lock:
            self._grants[grant.key] = copy.deepcopy(grant)
        return grant
    
    async def insert_grant_if_absent(self, grant: PermissionGrant) -> bool:
        async with self._lock:
            if grant.key in self._grants:
                return False
            self._grants[grant.key] = copy.deepcopy(grant)
            return True
    
    async def delete_user_grants(self, user_id: UserId, workspace_id: WorkspaceId) -> int:
        async with self._lock:
            keys = [k for k in self._grants if k[0] == user_id.value and k[1] == workspace_id.value]
            for key in keys:
                del self._grants[key]
            return len(keys)
