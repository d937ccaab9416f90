"""Protocol interfaces for permission storage and lookups.

Defines the store contracts the resolver and migration engine depend on,
so PostgreSQL, in-memory and cached implementations are interchangeable.
"""

from abc import abstractmethod
from typing import Optional, Protocol, runtime_checkable

from ....core.value_objects import UserId, WorkspaceId
from .grant import PermissionGrant, PermissionMap
from .permission import PermissionId


@runtime_checkable
class PermissionGrantRepository(Protocol):
    """Protocol for explicit grant persistence."""
    
    @abstractmethod
    async def get_grant(
        self,
        user_id: UserId,
        workspace_id: WorkspaceId,
        permission_id: PermissionId
    ) -> Optional[PermissionGrant]:
        """Get a single grant by its exact key."""
        ...
    
    @abstractmethod
    async def get_user_grants(
        self,
        user_id: UserId,
        workspace_id: WorkspaceId
    ) -> Optional[PermissionMap]:
        """Get every grant of a user in a workspace, None when there are none."""
        ...
    
    @abstractmethod
    async def upsert_grant(self, grant: PermissionGrant) -> PermissionGrant:
        """Write a grant, replacing any existing record for the same key."""
        ...
    
    @abstractmethod
    async def insert_grant_if_absent(self, grant: PermissionGrant) -> bool:
        """Write a grant only if no record exists for the key.
        
        Returns:
            True if the grant was written, False if a record already existed
        """
        ...
    
    @abstractmethod
    async def delete_user_grants(self, user_id: UserId, workspace_id: WorkspaceId) -> int:
        """Delete every grant of a user in a workspace. Returns rows deleted."""
        ...


@runtime_checkable
class GrantCache(Protocol):
    """Protocol for the read-through grant cache."""
    
    @abstractmethod
    async def get_user_grants(
        self,
        user_id: UserId,
        workspace_id: WorkspaceId
    ) -> Optional[PermissionMap]:
        """Get cached grants. Returns None on a miss, {} for a cached empty map."""
        ...
    
    @abstractmethod
    def generation(self, user_id: UserId, workspace_id: WorkspaceId) -> int:
        """Invalidation counter of an entry, read before loading from the store."""
        ...
    
    @abstractmethod
    async def set_user_grants(
        self,
        user_id: UserId,
        workspace_id: WorkspaceId,
        permissions: PermissionMap,
        generation: Optional[int] = None
    ) -> bool:
        """Cache a grant map unless the entry was invalidated after ``generation``."""
        ...
    
    @abstractmethod
    async def invalidate(self, user_id: UserId, workspace_id: WorkspaceId) -> bool:
        """Drop the cached map for a user in a workspace and bump its generation."""
        ...


@runtime_checkable
class PrincipalDirectory(Protocol):
    """Protocol for principal-level flags that sit outside workspace roles."""
    
    @abstractmethod
    async def is_super_admin(self, user_id: UserId) -> bool:
        """Check whether a principal bypasses workspace authority checks."""
        ...
