"""Protocol interfaces for workspace and membership persistence."""

from abc import abstractmethod
from typing import List, Optional, Protocol, runtime_checkable

from ....core.value_objects import UserId, WorkspaceId
from .membership import Membership
from .workspace import Workspace


@runtime_checkable
class WorkspaceRepository(Protocol):
    """Protocol for workspace data access."""
    
    @abstractmethod
    async def get(self, workspace_id: WorkspaceId) -> Optional[Workspace]:
        """Get a workspace by id."""
        ...
    
    @abstractmethod
    async def save(self, workspace: Workspace) -> Workspace:
        """Insert or replace a workspace."""
        ...
    
    @abstractmethod
    async def list_children(self, workspace_id: WorkspaceId) -> List[Workspace]:
        """List sub-workspaces of a main workspace."""
        ...
    
    @abstractmethod
    async def list_all(self) -> List[Workspace]:
        """List every workspace."""
        ...


@runtime_checkable
class MembershipRepository(Protocol):
    """Protocol for membership data access."""
    
    @abstractmethod
    async def get(self, user_id: UserId, workspace_id: WorkspaceId) -> Optional[Membership]:
        """Get the membership of a user in a workspace."""
        ...
    
    @abstractmethod
    async def save(self, membership: Membership) -> Membership:
        """Insert or replace the membership for its (user, workspace) key."""
        ...
    
    @abstractmethod
    async def delete(self, user_id: UserId, workspace_id: WorkspaceId) -> bool:
        """Delete a membership. Returns False if none existed."""
        ...
    
    @abstractmethod
    async def list_by_workspace(self, workspace_id: WorkspaceId) -> List[Membership]:
        """List memberships of a workspace."""
        ...
    
    @abstractmethod
    async def list_by_user(self, user_id: UserId) -> List[Membership]:
        """List memberships of a user across workspaces."""
        ...
