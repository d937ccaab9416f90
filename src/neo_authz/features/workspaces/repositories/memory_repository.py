"""In-memory workspace and membership repositories.

Used by tests and single-process deployments. Each write replaces the
record for its key under an asyncio lock.
"""

import asyncio
import copy
from typing import Dict, List, Optional, Tuple

from ....core.value_objects import UserId, WorkspaceId
from ..entities.membership import Membership
from ..entities.workspace import Workspace


class MemoryWorkspaceRepository:
    """Dictionary-backed workspace repository."""
    
    def __init__(self):
        self._workspaces: Dict[str, Workspace] = {}
        self._lock = asyncio.Lock()
    
    async def get(self, workspace_id: WorkspaceId) -> Optional[Workspace]:
        workspace = self._workspaces.get(workspace_id.value)
        return copy.deepcopy(workspace) if workspace else None
    
    async def save(self, workspace: Workspace) -> Workspace:
        async with self._lock:
            self._workspaces[workspace.id.value] = copy.deepcopy(workspace)
        return workspace
    
    async def list_children(self, workspace_id: WorkspaceId) -> List[Workspace]:
        return self._sorted(
            w for w in self._workspaces.values() if w.parent_workspace_id == workspace_id
        )
    
    async def list_all(self) -> List[Workspace]:
        return self._sorted(self._workspaces.values())
    
    @staticmethod
    def _sorted(workspaces) -> List[Workspace]:
        return [copy.deepcopy(w) for w in sorted(workspaces, key=lambda w: (w.created_at, w.id.value))]


class MemoryMembershipRepository:
    """Dictionary-backed membership repository keyed by (user, workspace)."""
    
    def __init__(self):
        self._memberships: Dict[Tuple[str, str], Membership] = {}
        self._lock = asyncio.Lock()
    
    async def get(self, user_id: UserId, workspace_id: WorkspaceId) -> Optional[Membership]:
        membership = self._memberships.get((user_id.value, workspace_id.value))
        return copy.deepcopy(membership) if membership else None
    
    async def save(self, membership: Membership) -> Membership:
        async with self._lock:
            self._memberships[membership.key] = copy.deepcopy(membership)
        return membership
    
    async def delete(self, user_id: UserId, workspace_id: WorkspaceId) -> bool:
        async with self._lock:
            return self._memberships.pop((user_id.value, workspace_id.value), None) is not None
    
    async def list_by_workspace(self, workspace_id: WorkspaceId) -> List[Membership]:
        return self._sorted(m for m in self._memberships.values() if m.workspace_id == workspace_id)
    
    async def list_by_user(self, user_id: UserId) -> List[Membership]:
        return self._sorted(m for m in self._memberships.values() if m.user_id == user_id)
    
    @staticmethod
    def _sorted(memberships) -> List[Membership]:
        return [
            copy.deepcopy(m)
            for m in sorted(memberships, key=lambda m: (m.joined_at, m.user_id.value, m.workspace_id.value))
        ]
