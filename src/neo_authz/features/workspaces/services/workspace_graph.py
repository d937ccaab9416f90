"""Workspace tree lookups and structural validation."""

import logging
from typing import List, Optional

from ....config.constants import WorkspaceKind, WorkspaceRole
from ....core.exceptions import HierarchyError, WorkspaceNotFoundError
from ....core.value_objects import UserId, WorkspaceId
from ..entities.protocols import MembershipRepository, WorkspaceRepository
from ..entities.workspace import Workspace

logger = logging.getLogger(__name__)


class WorkspaceGraph:
    """Read and extend the two-level main/sub workspace tree."""
    
    def __init__(
        self,
        workspace_repository: WorkspaceRepository,
        membership_repository: MembershipRepository,
    ):
        self.workspace_repository = workspace_repository
        self.membership_repository = membership_repository
    
    async def find_workspace(self, workspace_id: WorkspaceId) -> Optional[Workspace]:
        return await self.workspace_repository.get(workspace_id)
    
    async def get_workspace(self, workspace_id: WorkspaceId) -> Workspace:
        """Get a workspace or raise WorkspaceNotFoundError."""
        workspace = await self.workspace_repository.get(workspace_id)
        if workspace is None:
            raise WorkspaceNotFoundError(
                f"Workspace {workspace_id} not found",
                details={"workspace_id": workspace_id.value},
            )
        return workspace
    
    async def get_parent(self, workspace_id: WorkspaceId) -> Optional[Workspace]:
        """Parent of a sub-workspace, None for a main workspace."""
        workspace = await self.get_workspace(workspace_id)
        if workspace.parent_workspace_id is None:
            return None
        return await self.workspace_repository.get(workspace.parent_workspace_id)
    
    async def get_children(self, workspace_id: WorkspaceId) -> List[Workspace]:
        """Sub-workspaces of a main workspace, empty for a sub-workspace."""
        workspace = await self.get_workspace(workspace_id)
        if workspace.is_sub:
            return []
        return await self.workspace_repository.list_children(workspace_id)
    
    async def get_owned_main_workspaces(self, user_id: UserId) -> List[Workspace]:
        """Main workspaces where the user holds a direct owner membership.
        
        Ownership follows memberships only, so a demoted or removed creator
        stops owning the workspace even though ``owner_id`` still names them.
        """
        owned: List[Workspace] = []
        for membership in await self.membership_repository.list_by_user(user_id):
            if not membership.is_direct or membership.role != WorkspaceRole.OWNER:
                continue
            workspace = await self.workspace_repository.get(membership.workspace_id)
            if workspace is not None and workspace.is_main:
                owned.append(workspace)
        
        return sorted(owned, key=lambda w: (w.created_at, w.id.value))
    
    async def add_workspace(self, workspace: Workspace) -> Workspace:
        """Persist a workspace after checking it keeps the tree at depth two."""
        if await self.workspace_repository.get(workspace.id) is not None:
            raise HierarchyError(f"Workspace {workspace.id} already exists")
        
        if workspace.is_sub:
            parent = await self.workspace_repository.get(workspace.parent_workspace_id)
            if parent is None:
                raise WorkspaceNotFoundError(
                    f"Parent workspace {workspace.parent_workspace_id} not found",
                    details={"workspace_id": workspace.parent_workspace_id.value},
                )
            if not parent.is_main:
                raise HierarchyError(
                    f"Workspace {parent.id} is a sub-workspace and cannot have children"
                )
        
        saved = await self.workspace_repository.save(workspace)
        logger.info(f"Added {workspace.kind.value} workspace {workspace.id}")
        return saved
    
    async def validate_hierarchy(self) -> List[str]:
        """Check every stored workspace against the tree rules.
        
        Returns:
            Human-readable descriptions of every violation, empty when valid
        """
        workspaces = {w.id.value: w for w in await self.workspace_repository.list_all()}
        errors: List[str] = []
        
        for workspace in workspaces.values():
            if workspace.kind != WorkspaceKind.SUB:
                continue
            parent = workspaces.get(workspace.parent_workspace_id.value)
            if parent is None:
                errors.append(
                    f"Sub-workspace {workspace.id} references missing parent {workspace.parent_workspace_id}"
                )
            elif not parent.is_main:
                errors.append(
                    f"Sub-workspace {workspace.id} has parent {parent.id} which is not a main workspace"
                )
        
        if errors:
            logger.warning(f"Workspace hierarchy has {len(errors)} violation(s)")
        return errors
