"""Membership lifecycle: add, change role, remove, and role resolution."""

import logging
import uuid
from typing import List, Optional

from ....config.constants import MembershipScope, WorkspaceKind, WorkspaceRole
from ....core.exceptions import (
    MembershipExistsError,
    MembershipNotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from ....core.value_objects import UserId, WorkspaceId
from ..entities.membership import Membership
from ..entities.protocols import MembershipRepository
from ..entities.workspace import Workspace
from .inheritance_service import InheritanceService
from .workspace_graph import WorkspaceGraph

logger = logging.getLogger(__name__)


class MembershipRegistry:
    """Owns (user, workspace) memberships and keeps inherited ones in sync."""
    
    def __init__(
        self,
        membership_repository: MembershipRepository,
        graph: WorkspaceGraph,
        inheritance: Optional[InheritanceService] = None,
        principal_directory=None,
    ):
        self.membership_repository = membership_repository
        self.graph = graph
        self.inheritance = inheritance or InheritanceService(membership_repository, graph)
        self.principal_directory = principal_directory
    
    # Lookups
    
    async def get_membership(self, user_id: UserId, workspace_id: WorkspaceId) -> Optional[Membership]:
        """Stored membership only, direct or materialized inherited."""
        return await self.membership_repository.get(user_id, workspace_id)
    
    async def get_effective_membership(
        self,
        user_id: UserId,
        workspace_id: WorkspaceId
    ) -> Optional[Membership]:
        """Stored membership, else the one inherited from the parent workspace."""
        membership = await self.membership_repository.get(user_id, workspace_id)
        if membership is not None:
            return membership
        
        workspace = await self.graph.find_workspace(workspace_id)
        if workspace is None:
            return None
        return await self.inheritance.derive_inherited_membership(user_id, workspace)
    
    async def get_effective_role(self, user_id: UserId, workspace_id: WorkspaceId) -> Optional[WorkspaceRole]:
        membership = await self.get_effective_membership(user_id, workspace_id)
        return membership.effective_role if membership else None
    
    async def list_members(self, workspace_id: WorkspaceId) -> List[Membership]:
        return await self.membership_repository.list_by_workspace(workspace_id)
    
    async def list_user_memberships(self, user_id: UserId) -> List[Membership]:
        return await self.membership_repository.list_by_user(user_id)
    
    # Mutations
    
    async def add_membership(
        self,
        user_id: UserId,
        workspace_id: WorkspaceId,
        role: WorkspaceRole
    ) -> Membership:
        """Create a direct membership, replacing an inherited one if present."""
        workspace = await self.graph.get_workspace(workspace_id)
        
        existing = await self.membership_repository.get(user_id, workspace_id)
        if existing is not None and existing.is_direct:
            raise MembershipExistsError(
                f"User {user_id} is already a member of workspace {workspace_id}",
                details={"user_id": user_id.value, "workspace_id": workspace_id.value},
            )
        
        membership = Membership(user_id=user_id, workspace_id=workspace_id, role=WorkspaceRole(role))
        await self.membership_repository.save(membership)
        logger.info(f"Added {membership.role.value} membership for user {user_id} in workspace {workspace_id}")
        
        if workspace.is_main:
            await self.inheritance.propagate_to_sub_workspaces(user_id, workspace_id)
        return membership
    
    async def change_role(
        self,
        user_id: UserId,
        workspace_id: WorkspaceId,
        new_role: WorkspaceRole
    ) -> Membership:
        """Change the role of a direct membership and refresh derived state."""
        existing = await self._require_membership(user_id, workspace_id)
        if not existing.is_direct:
            raise ValidationError(
                f"Inherited membership of user {user_id} in workspace {workspace_id} "
                f"follows the parent workspace role and cannot be changed directly"
            )
        
        updated = Membership(
            user_id=user_id,
            workspace_id=workspace_id,
            role=WorkspaceRole(new_role),
            joined_at=existing.joined_at,
        )
        await self.membership_repository.save(updated)
        logger.info(
            f"Changed role of user {user_id} in workspace {workspace_id}: "
            f"{existing.role.value} -> {updated.role.value}"
        )
        
        workspace = await self.graph.get_workspace(workspace_id)
        if workspace.is_main:
            await self.inheritance.remove_from_sub_workspaces(user_id, workspace_id)
            await self.inheritance.propagate_to_sub_workspaces(user_id, workspace_id)
        return updated
    
    async def remove_membership(self, user_id: UserId, workspace_id: WorkspaceId) -> Membership:
        """Remove a membership and any inherited memberships it implied."""
        existing = await self._require_membership(user_id, workspace_id)
        
        await self.membership_repository.delete(user_id, workspace_id)
        logger.info(f"Removed user {user_id} from workspace {workspace_id}")
        
        workspace = await self.graph.find_workspace(workspace_id)
        if workspace is not None and workspace.is_main:
            await self.inheritance.remove_from_sub_workspaces(user_id, workspace_id)
        return existing
    
    # Workspace bootstrap
    
    async def create_main_workspace(
        self,
        name: str,
        owner_id: UserId,
        workspace_id: Optional[WorkspaceId] = None
    ) -> Workspace:
        """Create a main workspace with its owner membership."""
        workspace = Workspace(
            id=workspace_id or WorkspaceId(str(uuid.uuid4())),
            name=name,
            kind=WorkspaceKind.MAIN,
            owner_id=owner_id,
        )
        await self.graph.add_workspace(workspace)
        await self.membership_repository.save(
            Membership(user_id=owner_id, workspace_id=workspace.id, role=WorkspaceRole.OWNER)
        )
        return workspace
    
    async def create_sub_workspace(
        self,
        parent_workspace_id: WorkspaceId,
        name: str,
        acting_user_id: UserId,
        workspace_id: Optional[WorkspaceId] = None
    ) -> Workspace:
        """Create a sub-workspace under a main workspace.
        
        The acting user must be able to create sub-workspaces in the parent
        and becomes the direct owner of the new workspace. Parent members
        with sub-workspace access receive inherited memberships.
        """
        parent = await self.graph.get_workspace(parent_workspace_id)
        if not await self._can_create_sub_workspaces(acting_user_id, parent):
            raise PermissionDeniedError(
                f"User {acting_user_id} cannot create sub-workspaces in {parent_workspace_id}",
                details={"user_id": acting_user_id.value, "workspace_id": parent_workspace_id.value},
            )
        
        workspace = Workspace(
            id=workspace_id or WorkspaceId(str(uuid.uuid4())),
            name=name,
            kind=WorkspaceKind.SUB,
            owner_id=acting_user_id,
            parent_workspace_id=parent.id,
        )
        await self.graph.add_workspace(workspace)
        await self.membership_repository.save(
            Membership(user_id=acting_user_id, workspace_id=workspace.id, role=WorkspaceRole.OWNER)
        )
        await self.inheritance.propagate_parent_members(workspace)
        return workspace
    
    # Helpers
    
    async def _require_membership(self, user_id: UserId, workspace_id: WorkspaceId) -> Membership:
        membership = await self.membership_repository.get(user_id, workspace_id)
        if membership is None:
            raise MembershipNotFoundError(
                f"User {user_id} has no membership in workspace {workspace_id}",
                details={"user_id": user_id.value, "workspace_id": workspace_id.value},
            )
        return membership
    
    async def _can_create_sub_workspaces(self, user_id: UserId, parent: Workspace) -> bool:
        if self.principal_directory is not None and await self.principal_directory.is_super_admin(user_id):
            return True
        membership = await self.membership_repository.get(user_id, parent.id)
        return (
            membership is not None
            and membership.scope == MembershipScope.DIRECT
            and membership.capabilities.can_create_sub_workspaces
        )
