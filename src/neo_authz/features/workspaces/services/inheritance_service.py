"""Sub-workspace access inherited from main workspace memberships."""

import logging
from typing import List, Optional

from ....config.constants import INHERITED_ROLE_MAP, MembershipScope
from ....core.value_objects import UserId, WorkspaceId
from ..entities.membership import Membership
from ..entities.protocols import MembershipRepository
from ..entities.workspace import Workspace
from .workspace_graph import WorkspaceGraph

logger = logging.getLogger(__name__)


class InheritanceService:
    """Derives and materializes inherited memberships.
    
    A direct main-workspace membership whose role can access sub-workspaces
    implies an inherited membership in every child. The inherited effective
    role follows INHERITED_ROLE_MAP. A direct membership in the
    sub-workspace always takes precedence.
    """
    
    def __init__(self, membership_repository: MembershipRepository, graph: WorkspaceGraph):
        self.membership_repository = membership_repository
        self.graph = graph
    
    @staticmethod
    def build_inherited(parent_membership: Membership, workspace: Workspace) -> Optional[Membership]:
        """Inherited membership implied by a parent membership, if any."""
        if not parent_membership.is_direct:
            return None
        if not parent_membership.capabilities.can_access_sub_workspaces:
            return None
        return Membership(
            user_id=parent_membership.user_id,
            workspace_id=workspace.id,
            role=parent_membership.role,
            scope=MembershipScope.INHERITED,
            effective_role=INHERITED_ROLE_MAP[parent_membership.role],
            inherited_from=parent_membership.workspace_id,
        )
    
    async def derive_inherited_membership(
        self,
        user_id: UserId,
        workspace: Workspace
    ) -> Optional[Membership]:
        """Compute the inherited membership for a sub-workspace without storing it."""
        if not workspace.is_sub:
            return None
        parent_membership = await self.membership_repository.get(user_id, workspace.parent_workspace_id)
        if parent_membership is None:
            return None
        return self.build_inherited(parent_membership, workspace)
    
    async def propagate_to_sub_workspaces(
        self,
        user_id: UserId,
        main_workspace_id: WorkspaceId
    ) -> List[Membership]:
        """Materialize inherited memberships in every child of a main workspace.
        
        Existing direct memberships in a child are left untouched.
        
        Returns:
            Memberships created or refreshed
        """
        parent_membership = await self.membership_repository.get(user_id, main_workspace_id)
        if parent_membership is None:
            return []
        
        propagated: List[Membership] = []
        for child in await self.graph.get_children(main_workspace_id):
            inherited = self.build_inherited(parent_membership, child)
            if inherited is None:
                break
            existing = await self.membership_repository.get(user_id, child.id)
            if existing is not None and existing.is_direct:
                continue
            await self.membership_repository.save(inherited)
            propagated.append(inherited)
        
        if propagated:
            logger.info(
                f"Propagated {len(propagated)} inherited membership(s) for user {user_id} "
                f"from workspace {main_workspace_id}"
            )
        return propagated
    
    async def propagate_parent_members(self, sub_workspace: Workspace) -> List[Membership]:
        """Materialize inherited memberships for a newly created sub-workspace."""
        if not sub_workspace.is_sub:
            return []
        
        propagated: List[Membership] = []
        for parent_membership in await self.membership_repository.list_by_workspace(
            sub_workspace.parent_workspace_id
        ):
            inherited = self.build_inherited(parent_membership, sub_workspace)
            if inherited is None:
                continue
            existing = await self.membership_repository.get(inherited.user_id, sub_workspace.id)
            if existing is not None and existing.is_direct:
                continue
            await self.membership_repository.save(inherited)
            propagated.append(inherited)
        return propagated
    
    async def remove_from_sub_workspaces(
        self,
        user_id: UserId,
        main_workspace_id: WorkspaceId
    ) -> int:
        """Drop inherited memberships that came from a main workspace membership."""
        removed = 0
        for child in await self.graph.get_children(main_workspace_id):
            existing = await self.membership_repository.get(user_id, child.id)
            if existing is None or not existing.is_inherited:
                continue
            if existing.inherited_from != main_workspace_id:
                continue
            if await self.membership_repository.delete(user_id, child.id):
                removed += 1
        
        if removed:
            logger.info(f"Removed {removed} inherited membership(s) for user {user_id}")
        return removed
