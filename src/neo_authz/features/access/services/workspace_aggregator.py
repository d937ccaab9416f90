"""Reachable workspace set for cross-tenant views.

Owners see every main workspace they own plus every sub-workspace beneath
each. Direct admin or member memberships in main workspaces add those
workspaces without widening into their sub-workspaces. No permission
checks happen here.
"""

import logging
from typing import Dict

from ....config.constants import WorkspaceRole
from ....core.value_objects import UserId
from ...workspaces.entities.workspace import Workspace
from ...workspaces.services.membership_registry import MembershipRegistry
from ..entities.accessible_workspaces import AccessibleWorkspaces

logger = logging.getLogger(__name__)


class AccessibleWorkspaceAggregator:
    """Computes the workspace tree a user can switch between."""
    
    def __init__(self, membership_registry: MembershipRegistry):
        self.membership_registry = membership_registry
        self.graph = membership_registry.graph
    
    async def get_user_accessible_workspaces(self, user_id: UserId) -> AccessibleWorkspaces:
        owned = await self.graph.get_owned_main_workspaces(user_id)
        main_workspaces: Dict[str, Workspace] = {w.id.value: w for w in owned}
        
        sub_workspaces_by_parent = {}
        for workspace in owned:
            sub_workspaces_by_parent[workspace.id.value] = await self.graph.get_children(workspace.id)
        
        for membership in await self.membership_registry.list_user_memberships(user_id):
            if not membership.is_direct or membership.role == WorkspaceRole.OWNER:
                continue
            if membership.workspace_id.value in main_workspaces:
                continue
            workspace = await self.graph.find_workspace(membership.workspace_id)
            if workspace is not None and workspace.is_main:
                main_workspaces[workspace.id.value] = workspace
        
        result = AccessibleWorkspaces(
            main_workspaces=sorted(main_workspaces.values(), key=lambda w: (w.created_at, w.id.value)),
            sub_workspaces_by_parent=sub_workspaces_by_parent,
        )
        logger.debug(
            f"User {user_id} can access {len(result.main_workspaces)} main workspace(s) "
            f"and {sum(len(c) for c in sub_workspaces_by_parent.values())} sub-workspace(s)"
        )
        return result
