"""Role-based default permission table.

This is the single source of truth for what a role may do without an
explicit grant:

    owner   every catalogued permission, including deletes
    admin   every catalogued permission except delete actions
    member  view actions only
"""

from typing import Dict, Optional, Set, Union

from ....config.constants import PermissionActions, WorkspaceRole
from ....core.exceptions import InvalidPermissionIdError
from ..entities.catalog import PermissionCatalog, get_permission_catalog
from ..entities.permission import PermissionId


class RoleDefaults:
    """Pure lookup of default decisions per (role, permission)."""
    
    def __init__(self, catalog: Optional[PermissionCatalog] = None):
        self.catalog = catalog or get_permission_catalog()
    
    @staticmethod
    def _role_allows_action(role: WorkspaceRole, action: str) -> bool:
        if role == WorkspaceRole.OWNER:
            return True
        if role == WorkspaceRole.ADMIN:
            return action != PermissionActions.DELETE
        return action == PermissionActions.VIEW
    
    def is_default_granted(
        self,
        role: Optional[WorkspaceRole],
        permission_id: Union[PermissionId, str]
    ) -> bool:
        """Default decision for a role. Unknown roles and ids are denied."""
        if role is None:
            return False
        try:
            role = WorkspaceRole(role)
            parsed = self.catalog.parse(permission_id)
        except (ValueError, InvalidPermissionIdError):
            return False
        return self._role_allows_action(role, parsed.action)
    
    def get_default_permissions(self, role: WorkspaceRole, category: str) -> Set[PermissionId]:
        """Permission ids of one category granted to a role by default."""
        role = WorkspaceRole(role)
        return {
            definition.id
            for definition in self.catalog.get_permissions_by_category(category)
            if self._role_allows_action(role, definition.action)
        }
    
    def get_all_default_permissions(self, role: WorkspaceRole) -> Dict[str, bool]:
        """Default decision for every catalogued id, granted or not."""
        role = WorkspaceRole(role)
        return {
            permission_id.value: self._role_allows_action(role, permission_id.action)
            for permission_id in self.catalog.all_ids()
        }
