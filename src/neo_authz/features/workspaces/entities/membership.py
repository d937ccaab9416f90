"""Membership domain entity and derived capabilities."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

from ....config.constants import MembershipScope, WorkspaceRole
from ....core.exceptions import ValidationError
from ....core.value_objects import UserId, WorkspaceId
from ....utils.datetime import to_utc, utc_now


@dataclass(frozen=True)
class MembershipCapabilities:
    """Hierarchy capabilities derived from a role. Never stored on their own."""
    
    can_access_sub_workspaces: bool
    can_create_sub_workspaces: bool
    can_manage_inherited: bool
    can_view_hierarchy: bool
    can_switch_workspaces: bool
    can_invite_to_sub_workspaces: bool
    
    @classmethod
    def for_role(cls, role: WorkspaceRole) -> "MembershipCapabilities":
        role = WorkspaceRole(role)
        manages_hierarchy = role in (WorkspaceRole.OWNER, WorkspaceRole.ADMIN)
        return cls(
            can_access_sub_workspaces=manages_hierarchy,
            can_create_sub_workspaces=role == WorkspaceRole.OWNER,
            can_manage_inherited=manages_hierarchy,
            can_view_hierarchy=True,
            can_switch_workspaces=True,
            can_invite_to_sub_workspaces=manages_hierarchy,
        )
    
    def to_dict(self) -> Dict[str, bool]:
        return {
            "can_access_sub_workspaces": self.can_access_sub_workspaces,
            "can_create_sub_workspaces": self.can_create_sub_workspaces,
            "can_manage_inherited": self.can_manage_inherited,
            "can_view_hierarchy": self.can_view_hierarchy,
            "can_switch_workspaces": self.can_switch_workspaces,
            "can_invite_to_sub_workspaces": self.can_invite_to_sub_workspaces,
        }


@dataclass
class Membership:
    """A user's membership in a workspace.
    
    ``role`` is the role the membership was created with. For inherited
    memberships that is the parent workspace role, and ``effective_role`` is
    the role it maps to inside the sub-workspace.
    """
    
    user_id: UserId
    workspace_id: WorkspaceId
    role: WorkspaceRole
    scope: MembershipScope = MembershipScope.DIRECT
    effective_role: Optional[WorkspaceRole] = None
    inherited_from: Optional[WorkspaceId] = None
    joined_at: datetime = field(default_factory=utc_now)
    
    def __post_init__(self):
        self.role = WorkspaceRole(self.role)
        self.scope = MembershipScope(self.scope)
        self.effective_role = WorkspaceRole(self.effective_role) if self.effective_role else self.role
        self.joined_at = to_utc(self.joined_at)
        
        if self.scope == MembershipScope.INHERITED and self.inherited_from is None:
            raise ValidationError("Inherited membership must reference the workspace it is inherited from")
        if self.scope == MembershipScope.DIRECT and self.inherited_from is not None:
            raise ValidationError("Direct membership cannot reference a parent membership")
    
    @property
    def key(self) -> tuple:
        return (self.user_id.value, self.workspace_id.value)
    
    @property
    def is_direct(self) -> bool:
        return self.scope == MembershipScope.DIRECT
    
    @property
    def is_inherited(self) -> bool:
        return self.scope == MembershipScope.INHERITED
    
    @property
    def capabilities(self) -> MembershipCapabilities:
        return MembershipCapabilities.for_role(self.effective_role)
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "user_id": self.user_id.value,
            "workspace_id": self.workspace_id.value,
            "role": self.role.value,
            "scope": self.scope.value,
            "effective_role": self.effective_role.value,
            "inherited_from": self.inherited_from.value if self.inherited_from else None,
            "joined_at": self.joined_at.isoformat(),
            "capabilities": self.capabilities.to_dict(),
        }
