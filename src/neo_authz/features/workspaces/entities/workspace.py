"""Workspace domain entity.

Workspaces form a strict two-level tree: main workspaces at the root and
sub-workspaces directly beneath them.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

from ....config.constants import WorkspaceKind
from ....core.exceptions import HierarchyError
from ....core.value_objects import UserId, WorkspaceId
from ....utils.datetime import to_utc, utc_now


@dataclass
class Workspace:
    """A tenant workspace, either a main workspace or a sub-workspace.

    ``owner_id`` records the creator. Authority comes from direct owner
    memberships only and is never read from this field.
    """

    id: WorkspaceId
    name: str
    kind: WorkspaceKind
    owner_id: UserId
    parent_workspace_id: Optional[WorkspaceId] = None
    created_at: datetime = field(default_factory=utc_now)
    
    def __post_init__(self):
        """Validate the parent link matches the workspace kind."""
        self.kind = WorkspaceKind(self.kind)
        self.created_at = to_utc(self.created_at)
        
        if self.kind == WorkspaceKind.SUB and self.parent_workspace_id is None:
            raise HierarchyError(f"Sub-workspace {self.id} must have a parent workspace")
        if self.kind == WorkspaceKind.MAIN and self.parent_workspace_id is not None:
            raise HierarchyError(f"Main workspace {self.id} cannot have a parent workspace")
        if self.parent_workspace_id == self.id:
            raise HierarchyError(f"Workspace {self.id} cannot be its own parent")
    
    @property
    def is_main(self) -> bool:
        return self.kind == WorkspaceKind.MAIN
    
    @property
    def is_sub(self) -> bool:
        return self.kind == WorkspaceKind.SUB
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id.value,
            "name": self.name,
            "kind": self.kind.value,
            "owner_id": self.owner_id.value,
            "parent_workspace_id": self.parent_workspace_id.value if self.parent_workspace_id else None,
            "created_at": self.created_at.isoformat(),
        }
