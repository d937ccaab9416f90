"""Accessible workspace set returned for cross-tenant views."""

from dataclasses import dataclass, field
from typing import Any, Dict, List

from ...workspaces.entities.workspace import Workspace


@dataclass
class AccessibleWorkspaces:
    """Main workspaces a user can reach, with sub-workspaces keyed by parent id."""
    
    main_workspaces: List[Workspace] = field(default_factory=list)
    sub_workspaces_by_parent: Dict[str, List[Workspace]] = field(default_factory=dict)
    
    @property
    def is_empty(self) -> bool:
        return not self.main_workspaces and not self.sub_workspaces_by_parent
    
    def all_workspace_ids(self) -> List[str]:
        ids = [w.id.value for w in self.main_workspaces]
        for children in self.sub_workspaces_by_parent.values():
            ids.extend(w.id.value for w in children)
        return ids
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "main_workspaces": [w.to_dict() for w in self.main_workspaces],
            "sub_workspaces_by_parent": {
                parent_id: [w.to_dict() for w in children]
                for parent_id, children in self.sub_workspaces_by_parent.items()
            },
        }
