"""Response models for the authorization API."""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from ...config.constants import PermissionSource, ReasonCode, WorkspaceKind, WorkspaceRole


class PermissionDecisionResponse(BaseModel):
    """Decision plus the reason it was reached."""
    
    allowed: bool = Field(..., description="Whether the action is allowed")
    reason: ReasonCode = Field(..., description="Why the decision was reached")
    permission_id: str = Field(..., description="Permission that was checked")
    role: Optional[WorkspaceRole] = Field(None, description="Role used for the role default, if any")
    
    @classmethod
    def from_entity(cls, decision) -> "PermissionDecisionResponse":
        return cls(
            allowed=decision.allowed,
            reason=decision.reason,
            permission_id=decision.permission_id,
            role=decision.role,
        )


class PermissionGrantResponse(BaseModel):
    """A single explicit grant record."""
    
    granted: bool = Field(..., description="Granted flag as stored")
    granted_by: Optional[str] = Field(None, description="Principal that wrote the grant")
    granted_at: datetime = Field(..., description="When the grant was written")
    expires_at: Optional[datetime] = Field(None, description="Expiry, if any")
    is_expired: bool = Field(..., description="Whether the grant has expired")
    
    @classmethod
    def from_entity(cls, grant) -> "PermissionGrantResponse":
        return cls(
            granted=grant.granted,
            granted_by=grant.granted_by.value if grant.granted_by else None,
            granted_at=grant.granted_at,
            expires_at=grant.expires_at,
            is_expired=grant.is_expired(),
        )


def _grants_to_response(permissions) -> Dict[str, PermissionGrantResponse]:
    return {
        permission_id: PermissionGrantResponse.from_entity(grant)
        for permission_id, grant in (permissions or {}).items()
    }


class EffectivePermissionsResponse(BaseModel):
    """Explicit grant map with its source."""
    
    user_id: str
    workspace_id: str
    source: PermissionSource = Field(..., description="direct, inherited or none")
    inherited_from: Optional[str] = Field(None, description="Workspace the map was inherited from")
    granted_count: int = Field(..., description="Granted and non-expired entries")
    permissions: Dict[str, PermissionGrantResponse] = Field(default_factory=dict)
    
    @classmethod
    def from_entity(cls, effective) -> "EffectivePermissionsResponse":
        return cls(
            user_id=effective.user_id.value,
            workspace_id=effective.workspace_id.value,
            source=effective.source,
            inherited_from=effective.inherited_from.value if effective.inherited_from else None,
            granted_count=effective.granted_count(),
            permissions=_grants_to_response(effective.permissions),
        )


class UpdatePermissionsResponse(BaseModel):
    """Grant map after an update."""
    
    user_id: str
    workspace_id: str
    updated: int = Field(..., description="Number of grants written")
    permissions: Dict[str, PermissionGrantResponse] = Field(default_factory=dict)


class MigrationConflictResponse(BaseModel):
    permission_id: str
    existing_granted: bool
    default_granted: bool


class MigrationDetailResponse(BaseModel):
    """Outcome for one migrated membership."""
    
    user_id: str
    workspace_id: str
    role: WorkspaceRole
    status: str = Field(..., description="'Success' or 'Error: <reason>'")
    written: int
    skipped: int
    conflicts: List[MigrationConflictResponse] = Field(default_factory=list)


class MigrationResultResponse(BaseModel):
    """Aggregated migration outcome."""
    
    success: bool
    success_count: int
    written_count: int
    conflict_count: int
    cancelled: bool
    errors: List[str] = Field(default_factory=list)
    details: List[MigrationDetailResponse] = Field(default_factory=list)
    
    @classmethod
    def from_entity(cls, result) -> "MigrationResultResponse":
        return cls(**result.to_dict())


class WorkspaceResponse(BaseModel):
    id: str
    name: str
    kind: WorkspaceKind
    owner_id: str
    parent_workspace_id: Optional[str] = None
    created_at: datetime
    
    @classmethod
    def from_entity(cls, workspace) -> "WorkspaceResponse":
        return cls(
            id=workspace.id.value,
            name=workspace.name,
            kind=workspace.kind,
            owner_id=workspace.owner_id.value,
            parent_workspace_id=workspace.parent_workspace_id.value if workspace.parent_workspace_id else None,
            created_at=workspace.created_at,
        )


class AccessibleWorkspacesResponse(BaseModel):
    """Workspaces a user can reach, sub-workspaces keyed by parent id."""
    
    main_workspaces: List[WorkspaceResponse] = Field(default_factory=list)
    sub_workspaces_by_parent: Dict[str, List[WorkspaceResponse]] = Field(default_factory=dict)
    
    @classmethod
    def from_entity(cls, accessible) -> "AccessibleWorkspacesResponse":
        return cls(
            main_workspaces=[WorkspaceResponse.from_entity(w) for w in accessible.main_workspaces],
            sub_workspaces_by_parent={
                parent_id: [WorkspaceResponse.from_entity(w) for w in children]
                for parent_id, children in accessible.sub_workspaces_by_parent.items()
            },
        )


class PermissionDefinitionResponse(BaseModel):
    id: str
    name: str
    description: str
    category: str
    action: str
    feature: str
    is_dangerous: bool


class PermissionCategoryResponse(BaseModel):
    name: str
    feature: str
    permissions: List[PermissionDefinitionResponse] = Field(default_factory=list)
    
    @classmethod
    def from_entity(cls, category) -> "PermissionCategoryResponse":
        return cls(
            name=category.name,
            feature=category.feature,
            permissions=[PermissionDefinitionResponse(**d.to_dict()) for d in category.permissions],
        )
