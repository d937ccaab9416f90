"""Request models for the authorization API."""

from datetime import datetime
from typing import Dict, Optional, Union

from pydantic import BaseModel, Field, model_validator

from ...config.constants import MigrationScope, WorkspaceRole


class CheckPermissionRequest(BaseModel):
    """Ask whether a principal may perform an action in a workspace."""
    
    user_id: str = Field(..., min_length=1, description="Principal to check")
    workspace_id: str = Field(..., min_length=1, description="Workspace the action targets")
    permission_id: str = Field(..., description="Permission id, e.g. 'costCenters.delete'")
    role: Optional[WorkspaceRole] = Field(
        None, description="Role to fall back to; read from memberships when omitted"
    )
    use_fallback: bool = Field(True, description="Fall back to role defaults when no explicit grant exists")


class PermissionUpdateRequest(BaseModel):
    """One explicit grant with its own grantor and expiry."""
    
    granted: bool = Field(..., description="Whether the permission is granted")
    granted_by: Optional[str] = Field(
        None, min_length=1, description="Recorded grantor; defaults to the acting user"
    )
    expires_at: Optional[datetime] = Field(
        None, description="Expiry of this grant; defaults to the request-level expiry"
    )


class UpdatePermissionsRequest(BaseModel):
    """Explicit grants to write for a user in a workspace."""
    
    acting_user_id: str = Field(..., min_length=1, description="Principal performing the update")
    permissions: Dict[str, Union[bool, PermissionUpdateRequest]] = Field(
        ..., min_length=1, description="Permission id to a granted flag or a per-grant update"
    )
    expires_at: Optional[datetime] = Field(None, description="Expiry for entries that do not set their own")


class RunMigrationRequest(BaseModel):
    """Start a migration from role-only access to explicit grants."""
    
    acting_user_id: str = Field(..., min_length=1, description="Owner running the migration")
    scope: MigrationScope = Field(MigrationScope.WORKSPACE, description="One workspace or all owned workspaces")
    workspace_id: Optional[str] = Field(None, description="Workspace to migrate when scope is 'workspace'")
    
    @model_validator(mode="after")
    def require_workspace_for_workspace_scope(self) -> "RunMigrationRequest":
        if self.scope == MigrationScope.WORKSPACE and not self.workspace_id:
            raise ValueError("workspace_id is required when scope is 'workspace'")
        return self
