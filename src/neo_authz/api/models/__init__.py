"""API request and response models."""

from .requests import (
    CheckPermissionRequest,
    PermissionUpdateRequest,
    UpdatePermissionsRequest,
    RunMigrationRequest,
)
from .responses import (
    PermissionDecisionResponse,
    PermissionGrantResponse,
    EffectivePermissionsResponse,
    UpdatePermissionsResponse,
    MigrationResultResponse,
    AccessibleWorkspacesResponse,
    WorkspaceResponse,
    PermissionCategoryResponse,
)

__all__ = [
    # Requests
    "CheckPermissionRequest",
    "PermissionUpdateRequest",
    "UpdatePermissionsRequest",
    "RunMigrationRequest",
    
    # Responses
    "PermissionDecisionResponse",
    "PermissionGrantResponse",
    "EffectivePermissionsResponse",
    "UpdatePermissionsResponse",
    "MigrationResultResponse",
    "AccessibleWorkspacesResponse",
    "WorkspaceResponse",
    "PermissionCategoryResponse",
]
