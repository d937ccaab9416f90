"""Authorization router.

Provides ready-to-use FastAPI routes for permission checks, grant
management, migration and workspace discovery. Every route takes explicit
ids and returns a decision or result with structured error bodies.
"""

import logging
from typing import Dict, List

from fastapi import APIRouter, Depends, HTTPException, Path, status

from ...core.exceptions import NeoAuthzError, create_error_response, get_http_status_code
from ...core.value_objects import UserId, WorkspaceId
from ...config.constants import MigrationScope
from ...engine import AuthorizationEngine
from ...features.permissions import PermissionUpdate
from ..models.requests import (
    CheckPermissionRequest,
    PermissionUpdateRequest,
    RunMigrationRequest,
    UpdatePermissionsRequest,
)
from ..models.responses import (
    AccessibleWorkspacesResponse,
    EffectivePermissionsResponse,
    MigrationResultResponse,
    PermissionCategoryResponse,
    PermissionDecisionResponse,
    PermissionGrantResponse,
    UpdatePermissionsResponse,
)
from .dependencies import get_authorization_engine

logger = logging.getLogger(__name__)


router = APIRouter(
    prefix="/authz",
    tags=["Authorization"],
    responses={
        403: {"description": "Insufficient authority"},
        404: {"description": "Workspace or membership not found"},
        422: {"description": "Validation error"},
        503: {"description": "Permission store unavailable"},
    }
)


def _http_error(error: NeoAuthzError) -> HTTPException:
    return HTTPException(
        status_code=get_http_status_code(error),
        detail=create_error_response(error)["error"],
    )


def _to_updates(request: UpdatePermissionsRequest) -> Dict[str, PermissionUpdate]:
    updates = {}
    for permission_id, entry in request.permissions.items():
        if isinstance(entry, PermissionUpdateRequest):
            updates[permission_id] = PermissionUpdate(
                granted=entry.granted,
                granted_by=UserId(entry.granted_by) if entry.granted_by else None,
                expires_at=entry.expires_at,
            )
        else:
            updates[permission_id] = PermissionUpdate(granted=entry)
    return updates


@router.post(
    "/check",
    response_model=PermissionDecisionResponse,
    summary="Check permission",
    description="Decide whether a principal may perform an action in a workspace",
)
async def check_permission(
    request: CheckPermissionRequest,
    engine: AuthorizationEngine = Depends(get_authorization_engine)
) -> PermissionDecisionResponse:
    """CheckPermission."""
    try:
        decision = await engine.check_permission(
            UserId(request.user_id),
            WorkspaceId(request.workspace_id),
            request.permission_id,
            role=request.role,
            use_fallback=request.use_fallback,
        )
        return PermissionDecisionResponse.from_entity(decision)
    except NeoAuthzError as e:
        raise _http_error(e)


@router.get(
    "/users/{user_id}/workspaces/{workspace_id}/permissions",
    response_model=EffectivePermissionsResponse,
    summary="Get effective permissions",
    description="Explicit grants of a user in a workspace, falling back to the parent workspace",
)
async def get_effective_permissions(
    user_id: str = Path(..., description="User ID"),
    workspace_id: str = Path(..., description="Workspace ID"),
    engine: AuthorizationEngine = Depends(get_authorization_engine)
) -> EffectivePermissionsResponse:
    """GetEffectivePermissions."""
    try:
        effective = await engine.get_effective_permissions(UserId(user_id), WorkspaceId(workspace_id))
        return EffectivePermissionsResponse.from_entity(effective)
    except NeoAuthzError as e:
        raise _http_error(e)


@router.put(
    "/users/{user_id}/workspaces/{workspace_id}/permissions",
    response_model=UpdatePermissionsResponse,
    summary="Update permissions",
    description="Write explicit grants; owners may edit anyone, admins anyone but owners",
)
async def update_permissions(
    request: UpdatePermissionsRequest,
    user_id: str = Path(..., description="User ID"),
    workspace_id: str = Path(..., description="Workspace ID"),
    engine: AuthorizationEngine = Depends(get_authorization_engine)
) -> UpdatePermissionsResponse:
    """UpdatePermissions."""
    try:
        permissions = await engine.update_permissions(
            UserId(user_id),
            WorkspaceId(workspace_id),
            _to_updates(request),
            acting_user_id=UserId(request.acting_user_id),
            expires_at=request.expires_at,
        )
        return UpdatePermissionsResponse(
            user_id=user_id,
            workspace_id=workspace_id,
            updated=len(request.permissions),
            permissions={
                permission_id: PermissionGrantResponse.from_entity(grant)
                for permission_id, grant in permissions.items()
            },
        )
    except NeoAuthzError as e:
        raise _http_error(e)


@router.post(
    "/migrations",
    response_model=MigrationResultResponse,
    summary="Run migration",
    description="Convert role-only access into explicit grants without overwriting existing ones",
)
async def run_migration(
    request: RunMigrationRequest,
    engine: AuthorizationEngine = Depends(get_authorization_engine)
) -> MigrationResultResponse:
    """RunMigration."""
    try:
        acting_user_id = UserId(request.acting_user_id)
        if request.scope == MigrationScope.ALL:
            result = await engine.migrate_all_owned_workspaces(acting_user_id)
        else:
            result = await engine.migrate_workspace(WorkspaceId(request.workspace_id), acting_user_id)
        return MigrationResultResponse.from_entity(result)
    except NeoAuthzError as e:
        raise _http_error(e)


@router.get(
    "/users/{user_id}/accessible-workspaces",
    response_model=AccessibleWorkspacesResponse,
    summary="List accessible workspaces",
    description="Owned main workspaces with their sub-workspaces, plus direct main memberships",
)
async def list_accessible_workspaces(
    user_id: str = Path(..., description="User ID"),
    engine: AuthorizationEngine = Depends(get_authorization_engine)
) -> AccessibleWorkspacesResponse:
    """ListAccessibleWorkspaces."""
    try:
        accessible = await engine.get_user_accessible_workspaces(UserId(user_id))
        return AccessibleWorkspacesResponse.from_entity(accessible)
    except NeoAuthzError as e:
        raise _http_error(e)


@router.get(
    "/catalog",
    response_model=List[PermissionCategoryResponse],
    summary="List permission catalog",
    description="Every known permission grouped by category",
    status_code=status.HTTP_200_OK,
)
async def list_permission_catalog(
    engine: AuthorizationEngine = Depends(get_authorization_engine)
) -> List[PermissionCategoryResponse]:
    return [PermissionCategoryResponse.from_entity(c) for c in engine.catalog.list_categories()]
