"""Permission entities and protocols."""

from .permission import PermissionId, PermissionDefinition, PermissionCategory
from .catalog import SYSTEM_PERMISSIONS, PermissionCatalog, get_permission_catalog
from .grant import (
    PermissionGrant,
    PermissionMap,
    PermissionUpdate,
    PermissionDecision,
    EffectivePermissions,
    count_granted,
)
from .protocols import PermissionGrantRepository, GrantCache, PrincipalDirectory

__all__ = [
    # Identifiers and catalog
    "PermissionId",
    "PermissionDefinition",
    "PermissionCategory",
    "SYSTEM_PERMISSIONS",
    "PermissionCatalog",
    "get_permission_catalog",
    
    # Grants and decisions
    "PermissionGrant",
    "PermissionMap",
    "PermissionUpdate",
    "PermissionDecision",
    "EffectivePermissions",
    "count_granted",
    
    # Protocols
    "PermissionGrantRepository",
    "GrantCache",
    "PrincipalDirectory",
]
