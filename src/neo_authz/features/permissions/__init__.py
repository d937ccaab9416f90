"""Permissions feature: catalog, explicit grants, role defaults and resolution.

Provides the permission catalog, grant entities and repositories, the
role default table and the AuthorizationResolver that combines them with
workspace memberships.
"""

# Entities
from .entities import (
    PermissionId,
    PermissionDefinition,
    PermissionCategory,
    SYSTEM_PERMISSIONS,
    PermissionCatalog,
    get_permission_catalog,
    PermissionGrant,
    PermissionMap,
    PermissionUpdate,
    PermissionDecision,
    EffectivePermissions,
    count_granted,
    PermissionGrantRepository,
    GrantCache,
    PrincipalDirectory,
)

# Repositories
from .repositories import (
    AsyncPGPermissionGrantRepository,
    MemoryPermissionGrantRepository,
    GrantCacheAdapter,
    StaticPrincipalDirectory,
)

# Services
from .services import RoleDefaults, AuthorizationResolver

__all__ = [
    # Entities
    "PermissionId",
    "PermissionDefinition",
    "PermissionCategory",
    "SYSTEM_PERMISSIONS",
    "PermissionCatalog",
    "get_permission_catalog",
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
    
    # Repositories
    "AsyncPGPermissionGrantRepository",
    "MemoryPermissionGrantRepository",
    "GrantCacheAdapter",
    "StaticPrincipalDirectory",
    
    # Services
    "RoleDefaults",
    "AuthorizationResolver",
]
