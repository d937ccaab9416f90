"""neo-authz: hierarchical multi-tenant workspace authorization.

Decides whether a principal may perform an action in a workspace using
explicit grants, role defaults and main/sub workspace inheritance, and
migrates role-only access into explicit grants.
"""

from .__version__ import __version__

# Configure logging on import
from .config.logging_config import setup_logging
setup_logging()

# Configuration
from .config import (
    AuthzSettings,
    get_settings,
    WorkspaceRole,
    WorkspaceKind,
    MembershipScope,
    PermissionSource,
    ReasonCode,
)

# Core
from .core.exceptions import (
    NeoAuthzError,
    ValidationError,
    InvalidPermissionIdError,
    NotFoundError,
    WorkspaceNotFoundError,
    MembershipNotFoundError,
    PermissionDeniedError,
    TransientStoreError,
    DatabaseError,
)
from .core.value_objects import UserId, WorkspaceId

# Features
from .features.permissions import (
    PermissionId,
    PermissionGrant,
    PermissionUpdate,
    PermissionDecision,
    EffectivePermissions,
    RoleDefaults,
    AuthorizationResolver,
    get_permission_catalog,
)
from .features.workspaces import Workspace, Membership, WorkspaceGraph, MembershipRegistry
from .features.migration import MigrationEngine, MigrationResult, CancellationToken
from .features.access import AccessibleWorkspaceAggregator, AccessibleWorkspaces

# Engine
from .engine import AuthorizationEngine, create_memory_engine, create_postgres_engine

__all__ = [
    "__version__",
    
    # Configuration
    "AuthzSettings",
    "get_settings",
    "WorkspaceRole",
    "WorkspaceKind",
    "MembershipScope",
    "PermissionSource",
    "ReasonCode",
    
    # Exceptions
    "NeoAuthzError",
    "ValidationError",
    "InvalidPermissionIdError",
    "NotFoundError",
    "WorkspaceNotFoundError",
    "MembershipNotFoundError",
    "PermissionDeniedError",
    "TransientStoreError",
    "DatabaseError",
    
    # Value objects
    "UserId",
    "WorkspaceId",
    
    # Permissions
    "PermissionId",
    "PermissionGrant",
    "PermissionUpdate",
    "PermissionDecision",
    "EffectivePermissions",
    "RoleDefaults",
    "AuthorizationResolver",
    "get_permission_catalog",
    
    # Workspaces
    "Workspace",
    "Membership",
    "WorkspaceGraph",
    "MembershipRegistry",
    
    # Migration
    "MigrationEngine",
    "MigrationResult",
    "CancellationToken",
    
    # Access
    "AccessibleWorkspaceAggregator",
    "AccessibleWorkspaces",
    
    # Engine
    "AuthorizationEngine",
    "create_memory_engine",
    "create_postgres_engine",
]
