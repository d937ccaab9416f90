"""Constants and enums for neo-authz.

This module defines the roles, workspace kinds, decision reason codes and
cache key patterns used throughout the authorization engine. Enum values
match the values persisted in the ``authz`` schema.
"""

from enum import Enum
from typing import Final


class WorkspaceRole(str, Enum):
    """Membership roles, ordered from most to least privileged."""
    
    OWNER = "owner"
    ADMIN = "admin"
    MEMBER = "member"


class WorkspaceKind(str, Enum):
    """Workspace kinds of the two-level workspace tree."""
    
    MAIN = "main"
    SUB = "sub"


class MembershipScope(str, Enum):
    """How a membership came to exist."""
    
    DIRECT = "direct"
    INHERITED = "inherited"


class PermissionSource(str, Enum):
    """Where an effective permission map was read from."""
    
    DIRECT = "direct"
    INHERITED = "inherited"
    NONE = "none"


class ReasonCode(str, Enum):
    """Reason attached to every authorization decision."""
    
    EXPLICIT_GRANT = "explicit-grant"
    EXPLICIT_DENY = "explicit-deny"
    ROLE_DEFAULT = "role-default"
    EXPIRED_GRANT_DENIED = "expired-grant-denied"
    NO_MEMBERSHIP = "no-membership"
    NO_GRANT = "no-grant"
    INVALID_PERMISSION = "invalid-permission"
    SUPER_ADMIN = "super-admin"


class MigrationScope(str, Enum):
    """Targets accepted by the migration endpoint."""
    
    WORKSPACE = "workspace"
    ALL = "all"


# Role mapping applied when a parent membership grants sub-workspace access
INHERITED_ROLE_MAP: Final[dict] = {
    WorkspaceRole.OWNER: WorkspaceRole.ADMIN,
    WorkspaceRole.ADMIN: WorkspaceRole.ADMIN,
}


class PermissionActions:
    """Action names with special meaning for role defaults."""
    
    VIEW: Final[str] = "view"
    DELETE: Final[str] = "delete"


class CacheKeys:
    """Cache key patterns for Redis."""
    
    USER_GRANTS: Final[str] = "authz:grants:{user_id}:{workspace_id}"


class CacheTTL:
    """Cache TTL values in seconds."""
    
    GRANTS_SHORT: Final[int] = 30
    GRANTS_LONG: Final[int] = 300


class DatabaseSchemas:
    """Database schema names."""
    
    AUTHZ: Final[str] = "authz"


class MigrationStatus:
    """Status strings reported per migrated membership."""
    
    SUCCESS: Final[str] = "Success"
    ERROR_PREFIX: Final[str] = "Error: "
