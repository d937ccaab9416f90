"""Configuration for neo-authz: settings, constants and logging."""

from .constants import (
    WorkspaceRole,
    WorkspaceKind,
    MembershipScope,
    PermissionSource,
    ReasonCode,
    MigrationScope,
    INHERITED_ROLE_MAP,
    CacheKeys,
    CacheTTL,
)
from .settings import AuthzSettings, get_settings
from .logging_config import LoggingConfig, setup_logging, get_logger

__all__ = [
    # Constants
    "WorkspaceRole",
    "WorkspaceKind",
    "MembershipScope",
    "PermissionSource",
    "ReasonCode",
    "MigrationScope",
    "INHERITED_ROLE_MAP",
    "CacheKeys",
    "CacheTTL",
    
    # Settings
    "AuthzSettings",
    "get_settings",
    
    # Logging
    "LoggingConfig",
    "setup_logging",
    "get_logger",
]
