"""Permission services."""

from .role_defaults import RoleDefaults
from .authorization_resolver import AuthorizationResolver

__all__ = ["RoleDefaults", "AuthorizationResolver"]
