"""Domain exceptions for workspaces, memberships and permissions."""

from .base import NeoAuthzError


class ValidationError(NeoAuthzError):
    """Raised when input fails validation."""
    pass


class InvalidPermissionIdError(ValidationError):
    """Raised when a permission id is malformed or not in the catalog."""
    pass


class HierarchyError(ValidationError):
    """Raised when a workspace would break the two-level tree."""
    pass


class MembershipExistsError(ValidationError):
    """Raised when adding a membership that already exists."""
    pass


class NotFoundError(NeoAuthzError):
    """Base exception for missing entities."""
    pass


class WorkspaceNotFoundError(NotFoundError):
    """Raised when a workspace does not exist."""
    pass


class MembershipNotFoundError(NotFoundError):
    """Raised when a user has no membership in a workspace."""
    pass


class PermissionDeniedError(NeoAuthzError):
    """Raised when a mutating operation is called without authority."""
    pass
