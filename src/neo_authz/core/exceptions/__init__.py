"""Exception hierarchy for neo-authz."""

from .base import NeoAuthzError, create_error_response, get_http_status_code
from .domain import (
    ValidationError,
    InvalidPermissionIdError,
    HierarchyError,
    MembershipExistsError,
    NotFoundError,
    WorkspaceNotFoundError,
    MembershipNotFoundError,
    PermissionDeniedError,
)
from .infrastructure import DatabaseError, TransientStoreError, CacheError

__all__ = [
    # Base
    "NeoAuthzError",
    "create_error_response",
    "get_http_status_code",
    
    # Domain
    "ValidationError",
    "InvalidPermissionIdError",
    "HierarchyError",
    "MembershipExistsError",
    "NotFoundError",
    "WorkspaceNotFoundError",
    "MembershipNotFoundError",
    "PermissionDeniedError",
    
    # Infrastructure
    "DatabaseError",
    "TransientStoreError",
    "CacheError",
]
