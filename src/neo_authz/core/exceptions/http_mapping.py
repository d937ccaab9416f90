"""HTTP status code mapping for exceptions."""

from typing import Dict, Type

from .base import NeoAuthzError
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


HTTP_STATUS_MAP: Dict[Type[Exception], int] = {
    # 403 Forbidden
    PermissionDeniedError: 403,
    
    # 404 Not Found
    NotFoundError: 404,
    WorkspaceNotFoundError: 404,
    MembershipNotFoundError: 404,
    
    # 409 Conflict
    MembershipExistsError: 409,
    
    # 422 Unprocessable Entity
    ValidationError: 422,
    InvalidPermissionIdError: 422,
    HierarchyError: 422,
    
    # 500 Internal Server Error
    DatabaseError: 500,
    CacheError: 500,
    
    # 503 Service Unavailable
    TransientStoreError: 503,
    
    # Default for NeoAuthzError
    NeoAuthzError: 500,
}


def get_http_status_code(exception: Exception) -> int:
    """Get HTTP status code for an exception, honouring subclassing.
    
    Args:
        exception: The exception instance
        
    Returns:
        HTTP status code, 500 for unmapped exceptions
    """
    for exception_type in type(exception).__mro__:
        if exception_type in HTTP_STATUS_MAP:
            return HTTP_STATUS_MAP[exception_type]
    return 500
