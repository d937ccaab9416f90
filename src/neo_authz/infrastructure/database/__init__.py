"""PostgreSQL access for the authorization store."""

from .connection import DatabaseService
from .error_handling import store_operation, translate_store_error
from .schema import get_schema_statements

__all__ = [
    "DatabaseService",
    "store_operation",
    "translate_store_error",
    "get_schema_statements",
]
