"""Standardized error handling for store operations.

Driver errors are translated into the engine's exception taxonomy:
connection loss, timeouts and serialization conflicts become
TransientStoreError (retryable), everything else DatabaseError.
"""

import asyncio
import functools
import logging
from typing import Any, Callable

import asyncpg

from ...core.exceptions import DatabaseError, NeoAuthzError, TransientStoreError

logger = logging.getLogger(__name__)


TRANSIENT_ERRORS = (
    asyncpg.exceptions.PostgresConnectionError,
    asyncpg.exceptions.InterfaceError,
    asyncpg.exceptions.TooManyConnectionsError,
    asyncpg.exceptions.SerializationError,
    asyncpg.exceptions.DeadlockDetectedError,
    asyncpg.exceptions.CannotConnectNowError,
    asyncio.TimeoutError,
    ConnectionError,
    OSError,
)


def translate_store_error(operation_name: str, error: Exception) -> NeoAuthzError:
    """Map a driver exception to TransientStoreError or DatabaseError."""
    if isinstance(error, NeoAuthzError):
        return error
    if isinstance(error, TRANSIENT_ERRORS):
        return TransientStoreError(
            f"Transient failure during {operation_name}: {error}",
            details={"operation": operation_name},
        )
    return DatabaseError(
        f"Failed to {operation_name}: {error}",
        details={"operation": operation_name},
    )


def store_operation(operation_name: str, log_level: int = logging.ERROR):
    """Decorator translating and logging store failures.
    
    Usage:
        @store_operation("upsert grant")
        async def upsert_grant(self, grant):
            ...
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs) -> Any:
            try:
                return await func(*args, **kwargs)
            except Exception as e:
                translated = translate_store_error(operation_name, e)
                logger.log(log_level, f"Failed to {operation_name}: {e}")
                if translated is e:
                    raise
                raise translated from e
        
        return wrapper
    return decorator
