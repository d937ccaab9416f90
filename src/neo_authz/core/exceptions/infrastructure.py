"""Infrastructure exceptions for storage and caching."""

from .base import NeoAuthzError


class DatabaseError(NeoAuthzError):
    """Non-retryable database failure."""
    pass


class TransientStoreError(NeoAuthzError):
    """Retryable store failure such as a dropped connection or timeout."""
    pass


class CacheError(NeoAuthzError):
    """Cache backend failure."""
    pass
