"""Permission repositories."""

from .grant_repository import AsyncPGPermissionGrantRepository
from .memory_grant_repository import MemoryPermissionGrantRepository
from .grant_cache import GrantCacheAdapter
from .principal_directory import StaticPrincipalDirectory

__all__ = [
    "AsyncPGPermissionGrantRepository",
    "MemoryPermissionGrantRepository",
    "GrantCacheAdapter",
    "StaticPrincipalDirectory",
]
