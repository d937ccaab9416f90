"""AuthorizationEngine facade and factories.

Wires repositories, cache, retry policy and services into the surface
consumed by host applications and the HTTP router.
"""

import logging
from datetime import datetime
from typing import Iterable, Mapping, Optional, Union

from .config.constants import WorkspaceRole
from .config.settings import AuthzSettings, get_settings
from .core.value_objects import UserId, WorkspaceId
from .features.access import AccessibleWorkspaceAggregator, AccessibleWorkspaces
from .features.migration import CancellationToken, MigrationEngine, MigrationResult
from .features.permissions import (
    AsyncPGPermissionGrantRepository,
    AuthorizationResolver,
    EffectivePermissions,
    GrantCache,
    GrantCacheAdapter,
    MemoryPermissionGrantRepository,
    PermissionCatalog,
    PermissionDecision,
    PermissionGrantRepository,
    PermissionId,
    PermissionMap,
    PermissionUpdate,
    PrincipalDirectory,
    RoleDefaults,
    StaticPrincipalDirectory,
    get_permission_catalog,
)
from .features.workspaces import (
    AsyncPGMembershipRepository,
    AsyncPGWorkspaceRepository,
    MembershipRegistry,
    MembershipRepository,
    MemoryMembershipRepository,
    MemoryWorkspaceRepository,
    WorkspaceGraph,
    WorkspaceRepository,
)
from .infrastructure.cache import MemoryCache, RedisCache
from .infrastructure.database import DatabaseService
from .infrastructure.retry import RetryPolicy

logger = logging.getLogger(__name__)


class AuthorizationEngine:
    """Single entry point for authorization checks, grants and migration."""
    
    def __init__(
        self,
        workspace_repository: WorkspaceRepository,
        membership_repository: MembershipRepository,
        grant_repository: PermissionGrantRepository,
        principal_directory: Optional[PrincipalDirectory] = None,
        grant_cache: Optional[GrantCache] = None,
        retry_policy: Optional[RetryPolicy] = None,
        catalog: Optional[PermissionCatalog] = None,
        migration_concurrency: int = 10,
    ):
        self.catalog = catalog or get_permission_catalog()
        self.role_defaults = RoleDefaults(self.catalog)
        self.graph = WorkspaceGraph(workspace_repository, membership_repository)
        self.memberships = MembershipRegistry(
            membership_repository,
            self.graph,
            principal_directory=principal_directory,
        )
        self.resolver = AuthorizationResolver(
            grant_repository,
            self.memberships,
            role_defaults=self.role_defaults,
            catalog=self.catalog,
            principal_directory=principal_directory,
            cache=grant_cache,
            retry_policy=retry_policy,
        )
        self.migration = MigrationEngine(
            self.memberships,
            grant_repository,
            role_defaults=self.role_defaults,
            principal_directory=principal_directory,
            grant_cache=grant_cache,
            retry_policy=retry_policy,
            concurrency=migration_concurrency,
        )
        self.aggregator = AccessibleWorkspaceAggregator(self.memberships)
    
    # Checks
    
    async def has_permission(
        self,
        user_id: UserId,
        workspace_id: WorkspaceId,
        permission_id: Union[PermissionId, str]
    ) -> bool:
        return await self.resolver.has_permission(user_id, workspace_id, permission_id)
    
    async def has_permission_with_fallback(
        self,
        user_id: UserId,
        workspace_id: WorkspaceId,
        permission_id: Union[PermissionId, str],
        role: Optional[WorkspaceRole] = None
    ) -> bool:
        return await self.resolver.has_permission_with_fallback(user_id, workspace_id, permission_id, role)
    
    async def check_permission(
        self,
        user_id: UserId,
        workspace_id: WorkspaceId,
        permission_id: Union[PermissionId, str],
        role: Optional[WorkspaceRole] = None,
        use_fallback: bool = True
    ) -> PermissionDecision:
        if not use_fallback:
            return await self.resolver.check_explicit(user_id, workspace_id, permission_id)
        return await self.resolver.check_permission(user_id, workspace_id, permission_id, role)
    
    async def has_any_permission(
        self,
        user_id: UserId,
        workspace_id: WorkspaceId,
        permission_ids: Iterable[Union[PermissionId, str]]
    ) -> bool:
        return await self.resolver.has_any_permission(user_id, workspace_id, permission_ids)
    
    async def has_all_permissions(
        self,
        user_id: UserId,
        workspace_id: WorkspaceId,
        permission_ids: Iterable[Union[PermissionId, str]]
    ) -> bool:
        return await self.resolver.has_all_permissions(user_id, workspace_id, permission_ids)
    
    # Grants
    
    async def get_user_permissions(self, user_id: UserId, workspace_id: WorkspaceId) -> Optional[PermissionMap]:
        return await self.resolver.get_user_permissions(user_id, workspace_id)
    
    async def get_effective_permissions(self, user_id: UserId, workspace_id: WorkspaceId) -> EffectivePermissions:
        return await self.resolver.get_effective_permissions(user_id, workspace_id)
    
    async def update_permissions(
        self,
        user_id: UserId,
        workspace_id: WorkspaceId,
        updates: Mapping[str, Union[bool, PermissionUpdate]],
        acting_user_id: UserId,
        expires_at: Optional[datetime] = None
    ) -> PermissionMap:
        return await self.resolver.update_permissions(user_id, workspace_id, updates, acting_user_id, expires_at)
    
    # Migration
    
    async def migrate_workspace(
        self,
        workspace_id: Optional[WorkspaceId],
        acting_user_id: UserId,
        cancellation: Optional[CancellationToken] = None
    ) -> MigrationResult:
        return await self.migration.migrate_workspace(workspace_id, acting_user_id, cancellation)
    
    async def migrate_all_owned_workspaces(
        self,
        acting_user_id: UserId,
        cancellation: Optional[CancellationToken] = None
    ) -> MigrationResult:
        return await self.migration.migrate_all_owned_workspaces(acting_user_id, cancellation)
    
    # Hierarchy
    
    async def get_user_accessible_workspaces(self, user_id: UserId) -> AccessibleWorkspaces:
        return await self.aggregator.get_user_accessible_workspaces(user_id)


def _build_grant_cache(settings: AuthzSettings) -> Optional[GrantCacheAdapter]:
    if not settings.cache_enabled:
        return None
    if settings.redis_url is not None:
        backend = RedisCache.from_url(str(settings.redis_url), default_ttl=settings.cache_ttl_seconds)
    else:
        backend = MemoryCache(default_ttl=settings.cache_ttl_seconds)
    return GrantCacheAdapter(backend, ttl=settings.cache_ttl_seconds)


def create_memory_engine(settings: Optional[AuthzSettings] = None) -> AuthorizationEngine:
    """Engine over in-memory repositories."""
    settings = settings or get_settings()
    return AuthorizationEngine(
        workspace_repository=MemoryWorkspaceRepository(),
        membership_repository=MemoryMembershipRepository(),
        grant_repository=MemoryPermissionGrantRepository(),
        principal_directory=StaticPrincipalDirectory(settings.super_admin_ids),
        grant_cache=_build_grant_cache(settings),
        retry_policy=RetryPolicy.from_settings(settings),
        migration_concurrency=settings.migration_concurrency,
    )


def create_postgres_engine(
    settings: Optional[AuthzSettings] = None,
    database_service: Optional[DatabaseService] = None
) -> AuthorizationEngine:
    """Engine over the asyncpg repositories. Call DatabaseService.ensure_schema() on startup."""
    settings = settings or get_settings()
    database_service = database_service or DatabaseService(settings)
    logger.info(f"Creating PostgreSQL authorization engine on schema '{database_service.schema}'")
    return AuthorizationEngine(
        workspace_repository=AsyncPGWorkspaceRepository(database_service),
        membership_repository=AsyncPGMembershipRepository(database_service),
        grant_repository=AsyncPGPermissionGrantRepository(database_service),
        principal_directory=StaticPrincipalDirectory(settings.super_admin_ids),
        grant_cache=_build_grant_cache(settings),
        retry_policy=RetryPolicy.from_settings(settings),
        migration_concurrency=settings.migration_concurrency,
    )
