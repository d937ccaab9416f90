"""Authorization decisions over explicit grants, role defaults and hierarchy.

Precedence, highest first:

    1. super-admin flag (fallback checks and authority checks only)
    2. explicit, non-expired grant, which may deny what the role allows
    3. role default for the principal's effective role in the workspace
    4. deny

A principal without a membership in the workspace, direct or inherited
from the parent, is denied by every check except the super-admin bypass,
even when explicit grant records for it remain in the store.

``has_permission`` consults explicit grants only. An expired grant is never
treated as granted but its record is kept and still returned by
``get_user_permissions``.
"""

import logging
from datetime import datetime
from typing import Callable, Iterable, Mapping, Optional, Union

from ....config.constants import PermissionSource, ReasonCode, WorkspaceRole
from ....core.exceptions import InvalidPermissionIdError, MembershipNotFoundError, PermissionDeniedError
from ....core.value_objects import UserId, WorkspaceId
from ....infrastructure.retry import NO_RETRY, RetryPolicy, run_with_retry
from ....utils.datetime import utc_now
from ...workspaces.services.membership_registry import MembershipRegistry
from ..entities.catalog import PermissionCatalog, get_permission_catalog
from ..entities.grant import (
    EffectivePermissions,
    PermissionDecision,
    PermissionGrant,
    PermissionMap,
    PermissionUpdate,
)
from ..entities.permission import PermissionId
from ..entities.protocols import GrantCache, PermissionGrantRepository, PrincipalDirectory
from .role_defaults import RoleDefaults

logger = logging.getLogger(__name__)


class AuthorizationResolver:
    """Resolves permission checks and guards permission updates."""
    
    def __init__(
        self,
        grant_repository: PermissionGrantRepository,
        membership_registry: MembershipRegistry,
        role_defaults: Optional[RoleDefaults] = None,
        catalog: Optional[PermissionCatalog] = None,
        principal_directory: Optional[PrincipalDirectory] = None,
        cache: Optional[GrantCache] = None,
        retry_policy: Optional[RetryPolicy] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.grant_repository = grant_repository
        self.membership_registry = membership_registry
        self.catalog = catalog or get_permission_catalog()
        self.role_defaults = role_defaults or RoleDefaults(self.catalog)
        self.principal_directory = principal_directory
        self.cache = cache
        self.retry_policy = retry_policy or NO_RETRY
        self.clock = clock
    
    # Explicit grant checks
    
    async def has_permission(
        self,
        user_id: UserId,
        workspace_id: WorkspaceId,
        permission_id: Union[PermissionId, str]
    ) -> bool:
        """True only for a present, granted, non-expired explicit grant."""
        decision = await self.check_explicit(user_id, workspace_id, permission_id)
        return decision.allowed
    
    async def check_explicit(
        self,
        user_id: UserId,
        workspace_id: WorkspaceId,
        permission_id: Union[PermissionId, str]
    ) -> PermissionDecision:
        parsed = self._parse(permission_id)
        if parsed is None:
            return PermissionDecision(False, ReasonCode.INVALID_PERMISSION, str(permission_id))
        
        if not await self._is_member(user_id, workspace_id):
            return PermissionDecision(False, ReasonCode.NO_MEMBERSHIP, parsed.value)
        
        grant = await self._lookup_grant(user_id, workspace_id, parsed)
        decision = self._explicit_decision(grant, parsed)
        if decision is None:
            reason = ReasonCode.EXPIRED_GRANT_DENIED if grant is not None else ReasonCode.NO_GRANT
            decision = PermissionDecision(False, reason, parsed.value)
        return decision
    
    async def has_any_permission(
        self,
        user_id: UserId,
        workspace_id: WorkspaceId,
        permission_ids: Iterable[Union[PermissionId, str]]
    ) -> bool:
        """True if any listed permission is explicitly granted. False for an empty list."""
        permission_ids = list(permission_ids)
        if not permission_ids:
            return False
        if not await self._is_member(user_id, workspace_id):
            return False
        grants = await self._load_grants(user_id, workspace_id) or {}
        now = self.clock()
        return any(
            self._is_effective(grants.get(str(permission_id)), now)
            for permission_id in permission_ids
            if self._parse(permission_id) is not None
        )
    
    async def has_all_permissions(
        self,
        user_id: UserId,
        workspace_id: WorkspaceId,
        permission_ids: Iterable[Union[PermissionId, str]]
    ) -> bool:
        """True if every listed permission is explicitly granted. True for an empty list."""
        permission_ids = list(permission_ids)
        if not permission_ids:
            return True
        if not await self._is_member(user_id, workspace_id):
            return False
        grants = await self._load_grants(user_id, workspace_id) or {}
        now = self.clock()
        return all(
            self._parse(permission_id) is not None
            and self._is_effective(grants.get(str(permission_id)), now)
            for permission_id in permission_ids
        )
    
    # Fallback checks
    
    async def has_permission_with_fallback(
        self,
        user_id: UserId,
        workspace_id: WorkspaceId,
        permission_id: Union[PermissionId, str],
        role: Optional[WorkspaceRole] = None
    ) -> bool:
        decision = await self.check_permission(user_id, workspace_id, permission_id, role)
        return decision.allowed
    
    async def check_permission(
        self,
        user_id: UserId,
        workspace_id: WorkspaceId,
        permission_id: Union[PermissionId, str],
        role: Optional[WorkspaceRole] = None
    ) -> PermissionDecision:
        """Full decision with reason code.
        
        When ``role`` is omitted the principal's effective role is read from
        the membership registry, including access inherited from the parent
        workspace.
        """
        parsed = self._parse(permission_id)
        if parsed is None:
            logger.debug(f"Denied unknown permission {permission_id!r} for user {user_id}")
            return PermissionDecision(False, ReasonCode.INVALID_PERMISSION, str(permission_id))
        if role is not None:
            role = WorkspaceRole(role)
        
        if await self._is_super_admin(user_id):
            return PermissionDecision(True, ReasonCode.SUPER_ADMIN, parsed.value, role)
        
        membership = await self.membership_registry.get_effective_membership(user_id, workspace_id)
        if membership is None:
            logger.debug(f"Denied {parsed} for user {user_id} without membership in {workspace_id}")
            return PermissionDecision(False, ReasonCode.NO_MEMBERSHIP, parsed.value, role)
        
        grant = await self._lookup_grant(user_id, workspace_id, parsed)
        explicit = self._explicit_decision(grant, parsed, role)
        if explicit is not None:
            logger.debug(f"{parsed} for user {user_id} in {workspace_id}: explicit {explicit.allowed}")
            return explicit
        
        if role is None:
            role = membership.effective_role
        
        allowed = self.role_defaults.is_default_granted(role, parsed)
        if not allowed and grant is not None:
            return PermissionDecision(False, ReasonCode.EXPIRED_GRANT_DENIED, parsed.value, role)
        logger.debug(f"{parsed} for user {user_id} in {workspace_id}: {role.value} default {allowed}")
        return PermissionDecision(allowed, ReasonCode.ROLE_DEFAULT, parsed.value, role)
    
    # Permission maps
    
    async def get_user_permissions(
        self,
        user_id: UserId,
        workspace_id: WorkspaceId
    ) -> Optional[PermissionMap]:
        """Raw explicit grant map, expired entries included. None when there are none."""
        return await self._load_grants(user_id, workspace_id)
    
    async def get_effective_permissions(
        self,
        user_id: UserId,
        workspace_id: WorkspaceId
    ) -> EffectivePermissions:
        """Grant map of the workspace, else the parent workspace's map."""
        direct = await self._load_grants(user_id, workspace_id)
        if direct:
            return EffectivePermissions(user_id, workspace_id, direct, PermissionSource.DIRECT)
        
        workspace = await self.membership_registry.graph.find_workspace(workspace_id)
        if workspace is not None and workspace.is_sub:
            inherited = await self._load_grants(user_id, workspace.parent_workspace_id)
            if inherited:
                return EffectivePermissions(
                    user_id,
                    workspace_id,
                    inherited,
                    PermissionSource.INHERITED,
                    inherited_from=workspace.parent_workspace_id,
                )
        
        return EffectivePermissions(user_id, workspace_id)
    
    # Mutations
    
    async def update_permissions(
        self,
        user_id: UserId,
        workspace_id: WorkspaceId,
        updates: Mapping[str, Union[bool, PermissionUpdate]],
        acting_user_id: UserId,
        expires_at: Optional[datetime] = None
    ) -> PermissionMap:
        """Write explicit grants for a user, one last-writer-wins record per id.
        
        Allowed for workspace owners, and for admins when the target is not
        an owner. Each entry is a granted flag or a PermissionUpdate carrying
        its own ``granted_by`` and ``expires_at``; unset fields fall back to
        the acting user and the batch ``expires_at``.
        
        Raises:
            InvalidPermissionIdError: If any id is unknown; nothing is written
            PermissionDeniedError: If the acting user lacks authority
            MembershipNotFoundError: If the target user is not a member of the workspace
        """
        parsed = {
            self.catalog.parse(permission_id): PermissionUpdate.coerce(update)
            for permission_id, update in updates.items()
        }
        await self.membership_registry.graph.get_workspace(workspace_id)
        await self.ensure_can_manage(acting_user_id, user_id, workspace_id)
        if not await self._is_member(user_id, workspace_id):
            raise MembershipNotFoundError(
                f"User {user_id} has no membership in workspace {workspace_id}",
                details={"user_id": user_id.value, "workspace_id": workspace_id.value},
            )
        
        granted_at = self.clock()
        try:
            for permission_id, update in parsed.items():
                grant = PermissionGrant(
                    user_id=user_id,
                    workspace_id=workspace_id,
                    permission_id=permission_id,
                    granted=update.granted,
                    granted_by=update.granted_by or acting_user_id,
                    granted_at=granted_at,
                    expires_at=update.expires_at or expires_at,
                )
                await run_with_retry(
                    lambda grant=grant: self.grant_repository.upsert_grant(grant),
                    self.retry_policy,
                    f"upsert grant {grant.key}",
                )
        finally:
            await self.invalidate(user_id, workspace_id)
        
        logger.info(
            f"User {acting_user_id} updated {len(parsed)} permission(s) "
            f"for user {user_id} in workspace {workspace_id}"
        )
        return await self._load_grants(user_id, workspace_id) or {}
    
    async def delete_user_permissions(
        self,
        user_id: UserId,
        workspace_id: WorkspaceId,
        acting_user_id: UserId
    ) -> int:
        """Remove every explicit grant of a user in a workspace."""
        await self.ensure_can_manage(acting_user_id, user_id, workspace_id)
        try:
            deleted = await run_with_retry(
                lambda: self.grant_repository.delete_user_grants(user_id, workspace_id),
                self.retry_policy,
                "delete user grants",
            )
        finally:
            await self.invalidate(user_id, workspace_id)
        return deleted
    
    async def ensure_can_manage(
        self,
        acting_user_id: UserId,
        target_user_id: UserId,
        workspace_id: WorkspaceId
    ) -> None:
        """Raise PermissionDeniedError unless the actor may edit the target's grants."""
        if await self._is_super_admin(acting_user_id):
            return
        
        actor_role = await self.membership_registry.get_effective_role(acting_user_id, workspace_id)
        if actor_role == WorkspaceRole.OWNER:
            return
        if actor_role == WorkspaceRole.ADMIN:
            target_role = await self.membership_registry.get_effective_role(target_user_id, workspace_id)
            if target_role != WorkspaceRole.OWNER:
                return
        
        logger.warning(
            f"User {acting_user_id} ({actor_role.value if actor_role else 'no role'}) denied managing "
            f"permissions of user {target_user_id} in workspace {workspace_id}"
        )
        raise PermissionDeniedError(
            f"User {acting_user_id} cannot manage permissions of user {target_user_id} "
            f"in workspace {workspace_id}",
            details={
                "acting_user_id": acting_user_id.value,
                "target_user_id": target_user_id.value,
                "workspace_id": workspace_id.value,
            },
        )
    
    async def invalidate(self, user_id: UserId, workspace_id: WorkspaceId) -> None:
        if self.cache is not None:
            await self.cache.invalidate(user_id, workspace_id)
    
    # Helpers
    
    def _parse(self, permission_id) -> Optional[PermissionId]:
        try:
            return self.catalog.parse(permission_id)
        except InvalidPermissionIdError:
            return None
    
    def _is_effective(self, grant: Optional[PermissionGrant], now: datetime) -> bool:
        return grant is not None and grant.is_effective(now)
    
    def _explicit_decision(
        self,
        grant: Optional[PermissionGrant],
        permission_id: PermissionId,
        role: Optional[WorkspaceRole] = None
    ) -> Optional[PermissionDecision]:
        """Decision from a live grant, None when absent or expired."""
        if grant is None or grant.is_expired(self.clock()):
            return None
        reason = ReasonCode.EXPLICIT_GRANT if grant.granted else ReasonCode.EXPLICIT_DENY
        return PermissionDecision(grant.granted, reason, permission_id.value, role)
    
    async def _is_super_admin(self, user_id: UserId) -> bool:
        if self.principal_directory is None:
            return False
        return await self.principal_directory.is_super_admin(user_id)
    
    async def _lookup_grant(
        self,
        user_id: UserId,
        workspace_id: WorkspaceId,
        permission_id: PermissionId
    ) -> Optional[PermissionGrant]:
        if self.cache is not None:
            grants = await self._load_grants(user_id, workspace_id)
            return grants.get(permission_id.value) if grants else None
        return await run_with_retry(
            lambda: self.grant_repository.get_grant(user_id, workspace_id, permission_id),
            self.retry_policy,
            "get grant",
        )
    
    async def _is_member(self, user_id: UserId, workspace_id: WorkspaceId) -> bool:
        return await self.membership_registry.get_effective_membership(user_id, workspace_id) is not None
    
    async def _load_grants(self, user_id: UserId, workspace_id: WorkspaceId) -> Optional[PermissionMap]:
        generation = None
        if self.cache is not None:
            cached = await self.cache.get_user_grants(user_id, workspace_id)
            if cached is not None:
                return cached or None
            generation = self.cache.generation(user_id, workspace_id)
        
        grants = await run_with_retry(
            lambda: self.grant_repository.get_user_grants(user_id, workspace_id),
            self.retry_policy,
            "get user grants",
        )
        if self.cache is not None:
            await self.cache.set_user_grants(user_id, workspace_id, grants or {}, generation=generation)
        return grants
