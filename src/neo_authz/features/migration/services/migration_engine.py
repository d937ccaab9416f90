"""Bulk conversion of implicit role access into explicit grants.

For every membership of a workspace the engine writes the role's full
default decision set as explicit grants. Writes are insert-if-absent: an
existing grant is never overwritten, which makes re-runs idempotent. Grants
that contradict the role default are reported as conflicts.
"""

import asyncio
import logging
from datetime import datetime
from typing import Callable, List, Optional, Tuple

from ....config.constants import MigrationStatus, WorkspaceRole
from ....core.exceptions import NeoAuthzError, PermissionDeniedError, ValidationError
from ....core.value_objects import UserId, WorkspaceId
from ....infrastructure.retry import NO_RETRY, RetryPolicy, run_with_retry
from ....utils.datetime import utc_now
from ...permissions.entities.grant import PermissionGrant
from ...permissions.entities.permission import PermissionId
from ...permissions.entities.protocols import GrantCache, PermissionGrantRepository, PrincipalDirectory
from ...permissions.services.role_defaults import RoleDefaults
from ...workspaces.entities.membership import Membership
from ...workspaces.entities.workspace import Workspace
from ...workspaces.services.membership_registry import MembershipRegistry
from ..entities.migration_result import (
    CancellationToken,
    MigrationConflict,
    MigrationDetail,
    MigrationResult,
)

logger = logging.getLogger(__name__)


class MigrationEngine:
    """Migrates workspaces from role-only access to explicit grants."""
    
    def __init__(
        self,
        membership_registry: MembershipRegistry,
        grant_repository: PermissionGrantRepository,
        role_defaults: Optional[RoleDefaults] = None,
        principal_directory: Optional[PrincipalDirectory] = None,
        grant_cache: Optional[GrantCache] = None,
        retry_policy: Optional[RetryPolicy] = None,
        concurrency: int = 10,
        clock: Callable[[], datetime] = utc_now,
    ):
        if concurrency < 1:
            raise ValueError("concurrency must be at least 1")
        self.membership_registry = membership_registry
        self.graph = membership_registry.graph
        self.grant_repository = grant_repository
        self.role_defaults = role_defaults or RoleDefaults()
        self.principal_directory = principal_directory
        self.grant_cache = grant_cache
        self.retry_policy = retry_policy or NO_RETRY
        self.concurrency = concurrency
        self.clock = clock
    
    async def migrate_workspace(
        self,
        workspace_id: Optional[WorkspaceId],
        acting_user_id: UserId,
        cancellation: Optional[CancellationToken] = None
    ) -> MigrationResult:
        """Migrate every membership of one workspace.
        
        Raises:
            ValidationError: If no workspace id is given
            WorkspaceNotFoundError: If the workspace does not exist
            PermissionDeniedError: If the acting user is not an owner
        """
        if workspace_id is None:
            raise ValidationError("Workspace id is required for migration")
        
        workspace = await self.graph.get_workspace(workspace_id)
        await self.ensure_can_migrate(acting_user_id, workspace)
        return await self._migrate(workspace, acting_user_id, cancellation)
    
    async def migrate_all_owned_workspaces(
        self,
        acting_user_id: UserId,
        cancellation: Optional[CancellationToken] = None
    ) -> MigrationResult:
        """Migrate every main workspace the user owns and all their sub-workspaces.
        
        Raises:
            PermissionDeniedError: If the acting user owns no main workspace
                and is not a super-admin
        """
        result = MigrationResult()
        owned = await self.graph.get_owned_main_workspaces(acting_user_id)
        if not owned and not await self._is_super_admin(acting_user_id):
            logger.warning(f"User {acting_user_id} denied migration: owns no main workspace")
            raise PermissionDeniedError(
                f"User {acting_user_id} owns no workspace to migrate",
                details={"user_id": acting_user_id.value},
            )
        logger.info(f"User {acting_user_id} migrating {len(owned)} owned workspace tree(s)")
        
        for main_workspace in owned:
            workspaces = [main_workspace, *await self.graph.get_children(main_workspace.id)]
            for workspace in workspaces:
                if cancellation is not None and cancellation.is_cancelled:
                    result.cancelled = True
                    logger.warning(f"Migration for user {acting_user_id} cancelled before workspace {workspace.id}")
                    return result
                try:
                    result.merge(await self._migrate(workspace, acting_user_id, cancellation))
                except NeoAuthzError as e:
                    logger.error(f"Failed to migrate workspace {workspace.id}: {e.message}")
                    result.errors.append(f"Workspace {workspace.id}: {e.message}")
        
        return result
    
    async def ensure_can_migrate(self, acting_user_id: UserId, workspace: Workspace) -> None:
        """Only owners, of the workspace or of its parent main workspace, may migrate."""
        if await self._is_super_admin(acting_user_id):
            return
        if await self._is_owner(acting_user_id, workspace):
            return
        if workspace.is_sub:
            parent = await self.graph.find_workspace(workspace.parent_workspace_id)
            if parent is not None and await self._is_owner(acting_user_id, parent):
                return
        
        logger.warning(f"User {acting_user_id} denied migration of workspace {workspace.id}")
        raise PermissionDeniedError(
            f"Only workspace owners can run permission migration for {workspace.id}",
            details={"user_id": acting_user_id.value, "workspace_id": workspace.id.value},
        )
    
    # Helpers
    
    async def _migrate(
        self,
        workspace: Workspace,
        acting_user_id: UserId,
        cancellation: Optional[CancellationToken]
    ) -> MigrationResult:
        memberships = await run_with_retry(
            lambda: self.membership_registry.list_members(workspace.id),
            self.retry_policy,
            f"list members of {workspace.id}",
        )
        semaphore = asyncio.Semaphore(self.concurrency)
        
        async def migrate_one(membership: Membership) -> Optional[Tuple[MigrationDetail, Optional[str]]]:
            async with semaphore:
                if cancellation is not None and cancellation.is_cancelled:
                    return None
                return await self._migrate_membership(membership, acting_user_id)
        
        outcomes = await asyncio.gather(*(migrate_one(m) for m in memberships), return_exceptions=True)
        
        result = MigrationResult()
        for membership, outcome in zip(memberships, outcomes):
            if outcome is None:
                result.cancelled = True
                continue
            if isinstance(outcome, BaseException):
                if not isinstance(outcome, Exception):
                    raise outcome
                result.add_detail(*self._failed_detail(membership, outcome))
                continue
            detail, error = outcome
            result.add_detail(detail, error)
        
        logger.info(
            f"Migrated workspace {workspace.id}: {result.success_count} succeeded, "
            f"{len(result.errors)} failed, {result.written_count} grant(s) written"
            + (", cancelled" if result.cancelled else "")
        )
        return result
    
    async def _migrate_membership(
        self,
        membership: Membership,
        acting_user_id: UserId
    ) -> Tuple[MigrationDetail, Optional[str]]:
        detail = MigrationDetail(
            user_id=membership.user_id,
            workspace_id=membership.workspace_id,
            role=membership.effective_role,
        )
        error: Optional[str] = None
        
        try:
            existing = await run_with_retry(
                lambda: self.grant_repository.get_user_grants(membership.user_id, membership.workspace_id),
                self.retry_policy,
                f"read grants of {membership.user_id}",
            ) or {}
            granted_at = self.clock()
            
            for permission_id, default in self.role_defaults.get_all_default_permissions(
                membership.effective_role
            ).items():
                current = existing.get(permission_id)
                if current is not None:
                    detail.skipped += 1
                    if current.granted != default:
                        detail.conflicts.append(MigrationConflict(permission_id, current.granted, default))
                    continue
                
                grant = PermissionGrant(
                    user_id=membership.user_id,
                    workspace_id=membership.workspace_id,
                    permission_id=PermissionId(permission_id),
                    granted=default,
                    granted_by=acting_user_id,
                    granted_at=granted_at,
                )
                written = await run_with_retry(
                    lambda grant=grant: self.grant_repository.insert_grant_if_absent(grant),
                    self.retry_policy,
                    f"insert grant {grant.key}",
                )
                if written:
                    detail.written += 1
                else:
                    detail.skipped += 1
        except NeoAuthzError as e:
            detail.status = f"{MigrationStatus.ERROR_PREFIX}{e.message}"
            error = f"User {membership.user_id} in workspace {membership.workspace_id}: {e.message}"
            logger.error(f"Failed to migrate {error}")
        finally:
            if detail.written and self.grant_cache is not None:
                await self.grant_cache.invalidate(membership.user_id, membership.workspace_id)
        
        if detail.conflicts:
            logger.warning(
                f"User {membership.user_id} in workspace {membership.workspace_id} has "
                f"{len(detail.conflicts)} explicit grant(s) contradicting {detail.role.value} defaults: "
                f"{', '.join(c.permission_id for c in detail.conflicts)}"
            )
        return detail, error
    
    def _failed_detail(
        self,
        membership: Membership,
        exc: Exception
    ) -> Tuple[MigrationDetail, str]:
        """Detail and error entry for an exception that escaped a membership migration."""
        message = str(exc) or type(exc).__name__
        detail = MigrationDetail(
            user_id=membership.user_id,
            workspace_id=membership.workspace_id,
            role=membership.effective_role,
            status=f"{MigrationStatus.ERROR_PREFIX}{message}",
        )
        error = f"User {membership.user_id} in workspace {membership.workspace_id}: {message}"
        logger.error(f"Unexpected failure migrating {error}", exc_info=exc)
        return detail, error
    
    async def _is_owner(self, user_id: UserId, workspace: Workspace) -> bool:
        membership = await self.membership_registry.get_membership(user_id, workspace.id)
        return membership is not None and membership.is_direct and membership.role == WorkspaceRole.OWNER
    
    async def _is_super_admin(self, user_id: UserId) -> bool:
        if self.principal_directory is None:
            return False
        return await self.principal_directory.is_super_admin(user_id)
