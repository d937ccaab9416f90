"""AsyncPG implementations of the workspace and membership repositories."""

import logging
from typing import List, Optional

from ....config.constants import WorkspaceKind
from ....core.value_objects import UserId, WorkspaceId
from ....infrastructure.database import DatabaseService, store_operation
from ..entities.membership import Membership
from ..entities.workspace import Workspace

logger = logging.getLogger(__name__)


def _workspace_from_row(row) -> Workspace:
    return Workspace(
        id=WorkspaceId(row["id"]),
        name=row["name"],
        kind=WorkspaceKind(row["kind"]),
        owner_id=UserId(row["owner_id"]),
        parent_workspace_id=WorkspaceId(row["parent_workspace_id"]) if row["parent_workspace_id"] else None,
        created_at=row["created_at"],
    )


def _membership_from_row(row) -> Membership:
    return Membership(
        user_id=UserId(row["user_id"]),
        workspace_id=WorkspaceId(row["workspace_id"]),
        role=row["role"],
        scope=row["scope"],
        effective_role=row["effective_role"],
        inherited_from=WorkspaceId(row["inherited_from"]) if row["inherited_from"] else None,
        joined_at=row["joined_at"],
    )


class AsyncPGWorkspaceRepository:
    """Workspace repository backed by the ``workspaces`` table."""
    
    COLUMNS = "id, name, kind, owner_id, parent_workspace_id, created_at"
    
    def __init__(self, database_service: DatabaseService):
        self.database_service = database_service
        self.schema = database_service.schema
    
    @store_operation("get workspace")
    async def get(self, workspace_id: WorkspaceId) -> Optional[Workspace]:
        query = f"SELECT {self.COLUMNS} FROM {self.schema}.workspaces WHERE id = $1"
        async with self.database_service.get_connection() as conn:
            row = await conn.fetchrow(query, workspace_id.value)
        return _workspace_from_row(row) if row else None
    
    @store_operation("save workspace")
    async def save(self, workspace: Workspace) -> Workspace:
        query = f"""
            INSERT INTO {self.schema}.workspaces ({self.COLUMNS})
            VALUES ($1, $2, $3, $4, $5, $6)
            ON CONFLICT (id) DO UPDATE SET
                name = EXCLUDED.name,
                owner_id = EXCLUDED.owner_id
        """
        async with self.database_service.get_connection() as conn:
            await conn.execute(
                query,
                workspace.id.value,
                workspace.name,
                workspace.kind.value,
                workspace.owner_id.value,
                workspace.parent_workspace_id.value if workspace.parent_workspace_id else None,
                workspace.created_at,
            )
        logger.info(f"Saved workspace {workspace.id} ({workspace.kind.value})")
        return workspace
    
    @store_operation("list child workspaces")
    async def list_children(self, workspace_id: WorkspaceId) -> List[Workspace]:
        query = f"""
            SELECT {self.COLUMNS} FROM {self.schema}.workspaces
            WHERE parent_workspace_id = $1
            ORDER BY created_at, id
        """
        async with self.database_service.get_connection() as conn:
            rows = await conn.fetch(query, workspace_id.value)
        return [_workspace_from_row(row) for row in rows]
    
    @store_operation("list workspaces")
    async def list_all(self) -> List[Workspace]:
        query = f"SELECT {self.COLUMNS} FROM {self.schema}.workspaces ORDER BY created_at, id"
        async with self.database_service.get_connection() as conn:
            rows = await conn.fetch(query)
        return [_workspace_from_row(row) for row in rows]


class AsyncPGMembershipRepository:
    """Membership repository backed by the ``memberships`` table."""
    
    COLUMNS = "user_id, workspace_id, role, scope, effective_role, inherited_from, joined_at"
    
    def __init__(self, database_service: DatabaseService):
        self.database_service = database_service
        self.schema = database_service.schema
    
    @store_operation("get membership")
    async def get(self, user_id: UserId, workspace_id: WorkspaceId) -> Optional[Membership]:
        query = f"""
            SELECT {self.COLUMNS} FROM {self.schema}.memberships
            WHERE user_id = $1 AND workspace_id = $2
        """
        async with self.database_service.get_connection() as conn:
            row = await conn.fetchrow(query, user_id.value, workspace_id.value)
        return _membership_from_row(row) if row else None
    
    @store_operation("save membership")
    async def save(self, membership: Membership) -> Membership:
        query = f"""
            INSERT INTO {self.schema}.memberships ({self.COLUMNS})
            VALUES ($1, $2, $3, $4, $5, $6, $7)
            ON CONFLICT (user_id, workspace_id) DO UPDATE SET
                role = EXCLUDED.role,
                scope = EXCLUDED.scope,
                effective_role = EXCLUDED.effective_role,
                inherited_from = EXCLUDED.inherited_from
        """
        async with self.database_service.get_connection() as conn:
            await conn.execute(
                query,
                membership.user_id.value,
                membership.workspace_id.value,
                membership.role.value,
                membership.scope.value,
                membership.effective_role.value,
                membership.inherited_from.value if membership.inherited_from else None,
                membership.joined_at,
            )
        return membership
    
    @store_operation("delete membership")
    async def delete(self, user_id: UserId, workspace_id: WorkspaceId) -> bool:
        query = f"DELETE FROM {self.schema}.memberships WHERE user_id = $1 AND workspace_id = $2"
        async with self.database_service.get_connection() as conn:
            result = await conn.execute(query, user_id.value, workspace_id.value)
        # asyncpg returns the command tag, e.g. "DELETE 1"
        return result.split()[-1] != "0"
    
    @store_operation("list workspace memberships")
    async def list_by_workspace(self, workspace_id: WorkspaceId) -> List[Membership]:
        query = f"""
            SELECT {self.COLUMNS} FROM {self.schema}.memberships
            WHERE workspace_id = $1
            ORDER BY joined_at, user_id
        """
        async with self.database_service.get_connection() as conn:
            rows = await conn.fetch(query, workspace_id.value)
        return [_membership_from_row(row) for row in rows]
    
    @store_operation("list user memberships")
    async def list_by_user(self, user_id: UserId) -> List[Membership]:
        query = f"""
            SELECT {self.COLUMNS} FROM {self.schema}.memberships
            WHERE user_id = $1
            ORDER BY joined_at, workspace_id
        """
        async with self.database_service.get_connection() as conn:
            rows = await conn.fetch(query, user_id.value)
        return [_membership_from_row(row) for row in rows]
