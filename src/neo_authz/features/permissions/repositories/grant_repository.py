"""AsyncPG implementation of the permission grant repository.

Writes are single statements keyed by (user_id, workspace_id,
permission_id), so concurrent writers to one key converge on one row.
"""

import logging
from typing import Optional

from ....core.value_objects import UserId, WorkspaceId
from ....infrastructure.database import DatabaseService, store_operation
from ..entities.grant import PermissionGrant, PermissionMap
from ..entities.permission import PermissionId

logger = logging.getLogger(__name__)


def _grant_from_row(row) -> PermissionGrant:
    return PermissionGrant(
        user_id=UserId(row["user_id"]),
        workspace_id=WorkspaceId(row["workspace_id"]),
        permission_id=PermissionId(row["permission_id"]),
        granted=row["granted"],
        granted_by=UserId(row["granted_by"]) if row["granted_by"] else None,
        granted_at=row["granted_at"],
        expires_at=row["expires_at"],
    )


class AsyncPGPermissionGrantRepository:
    """Grant repository backed by the ``permission_grants`` table."""
    
    COLUMNS = "user_id, workspace_id, permission_id, granted, granted_by, granted_at, expires_at"
    
    def __init__(self, database_service: DatabaseService):
        self.database_service = database_service
        self.schema = database_service.schema
    
    def _values(self, grant: PermissionGrant) -> tuple:
        return (
            grant.user_id.value,
            grant.workspace_id.value,
            grant.permission_id.value,
            grant.granted,
            grant.granted_by.value if grant.granted_by else None,
            grant.granted_at,
            grant.expires_at,
        )
    
    @store_operation("get permission grant")
    async def get_grant(
        self,
        user_id: UserId,
        workspace_id: WorkspaceId,
        permission_id: PermissionId
    ) -> Optional[PermissionGrant]:
        query = f"""
            SELECT {self.COLUMNS} FROM {self.schema}.permission_grants
            WHERE user_id = $1 AND workspace_id = $2 AND permission_id = $3
        """
        async with self.database_service.get_connection() as conn:
            row = await conn.fetchrow(query, user_id.value, workspace_id.value, permission_id.value)
        return _grant_from_row(row) if row else None
    
    @store_operation("get user permission grants")
    async def get_user_grants(
        self,
        user_id: UserId,
        workspace_id: WorkspaceId
    ) -> Optional[PermissionMap]:
        query = f"""
            SELECT {self.COLUMNS} FROM {self.schema}.permission_grants
            WHERE user_id = $1 AND workspace_id = $2
            ORDER BY permission_id
        """
        async with self.database_service.get_connection() as conn:
            rows = await conn.fetch(query, user_id.value, workspace_id.value)
        if not rows:
            return None
        return {row["permission_id"]: _grant_from_row(row) for row in rows}
    
    @store_operation("upsert permission grant")
    async def upsert_grant(self, grant: PermissionGrant) -> PermissionGrant:
        query = f"""
            INSERT INTO {self.schema}.permission_grants ({self.COLUMNS})
            VALUES ($1, $2, $3, $4, $5, $6, $7)
            ON CONFLICT (user_id, workspace_id, permission_id) DO UPDATE SET
                granted = EXCLUDED.granted,
                granted_by = EXCLUDED.granted_by,
                granted_at = EXCLUDED.granted_at,
                expires_at = EXCLUDED.expires_at
        """
        async with self.database_service.get_connection() as conn:
            await conn.execute(query, *self._values(grant))
        return grant
    
    @store_operation("insert permission grant")
    async def insert_grant_if_absent(self, grant: PermissionGrant) -> bool:
        query = f"""
            INSERT INTO {self.schema}.permission_grants ({self.COLUMNS})
            VALUES ($1, $2, $3, $4, $5, $6, $7)
            ON CONFLICT (user_id, workspace_id, permission_id) DO NOTHING
        """
        async with self.database_service.get_connection() as conn:
            result = await conn.execute(query, *self._values(grant))
        # Command tag is "INSERT 0 <rows>"
        return result.split()[-1] == "1"
    
    @store_operation("delete user permission grants")
    async def delete_user_grants(self, user_id: UserId, workspace_id: WorkspaceId) -> int:
        query = f"""
            DELETE FROM {self.schema}.permission_grants
            WHERE user_id = $1 AND workspace_id = $2
        """
        async with self.database_service.get_connection() as conn:
            result = await conn.execute(query, user_id.value, workspace_id.value)
        deleted = int(result.split()[-1])
        logger.info(f"Deleted {deleted} grant(s) of user {user_id} in workspace {workspace_id}")
        return deleted
