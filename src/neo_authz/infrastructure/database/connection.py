"""AsyncPG connection pool management for the authorization store."""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional

import asyncpg

from ...config.settings import AuthzSettings
from ...core.exceptions import DatabaseError
from .error_handling import translate_store_error
from .schema import get_schema_statements

logger = logging.getLogger(__name__)


class DatabaseService:
    """Lazily created asyncpg pool bound to the authz schema."""
    
    def __init__(self, settings: AuthzSettings, pool: Optional[asyncpg.Pool] = None):
        self.settings = settings
        self.schema = settings.db_schema
        self._pool = pool
        self._lock = asyncio.Lock()
    
    async def _create_pool(self) -> asyncpg.Pool:
        if self.settings.database_url is None:
            raise DatabaseError("AUTHZ_DATABASE_URL is not configured")
        
        try:
            pool = await asyncpg.create_pool(
                dsn=str(self.settings.database_url),
                min_size=self.settings.db_pool_min_size,
                max_size=self.settings.db_pool_max_size,
                command_timeout=self.settings.db_command_timeout,
            )
        except Exception as e:
            logger.error(f"Failed to create authz connection pool: {e}")
            raise translate_store_error("create connection pool", e) from e
        
        logger.info(
            f"Created authz connection pool: min={self.settings.db_pool_min_size}, "
            f"max={self.settings.db_pool_max_size}"
        )
        return pool
    
    async def _ensure_pool(self) -> asyncpg.Pool:
        if self._pool is None:
            async with self._lock:
                if self._pool is None:
                    self._pool = await self._create_pool()
        return self._pool
    
    @asynccontextmanager
    async def get_connection(self):
        """Get database connection with automatic release."""
        pool = await self._ensure_pool()
        async with pool.acquire() as connection:
            yield connection
    
    async def ensure_schema(self) -> None:
        """Create the authz schema and tables if they do not exist."""
        async with self.get_connection() as conn:
            async with conn.transaction():
                for statement in get_schema_statements(self.schema):
                    await conn.execute(statement)
        logger.info(f"Ensured authz schema '{self.schema}'")
    
    async def close(self) -> None:
        if self._pool is not None:
            await self._pool.close()
            self._pool = None
