"""Runtime settings for the authorization engine.

Values are read from the environment (``AUTHZ_`` prefix) or a ``.env``
file through pydantic-settings.
"""

from functools import lru_cache
from typing import List, Optional

from pydantic import Field, PostgresDsn, RedisDsn, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import CacheTTL, DatabaseSchemas


class AuthzSettings(BaseSettings):
    """Authorization engine settings."""
    
    model_config = SettingsConfigDict(
        env_prefix="AUTHZ_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )
    
    # Database Configuration
    database_url: Optional[PostgresDsn] = Field(default=None, description="PostgreSQL DSN")
    db_schema: str = Field(default=DatabaseSchemas.AUTHZ, description="Schema holding authz tables")
    db_pool_min_size: int = Field(default=2, ge=1)
    db_pool_max_size: int = Field(default=10, ge=1)
    db_command_timeout: float = Field(default=10.0, gt=0)
    
    # Cache Configuration
    redis_url: Optional[RedisDsn] = Field(default=None, description="Redis URL for the grant cache")
    cache_enabled: bool = Field(default=True)
    cache_ttl_seconds: int = Field(default=CacheTTL.GRANTS_SHORT, ge=1)
    
    # Retry Configuration
    retry_max_attempts: int = Field(default=3, ge=0)
    retry_initial_delay_ms: int = Field(default=50, ge=0)
    retry_max_delay_ms: int = Field(default=2000, ge=0)
    
    # Migration Configuration
    migration_concurrency: int = Field(default=10, ge=1)
    
    # Principals allowed to bypass workspace authority checks (JSON list)
    super_admin_ids: List[str] = Field(default_factory=list)
    
    @field_validator("db_schema")
    @classmethod
    def validate_schema_name(cls, v: str) -> str:
        """Only plain identifiers may be interpolated into SQL."""
        if not v.replace("_", "").isalnum():
            raise ValueError(f"Invalid schema name: {v}")
        return v


@lru_cache()
def get_settings() -> AuthzSettings:
    """Get cached settings instance."""
    return AuthzSettings()
