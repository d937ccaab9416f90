"""Tests for settings, logging configuration and exception mapping."""

import pytest
from pydantic import ValidationError as PydanticValidationError

from neo_authz.config import AuthzSettings, LoggingConfig
from neo_authz.core.exceptions import (
    CacheError,
    HierarchyError,
    InvalidPermissionIdError,
    MembershipExistsError,
    NeoAuthzError,
    PermissionDeniedError,
    TransientStoreError,
    WorkspaceNotFoundError,
    create_error_response,
    get_http_status_code,
)


class TestAuthzSettings:
    """Test environment-driven settings."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("AUTHZ_DATABASE_URL", raising=False)
        settings = AuthzSettings(_env_file=None)

        assert settings.database_url is None
        assert settings.db_schema == "authz"
        assert settings.cache_enabled is True
        assert settings.migration_concurrency == 10
        assert settings.super_admin_ids == []

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("AUTHZ_MIGRATION_CONCURRENCY", "4")
        monkeypatch.setenv("AUTHZ_SUPER_ADMIN_IDS", '["root", "ops"]')
        monkeypatch.setenv("AUTHZ_CACHE_ENABLED", "false")

        settings = AuthzSettings(_env_file=None)

        assert settings.migration_concurrency == 4
        assert settings.super_admin_ids == ["root", "ops"]
        assert settings.cache_enabled is False

    @pytest.mark.parametrize("schema", ["authz; DROP TABLE x", "bad-name", "a b"])
    def test_schema_name_must_be_identifier(self, schema):
        with pytest.raises(PydanticValidationError):
            AuthzSettings(_env_file=None, db_schema=schema)

    def test_concurrency_must_be_positive(self):
        with pytest.raises(PydanticValidationError):
            AuthzSettings(_env_file=None, migration_concurrency=0)


class TestLoggingConfig:
    """Test dictConfig generation."""

    @pytest.fixture(autouse=True)
    def clean_env(self, monkeypatch):
        for name in ("LOG_VERBOSITY", "LOG_LEVEL", "LOG_FORMAT", "ENABLE_SQL_LOGGING"):
            monkeypatch.delenv(name, raising=False)

    def test_default_level_is_warning(self):
        config = LoggingConfig.build_config()

        assert config["root"]["level"] == "WARNING"
        assert config["loggers"]["asyncpg"]["level"] == "WARNING"

    def test_verbosity_maps_to_level(self, monkeypatch):
        monkeypatch.setenv("LOG_VERBOSITY", "verbose")

        assert LoggingConfig.build_config()["root"]["level"] == "INFO"

    def test_explicit_level_wins(self, monkeypatch):
        monkeypatch.setenv("LOG_VERBOSITY", "QUIET")
        monkeypatch.setenv("LOG_LEVEL", "debug")

        config = LoggingConfig.build_config()

        assert config["root"]["level"] == "DEBUG"
        resolver_logger = "neo_authz.features.permissions.services.authorization_resolver"
        assert config["loggers"][resolver_logger]["level"] == "DEBUG"

    def test_json_format_and_sql_logging(self, monkeypatch):
        monkeypatch.setenv("LOG_FORMAT", "json")
        monkeypatch.setenv("ENABLE_SQL_LOGGING", "true")

        config = LoggingConfig.build_config()

        assert config["formatters"]["default"]["format"].startswith('{"time"')
        assert "asyncpg" not in config["loggers"]


class TestExceptionMapping:
    """Test HTTP status codes and error bodies."""

    @pytest.mark.parametrize(
        "error, status",
        [
            (PermissionDeniedError("no"), 403),
            (WorkspaceNotFoundError("missing"), 404),
            (MembershipExistsError("dup"), 409),
            (InvalidPermissionIdError("bad"), 422),
            (HierarchyError("deep"), 422),
            (CacheError("cache"), 500),
            (TransientStoreError("retry"), 503),
            (NeoAuthzError("generic"), 500),
            (ValueError("plain"), 500),
        ],
    )
    def test_status_codes(self, error, status):
        assert get_http_status_code(error) == status

    def test_error_response(self):
        error = PermissionDeniedError("Not allowed", details={"user_id": "u-1"})

        response = create_error_response(error)

        assert response == {
            "error": {
                "code": "PermissionDeniedError",
                "message": "Not allowed",
                "details": {"user_id": "u-1"},
                "type": "PermissionDeniedError",
            }
        }
