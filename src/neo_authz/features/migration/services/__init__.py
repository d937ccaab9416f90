"""Migration services."""

from .migration_engine import MigrationEngine

__all__ = ["MigrationEngine"]
