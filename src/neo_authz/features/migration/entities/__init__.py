"""Migration entities."""

from .migration_result import MigrationConflict, MigrationDetail, MigrationResult, CancellationToken

__all__ = ["MigrationConflict", "MigrationDetail", "MigrationResult", "CancellationToken"]
