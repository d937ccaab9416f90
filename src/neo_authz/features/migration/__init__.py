"""Migration feature: implicit role access to explicit grants."""

from .entities import MigrationConflict, MigrationDetail, MigrationResult, CancellationToken
from .services import MigrationEngine

__all__ = [
    "MigrationConflict",
    "MigrationDetail",
    "MigrationResult",
    "CancellationToken",
    "MigrationEngine",
]
