"""Migration result entities."""

import asyncio
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ....config.constants import MigrationStatus, WorkspaceRole
from ....core.value_objects import UserId, WorkspaceId


@dataclass(frozen=True)
class MigrationConflict:
    """An existing explicit grant that contradicts the role default.
    
    Migration never overwrites it; the entry is reported for manual review.
    """
    
    permission_id: str
    existing_granted: bool
    default_granted: bool
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "permission_id": self.permission_id,
            "existing_granted": self.existing_granted,
            "default_granted": self.default_granted,
        }


@dataclass
class MigrationDetail:
    """Outcome of migrating one membership."""
    
    user_id: UserId
    workspace_id: WorkspaceId
    role: WorkspaceRole
    status: str = MigrationStatus.SUCCESS
    written: int = 0
    skipped: int = 0
    conflicts: List[MigrationConflict] = field(default_factory=list)
    
    @property
    def succeeded(self) -> bool:
        return self.status == MigrationStatus.SUCCESS
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "user_id": self.user_id.value,
            "workspace_id": self.workspace_id.value,
            "role": self.role.value,
            "status": self.status,
            "written": self.written,
            "skipped": self.skipped,
            "conflicts": [conflict.to_dict() for conflict in self.conflicts],
        }


@dataclass
class MigrationResult:
    """Aggregated result of a migration run.
    
    ``success_count`` counts memberships migrated without error. Per-user
    failures are collected in ``errors`` and never abort the run.
    """
    
    success_count: int = 0
    errors: List[str] = field(default_factory=list)
    details: List[MigrationDetail] = field(default_factory=list)
    cancelled: bool = False
    
    @property
    def success(self) -> bool:
        return not self.errors and not self.cancelled
    
    @property
    def written_count(self) -> int:
        return sum(detail.written for detail in self.details)
    
    @property
    def conflict_count(self) -> int:
        return sum(len(detail.conflicts) for detail in self.details)
    
    def add_detail(self, detail: MigrationDetail, error: Optional[str] = None) -> None:
        self.details.append(detail)
        if error is None:
            self.success_count += 1
        else:
            self.errors.append(error)
    
    def merge(self, other: "MigrationResult") -> "MigrationResult":
        self.success_count += other.success_count
        self.errors.extend(other.errors)
        self.details.extend(other.details)
        self.cancelled = self.cancelled or other.cancelled
        return self
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "success_count": self.success_count,
            "written_count": self.written_count,
            "conflict_count": self.conflict_count,
            "cancelled": self.cancelled,
            "errors": list(self.errors),
            "details": [detail.to_dict() for detail in self.details],
        }


class CancellationToken:
    """Cooperative cancellation flag for long-running migrations."""
    
    def __init__(self):
        self._event = asyncio.Event()
    
    def cancel(self) -> None:
        self._event.set()
    
    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()
