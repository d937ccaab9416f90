"""Explicit permission grants and authorization decisions."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional, Union

from ....config.constants import PermissionSource, ReasonCode, WorkspaceRole
from ....core.value_objects import UserId, WorkspaceId
from ....utils.datetime import format_iso, parse_iso, to_utc, utc_now
from .permission import PermissionId


@dataclass
class PermissionGrant:
    """Explicit grant record keyed by (user, workspace, permission).
    
    An expired grant is kept as-is; readers treat it as not granted.
    """
    
    user_id: UserId
    workspace_id: WorkspaceId
    permission_id: PermissionId
    granted: bool
    granted_by: Optional[UserId] = None
    granted_at: datetime = field(default_factory=utc_now)
    expires_at: Optional[datetime] = None
    
    def __post_init__(self):
        self.granted_at = to_utc(self.granted_at)
        self.expires_at = to_utc(self.expires_at)
    
    @property
    def key(self) -> tuple:
        return (self.user_id.value, self.workspace_id.value, self.permission_id.value)
    
    def is_expired(self, now: Optional[datetime] = None) -> bool:
        """Check if the grant has passed its expiry."""
        if self.expires_at is None:
            return False
        return self.expires_at <= (to_utc(now) if now else utc_now())
    
    def is_effective(self, now: Optional[datetime] = None) -> bool:
        """Granted and not expired."""
        return self.granted and not self.is_expired(now)
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "user_id": self.user_id.value,
            "workspace_id": self.workspace_id.value,
            "permission_id": self.permission_id.value,
            "granted": self.granted,
            "granted_by": self.granted_by.value if self.granted_by else None,
            "granted_at": format_iso(self.granted_at),
            "expires_at": format_iso(self.expires_at),
        }
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PermissionGrant":
        return cls(
            user_id=UserId(data["user_id"]),
            workspace_id=WorkspaceId(data["workspace_id"]),
            permission_id=PermissionId(data["permission_id"]),
            granted=bool(data["granted"]),
            granted_by=UserId(data["granted_by"]) if data.get("granted_by") else None,
            granted_at=parse_iso(data.get("granted_at")) or utc_now(),
            expires_at=parse_iso(data.get("expires_at")),
        )


# Explicit grants of one user in one workspace, keyed by permission id string
PermissionMap = Dict[str, PermissionGrant]


@dataclass(frozen=True)
class PermissionUpdate:
    """One entry of an update_permissions call.
    
    ``granted_by`` defaults to the acting user and ``expires_at`` to the
    batch expiry when left unset.
    """
    
    granted: bool
    granted_by: Optional[UserId] = None
    expires_at: Optional[datetime] = None
    
    @classmethod
    def coerce(cls, value: Union[bool, "PermissionUpdate"]) -> "PermissionUpdate":
        if isinstance(value, PermissionUpdate):
            return value
        return cls(granted=bool(value))


def count_granted(permissions: Optional[PermissionMap], now: Optional[datetime] = None) -> int:
    """Count entries that are granted and not expired."""
    if not permissions:
        return 0
    return sum(1 for grant in permissions.values() if grant.is_effective(now))


@dataclass(frozen=True)
class PermissionDecision:
    """Outcome of an authorization check with the reason it was reached."""
    
    allowed: bool
    reason: ReasonCode
    permission_id: str
    role: Optional[WorkspaceRole] = None
    
    def __bool__(self) -> bool:
        return self.allowed


@dataclass
class EffectivePermissions:
    """Explicit grants visible in a workspace, with where they came from."""
    
    user_id: UserId
    workspace_id: WorkspaceId
    permissions: PermissionMap = field(default_factory=dict)
    source: PermissionSource = PermissionSource.NONE
    inherited_from: Optional[WorkspaceId] = None
    
    def granted_count(self, now: Optional[datetime] = None) -> int:
        return count_granted(self.permissions, now)
