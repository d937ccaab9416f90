"""Value objects for identifiers in neo-authz.

Principal and workspace ids are opaque strings supplied by the host
application; these wrappers only guarantee they are non-empty.
"""

from dataclasses import dataclass

from ..exceptions import ValidationError


@dataclass(frozen=True)
class UserId:
    """User (principal) identifier value object."""
    value: str
    
    def __post_init__(self):
        if not isinstance(self.value, str) or not self.value.strip():
            raise ValidationError(f"UserId must be a non-empty string, got: {self.value!r}")
    
    def __str__(self) -> str:
        return self.value
    
    def __repr__(self) -> str:
        return f"UserId(value={self.value!r})"


@dataclass(frozen=True)
class WorkspaceId:
    """Workspace identifier value object."""
    value: str
    
    def __post_init__(self):
        if not isinstance(self.value, str) or not self.value.strip():
            raise ValidationError(f"WorkspaceId must be a non-empty string, got: {self.value!r}")
    
    def __str__(self) -> str:
        return self.value
    
    def __repr__(self) -> str:
        return f"WorkspaceId(value={self.value!r})"
