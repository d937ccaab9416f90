"""Permission identifier and catalog definition entities.

Permission ids are dot-namespaced ``<category>.<action>`` strings drawn from
a closed catalog. PermissionId validates the shape, the catalog validates
membership.
"""

from dataclasses import dataclass, field
from typing import Any, Dict

from ....core.exceptions import InvalidPermissionIdError


@dataclass(frozen=True)
class PermissionId:
    """Immutable value object for a permission identifier."""
    
    value: str
    
    def __post_init__(self):
        """Validate permission id format: category.action"""
        if not isinstance(self.value, str) or "." not in self.value:
            raise InvalidPermissionIdError(
                f"Permission id must be in format 'category.action', got: {self.value!r}"
            )
        
        parts = self.value.split(".")
        if len(parts) != 2:
            raise InvalidPermissionIdError(f"Permission id must have exactly one dot, got: {self.value}")
        
        category, action = parts
        if not category or not action:
            raise InvalidPermissionIdError(f"Both category and action must be non-empty, got: {self.value}")
    
    @property
    def category(self) -> str:
        """Extract category part from permission id."""
        return self.value.split(".")[0]
    
    @property
    def action(self) -> str:
        """Extract action part from permission id."""
        return self.value.split(".")[1]
    
    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class PermissionDefinition:
    """Catalog entry describing a permission."""
    
    id: PermissionId
    name: str
    description: str
    feature: str
    is_dangerous: bool = False
    
    @property
    def category(self) -> str:
        return self.id.category
    
    @property
    def action(self) -> str:
        return self.id.action
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for API responses."""
        return {
            "id": self.id.value,
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "action": self.action,
            "feature": self.feature,
            "is_dangerous": self.is_dangerous,
        }


@dataclass(frozen=True)
class PermissionCategory:
    """A group of catalogued permissions sharing a category prefix."""
    
    name: str
    feature: str
    permissions: tuple = field(default_factory=tuple)
