"""Access entities."""

from .accessible_workspaces import AccessibleWorkspaces

__all__ = ["AccessibleWorkspaces"]
