"""Access feature: workspaces reachable by a user across tenants."""

from .entities import AccessibleWorkspaces
from .services import AccessibleWorkspaceAggregator

__all__ = ["AccessibleWorkspaces", "AccessibleWorkspaceAggregator"]
