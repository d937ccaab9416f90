"""Workspace services."""

from .workspace_graph import WorkspaceGraph
from .inheritance_service import InheritanceService
from .membership_registry import MembershipRegistry

__all__ = ["WorkspaceGraph", "InheritanceService", "MembershipRegistry"]
