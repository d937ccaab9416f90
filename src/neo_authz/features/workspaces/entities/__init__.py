"""Workspace and membership entities and protocols."""

from .workspace import Workspace
from .membership import Membership, MembershipCapabilities
from .protocols import WorkspaceRepository, MembershipRepository

__all__ = [
    "Workspace",
    "Membership",
    "MembershipCapabilities",
    "WorkspaceRepository",
    "MembershipRepository",
]
