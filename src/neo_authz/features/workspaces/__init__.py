"""Workspace feature: the main/sub workspace tree and memberships.

Provides workspace and membership entities, asyncpg and in-memory
repositories, and the services that maintain inherited sub-workspace access.
"""

# Entities
from .entities import (
    Workspace,
    Membership,
    MembershipCapabilities,
    WorkspaceRepository,
    MembershipRepository,
)

# Repositories
from .repositories import (
    AsyncPGWorkspaceRepository,
    AsyncPGMembershipRepository,
    MemoryWorkspaceRepository,
    MemoryMembershipRepository,
)

# Services
from .services import WorkspaceGraph, InheritanceService, MembershipRegistry

__all__ = [
    # Entities
    "Workspace",
    "Membership",
    "MembershipCapabilities",
    
    # Protocols
    "WorkspaceRepository",
    "MembershipRepository",
    
    # Repositories
    "AsyncPGWorkspaceRepository",
    "AsyncPGMembershipRepository",
    "MemoryWorkspaceRepository",
    "MemoryMembershipRepository",
    
    # Services
    "WorkspaceGraph",
    "InheritanceService",
    "MembershipRegistry",
]
