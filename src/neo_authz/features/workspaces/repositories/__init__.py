"""Workspace and membership repositories."""

from .workspace_repository import AsyncPGWorkspaceRepository, AsyncPGMembershipRepository
from .memory_repository import MemoryWorkspaceRepository, MemoryMembershipRepository

__all__ = [
    "AsyncPGWorkspaceRepository",
    "AsyncPGMembershipRepository",
    "MemoryWorkspaceRepository",
    "MemoryMembershipRepository",
]
