"""Identifier value objects."""

from .identifiers import UserId, WorkspaceId

__all__ = ["UserId", "WorkspaceId"]
