"""Access services."""

from .workspace_aggregator import AccessibleWorkspaceAggregator

__all__ = ["AccessibleWorkspaceAggregator"]
