"""Version information for neo-authz."""

__version__ = "0.1.0"
