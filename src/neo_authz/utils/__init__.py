"""Utility helpers for neo-authz."""

from .datetime import utc_now, to_utc, format_iso, parse_iso

__all__ = [
    "utc_now",
    "to_utc",
    "format_iso",
    "parse_iso",
]
