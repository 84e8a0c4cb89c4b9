"""CLI commands for finddupfiles."""

from . import scan, status

__all__ = ["scan", "status"]
