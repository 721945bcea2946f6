"""Versioned schema updates applied on top of the base schema."""

from .runner import MigrationRunner

__all__ = ["MigrationRunner"]
