"""
Database infrastructure: store handle, models and repositories.
"""

from .connection import DatabaseManager

__all__ = ["DatabaseManager"]
