"""
Database models package.
"""

from .base import BaseModel, TimestampMixin, BaseModelWithTimestamp
from .schema_registry import SchemaVersion
from .trasporto import Trasporto
from .user import User

__all__ = [
    "BaseModel",
    "BaseModelWithTimestamp",
    "TimestampMixin",
    "SchemaVersion",
    "Trasporto",
    "User",
]
