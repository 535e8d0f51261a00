from .base import BaseRepository
from .schema_repository import SchemaRepository
from .trasporto_repository import TrasportoRepository
from .user_repository import UserRepository

__all__ = [
    "BaseRepository",
    "SchemaRepository",
    "TrasportoRepository",
    "UserRepository",
]
