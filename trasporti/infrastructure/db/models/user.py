from datetime import datetime
from typing import Optional

from sqlmodel import Field

from .base import BaseModelWithTimestamp
from ....core.enums import UserRole


class User(BaseModelWithTimestamp, table=True):
    """User database model."""

    __tablename__ = "users"

    username: str = Field(
        max_length=50,
        unique=True,
        index=True,
        nullable=False,
        description="Unique username"
    )
    password: str = Field(
        max_length=255,
        nullable=False,
        description="Hashed password"
    )
    role: UserRole = Field(default=UserRole.USER, description="Fixed role")
    last_login: Optional[datetime] = Field(default=None, description="Last login timestamp")
