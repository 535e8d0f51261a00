from datetime import datetime, timezone
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import SQLModel, Field
from sqlalchemy import DateTime


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BaseModel(SQLModel):
    """
    Base model with common fields for all database models.
    """

    id: UUID = Field(
        default_factory=uuid4,
        primary_key=True,
        index=True,
        nullable=False,
        description="Unique identifier"
    )


class TimestampMixin(SQLModel):
    """
    Mixin for models that need timestamp fields.
    """

    created_at: datetime = Field(
        default_factory=utcnow,
        sa_type=DateTime(timezone=True),
        nullable=False,
        index=True,
        description="Record creation timestamp"
    )

    updated_at: Optional[datetime] = Field(
        default_factory=utcnow,
        sa_type=DateTime(timezone=True),
        description="Record last update timestamp"
    )

    def touch(self) -> None:
        self.updated_at = utcnow()


class BaseModelWithTimestamp(BaseModel, TimestampMixin):
    """
    Base model with ID and timestamp fields.
    """
    pass
