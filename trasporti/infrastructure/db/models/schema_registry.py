from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlmodel import SQLModel, Field
from sqlalchemy import Column, DateTime, JSON

from .base import utcnow


class SchemaVersion(SQLModel, table=True):
    """Versioned schema description produced by an import run."""

    __tablename__ = "schema_versions"

    version: Optional[int] = Field(default=None, primary_key=True)
    entity: str = Field(max_length=100, index=True, description="Name of the described entity")
    fields: List[Dict[str, Any]] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False),
        description="Ordered column descriptors"
    )
    annotations: List[Dict[str, Any]] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False),
        description="Implicit annotation fields"
    )
    source: Optional[str] = Field(default=None, description="Workbook the schema was inferred from")
    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
