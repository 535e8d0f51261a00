from datetime import date, datetime
from typing import Any, Dict

from sqlmodel import Field
from sqlalchemy import Column, JSON

from .base import BaseModelWithTimestamp


def encode_value(value: Any) -> Any:
    """Convert a record value into its JSON storage form."""
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


def encode_document(values: Dict[str, Any]) -> Dict[str, Any]:
    return {key: encode_value(value) for key, value in values.items()}


class Trasporto(BaseModelWithTimestamp, table=True):
    """
    One transport record.

    The record fields live in ``data``; their names and types are described
    by the latest registered schema version.
    """

    __tablename__ = "trasporti"

    data: Dict[str, Any] = Field(
        default_factory=dict,
        sa_column=Column(JSON, nullable=False),
        description="Record fields keyed by normalized field name"
    )

    def to_document(self) -> Dict[str, Any]:
        """Flat representation returned by the API."""
        document = {"id": str(self.id)}
        document.update(self.data or {})
        document["created_at"] = encode_value(self.created_at)
        document["updated_at"] = encode_value(self.updated_at)
        return document
