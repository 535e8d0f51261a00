"""
Request and response schemas for transport records.

Record bodies are free-form mappings: the accepted fields and their types
come from the registered schema descriptor, not from a static model.
"""

from datetime import date
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .base import PaginatedResponse

TrasportoDocument = Dict[str, Any]


class TrasportoFilters(BaseModel):
    """Query filters of the list endpoint."""
    cliente: Optional[str] = None
    targa: Optional[str] = None
    autista: Optional[str] = Field(default=None, description="Load or unload driver")
    regione: Optional[str] = None
    data_from: Optional[date] = None
    data_to: Optional[date] = None
    q: Optional[str] = Field(default=None, description="Free text over the main text fields")

    def active(self) -> Dict[str, Any]:
        """Filters that carry a value."""
        return {
            key: value
            for key, value in self.model_dump().items()
            if value is not None and value != ""
        }


class TrasportoList(PaginatedResponse[TrasportoDocument]):
    pass


class FieldDescription(BaseModel):
    header: Optional[str] = None
    field: str
    type: str
    default: Optional[Any] = None


class SchemaResponse(BaseModel):
    entity: str
    version: Optional[int] = None
    fields: List[FieldDescription]
    annotations: List[FieldDescription]
    timestamps: bool = True

    model_config = ConfigDict(extra="ignore")
