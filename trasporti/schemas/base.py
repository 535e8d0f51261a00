from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar('T')


class PaginationMeta(BaseModel):
    total: int = Field(ge=0)
    page: int = Field(ge=1, description="Current page number")
    limit: int = Field(ge=1, description="Number of items per page")
    pages: int = Field(ge=0, description="Total number of pages")


class PaginatedResponse(BaseModel, Generic[T]):
    """Paginated response schema."""
    meta: PaginationMeta
    data: List[T]


class ErrorBody(BaseModel):
    type: str
    message: str
    details: Optional[Dict[str, Any]] = None


class ErrorResponse(BaseModel):
    """Error response schema."""
    error: ErrorBody
