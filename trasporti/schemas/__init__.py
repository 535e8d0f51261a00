from .auth import LoginRequest, MeResponse, TokenResponse, UserCreate, UserInfo, UserRead
from .base import ErrorResponse, PaginatedResponse, PaginationMeta
from .trasporto import SchemaResponse, TrasportoDocument, TrasportoFilters, TrasportoList

__all__ = [
    "ErrorResponse",
    "LoginRequest",
    "MeResponse",
    "PaginatedResponse",
    "PaginationMeta",
    "SchemaResponse",
    "TokenResponse",
    "TrasportoDocument",
    "TrasportoFilters",
    "TrasportoList",
    "UserCreate",
    "UserInfo",
    "UserRead",
]
