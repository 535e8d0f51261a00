from .auth_service import AuthService
from .base import BaseService
from .import_service import ImportService, ImportSummary
from .trasporto_service import TrasportoService, validate_payload, validate_plate

__all__ = [
    "AuthService",
    "BaseService",
    "ImportService",
    "ImportSummary",
    "TrasportoService",
    "validate_payload",
    "validate_plate",
]
