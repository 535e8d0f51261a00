"""
Base service class providing common functionality for all services.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from sqlmodel import Session

from trasporti.core.exceptions import BadRequestError
from trasporti.core.logging import get_logger


class BaseService(ABC):
    """Base class for all services."""

    def __init__(self, db_session: Optional[Session] = None):
        self.db = db_session
        self.logger = get_logger(self.__class__.__name__)

    def log_operation(self, operation: str, details: Optional[Dict[str, Any]] = None) -> None:
        """Log service operation."""
        log_msg = f"Service operation: {operation}"
        if details:
            log_msg += f" - Details: {details}"
        self.logger.info(log_msg)

    def validate_input(self, data: Dict[str, Any], required_fields: list) -> None:
        """Validate input data."""
        missing_fields = [field for field in required_fields if not data.get(field)]
        if missing_fields:
            raise BadRequestError(
                f"Missing required fields: {', '.join(missing_fields)}",
                details={"fields": missing_fields},
            )

    @abstractmethod
    def get_service_name(self) -> str:
        """Return the service name."""
        pass
