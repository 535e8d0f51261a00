from typing import Any, Dict, Optional, Union

from .enums import ImportStage


class AppException(Exception):
    """
    Base class of the errors rendered as ``{"error": {type, message, details}}``.

    Subclasses set ``status_code`` and ``error_code``; keyword arguments with a
    value are copied into ``details``.
    """

    status_code: int = 400
    error_code: str = "APP_ERROR"
    default_message: str = "Application error"

    def __init__(self, message: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None,
                 **context: Any):
        self.message = message or self.default_message
        self.details = dict(details or {})
        for key, value in context.items():
            setattr(self, key, value)
            if value is not None:
                self.details[key] = value
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"{self.status_code}: {self.message}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message='{self.message}', status_code={self.status_code})"


class BadRequestError(AppException):
    """Malformed input, e.g. an invalid plate or an unparseable date."""
    status_code = 400
    error_code = "BAD_REQUEST"
    default_message = "Bad request"

    def __init__(self, message: Optional[str] = None, field: Optional[str] = None,
                 value: Optional[Any] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details, field=field, value=value)


class UnauthorizedError(AppException):
    status_code = 401
    error_code = "UNAUTHORIZED"
    default_message = "Authentication required"


class ForbiddenError(AppException):
    """Invalid or expired token, or a role that is not allowed."""
    status_code = 403
    error_code = "FORBIDDEN"
    default_message = "Access forbidden"

    def __init__(self, message: Optional[str] = None, action: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details, action=action)


class NotFoundError(AppException):
    status_code = 404
    error_code = "NOT_FOUND"

    def __init__(self, resource: str = "Resource",
                 resource_id: Optional[Union[str, int]] = None,
                 message: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        if not message:
            message = f"{resource} with ID '{resource_id}' not found" if resource_id else f"{resource} not found"
        super().__init__(message, details, resource=resource, resource_id=resource_id)


class ConflictError(AppException):
    status_code = 409
    error_code = "CONFLICT"
    default_message = "Conflict with current state"

    def __init__(self, message: Optional[str] = None, resource: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details, resource=resource)


class InternalServerError(AppException):
    status_code = 500
    error_code = "INTERNAL_SERVER_ERROR"
    default_message = "Internal server error"


class DatabaseError(AppException):
    """Store failure; the message never reaches HTTP clients."""
    status_code = 500
    error_code = "DATABASE_ERROR"
    default_message = "Database error occurred"

    def __init__(self, message: Optional[str] = None, operation: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details, operation=operation)


class ImportAbortedError(AppException):
    """Fatal failure of the Excel import at a given stage."""
    status_code = 500
    error_code = "IMPORT_ABORTED"
    default_message = "Import aborted"

    def __init__(self, message: Optional[str] = None, stage: Optional[ImportStage] = None,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details, stage=stage)
        if stage is not None:
            self.details["stage"] = stage.value
