from typing import Any, Optional


class AppError(Exception):
    """Base class for errors raised by the service layer"""
    default_code = "application_error"
    default_http_status = 500

    def __init__(self, message: str, code: Optional[str] = None, http_status: Optional[int] = None):
        self.message = message
        self.code = code or self.default_code
        self.http_status = int(http_status or self.default_http_status)
        super().__init__(message)


class NotFoundError(AppError):
    """A referenced entity does not exist"""
    default_code = "not_found"
    default_http_status = 404

    def __init__(self, entity: str, entity_id: Any, field: str = "ID"):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} with {field} {entity_id} not found")


class ValidationError(AppError):
    default_code = "validation_error"
    default_http_status = 400


class ConflictError(AppError):
    default_code = "conflict"
    default_http_status = 409
