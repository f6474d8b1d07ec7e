from typing import Optional


class AppError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None, field: Optional[str] = None):
        self.message = message or self.default_message
        self.field = field
        super().__init__(self.message)

    def to_dict(self) -> dict:
        body = {"message": self.message}
        if self.field:
            body["field"] = self.field
        return body


class ValidationError(AppError):
    status_code = 400
    default_message = "Validation failed"


class AuthenticationError(AppError):
    status_code = 401
    default_message = "Unauthorized"


class AuthorizationError(AppError):
    status_code = 403
    default_message = "Admin access required"


class NotFoundError(AppError):
    status_code = 404
    default_message = "Not found"


class ConflictError(AppError):
    status_code = 409
    default_message = "Conflict"


class InvalidTransitionError(ConflictError):
    def __init__(self, current: str, requested: str):
        self.current = current
        self.requested = requested
        super().__init__(
            f"Cannot move order from '{current}' to '{requested}'", field="status"
        )


class InternalError(AppError):
    status_code = 500
