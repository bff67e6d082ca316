"""
Service Errors

Typed errors raised by module services. Each carries a stable error code and
HTTP status; the application's exception handler renders them as
{"detail": {"error": code, "message": message}}.
"""


class ServiceError(Exception):
    """Base exception for service errors."""

    def __init__(self, message: str, error_code: str, status_code: int = 400):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        super().__init__(message)


class NotFoundError(ServiceError):
    """Raised when a referenced entity does not exist."""

    def __init__(self, message: str, error_code: str = "NOT_FOUND"):
        super().__init__(message=message, error_code=error_code, status_code=404)


class ConflictError(ServiceError):
    """Raised on uniqueness violations."""

    def __init__(self, message: str, error_code: str = "CONFLICT"):
        super().__init__(message=message, error_code=error_code, status_code=409)


class UnauthorizedError(ServiceError):
    """Raised when a credential is missing, invalid or expired."""

    def __init__(self, message: str, error_code: str = "UNAUTHORIZED"):
        super().__init__(message=message, error_code=error_code, status_code=401)


class ForbiddenError(ServiceError):
    """Raised when the caller's role does not allow the operation."""

    def __init__(self, message: str, error_code: str = "FORBIDDEN"):
        super().__init__(message=message, error_code=error_code, status_code=403)


class UnprocessableError(ServiceError):
    """Raised for semantically invalid operations (wrong password, bad code)."""

    def __init__(self, message: str, error_code: str = "UNPROCESSABLE"):
        super().__init__(message=message, error_code=error_code, status_code=422)


__all__ = [
    "ServiceError",
    "NotFoundError",
    "ConflictError",
    "UnauthorizedError",
    "ForbiddenError",
    "UnprocessableError",
]
