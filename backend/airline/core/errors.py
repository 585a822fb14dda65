"""
Typed application errors.

Every business-rule failure is raised as an AppError subclass carrying an
HTTP status and a machine-readable code. The API layer renders them into
the uniform response envelope (see airline.api.errors).
"""

from typing import Any, Optional


class AppError(Exception):
    status_code: int = 500
    code: str = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Any = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code
        self.details = details

    def __repr__(self) -> str:
        return f"<{type(self).__name__}(code={self.code}, status={self.status_code}, message={self.message!r})>"


class ValidationError(AppError):
    status_code = 400
    code = "VALIDATION_ERROR"


class BadRequestError(AppError):
    status_code = 400
    code = "BAD_REQUEST"


class AuthenticationError(AppError):
    status_code = 401
    code = "AUTHENTICATION_ERROR"


class PaymentError(AppError):
    status_code = 402
    code = "PAYMENT_ERROR"


class AuthorizationError(AppError):
    status_code = 403
    code = "AUTHORIZATION_ERROR"


class NotFoundError(AppError):
    status_code = 404
    code = "NOT_FOUND"

    def __init__(self, resource: str, code: Optional[str] = None, details: Any = None):
        super().__init__(f"{resource} not found", code=code, details=details)
        self.resource = resource


class ConflictError(AppError):
    status_code = 409
    code = "CONFLICT_ERROR"


class RateLimitError(AppError):
    status_code = 429
    code = "RATE_LIMIT_EXCEEDED"

