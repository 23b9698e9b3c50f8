from typing import Any, Optional


class AppError(Exception):
    """Base class for errors that are rendered as ``{"error", "details"}`` bodies."""

    status_code = 500
    default_message = "Something went wrong"

    def __init__(self, message: Optional[str] = None, details: Any = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = 400
    default_message = "Invalid request"


class AuthError(AppError):
    status_code = 401
    default_message = "Authentication required"


class InvalidCredentials(AuthError):
    default_message = "Invalid credentials"


class TokenMissing(AuthError):
    default_message = "Access token required"


class TokenInvalid(AuthError):
    status_code = 403
    default_message = "Invalid or expired token"


class PermissionDenied(AuthError):
    status_code = 403
    default_message = "Admin access required"


class NotFoundError(AppError):
    status_code = 404
    default_message = "Not found"


class ConflictError(AppError):
    status_code = 400
    default_message = "Resource already exists"


class ConcurrentUpdateError(ConflictError):
    status_code = 409
    default_message = "Trip was modified by another request, please retry"


class InternalError(AppError):
    status_code = 500
    default_message = "Internal server error"
