"""
Domain Exceptions

Error taxonomy shared by the services and mapped to HTTP responses in
app.api.errors.
"""

from fastapi import status


class AppError(Exception):
    """Base class for errors that are reported to API clients."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.message
        super().__init__(self.message)


class ValidationError(AppError):
    """Malformed input, rejected before touching storage."""

    status_code = status.HTTP_400_BAD_REQUEST
    message = "invalid request"


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "not found"


class AlreadyExists(AppError):
    status_code = status.HTTP_409_CONFLICT
    message = "user already exists"


class UsernameConflict(AppError):
    status_code = status.HTTP_409_CONFLICT
    message = "username is already taken"


class InvalidCode(AppError):
    """
    No active OTP matched.

    Covers missing, expired and mismatched codes alike so callers cannot
    tell which one happened.
    """

    status_code = status.HTTP_400_BAD_REQUEST
    message = "invalid or expired OTP"


class Unauthorized(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "invalid or expired token"


class StorageError(AppError):
    """
    Underlying durability fault.

    The message is kept for logs only; clients always receive the generic
    internal server error text.
    """

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "storage failure"


class CreationFailed(StorageError):
    message = "account creation failed"
