"""Generic application errors."""

from fastapi import status

from tasktracker.config.errors import ErrorCode

__all__ = ["AppError"]


class AppError(Exception):
    """Base exception for application errors.

    Attributes:
        error_code: Code returned in the JSON error body.
        message: Human-readable description.
        status_code: HTTP status the error maps to.
        retryable: Whether repeating the failed operation can succeed later.
    """

    error_code = ErrorCode.SERVER_ERROR
    message = "An unexpected error occurred"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    retryable = True

    def __init__(self, message: str | None = None) -> None:
        """Initialize with optional custom message."""
        if message:
            self.message = message
        super().__init__(self.message)
