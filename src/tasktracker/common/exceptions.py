"""Common exceptions."""

from fastapi import status

from tasktracker.common.app_error import AppError
from tasktracker.config.errors import ErrorCode

__all__ = ["NotFoundError", "ServiceUnavailableError"]


class NotFoundError(AppError):
    """Exception raised when something is not found."""

    error_code = ErrorCode.NOT_FOUND
    message = "Resource not found"
    status_code = status.HTTP_404_NOT_FOUND


class ServiceUnavailableError(AppError):
    """Exception raised when a backing service cannot be reached."""

    error_code = ErrorCode.SERVICE_UNAVAILABLE
    message = "Service temporarily unavailable"
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
