"""Text constants for consistent error handling."""

from enum import StrEnum

__all__ = ["ErrorCode", "ErrorNames"]


class ErrorCode(StrEnum):
    """Error codes for standardized error handling."""

    # General errors
    SERVER_ERROR = "SERVER_ERROR"
    NOT_FOUND = "NOT_FOUND"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    INVALID_REQUEST = "INVALID_REQUEST"

    # Task errors
    INVALID_STATUS = "INVALID_STATUS"
    STORAGE_ERROR = "STORAGE_ERROR"

    # Queue errors
    PUBLISH_FAILED = "PUBLISH_FAILED"
    PUBLISH_TIMEOUT = "PUBLISH_TIMEOUT"
    CHANNEL_READ_FAILED = "CHANNEL_READ_FAILED"
    CHANNEL_CLOSED = "CHANNEL_CLOSED"


class ErrorNames(StrEnum):
    """Error names for standardized error handling."""

    INTERNAL_SERVER_ERROR = "Internal server error"
    QUEUE_UNAVAILABLE_WARNING = (
        "Task was created but could not be queued for processing"
    )
