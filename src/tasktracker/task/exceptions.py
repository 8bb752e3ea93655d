"""Exceptions for task operations."""

from uuid import UUID

from tasktracker.common.exceptions import NotFoundError, ServiceUnavailableError
from tasktracker.config.errors import ErrorCode

__all__ = ["StorageError", "TaskNotFoundError", "is_retryable"]


class TaskNotFoundError(NotFoundError):
    """Exception raised when the task is not found."""

    retryable = False

    def __init__(self, task_id: UUID | str) -> None:
        """Initialize with the task ID."""
        self.task_id = str(task_id)
        super().__init__(f"Task with ID {task_id} not found")


class StorageError(ServiceUnavailableError):
    """Exception raised when the task store failed for another reason."""

    error_code = ErrorCode.STORAGE_ERROR
    message = "Task storage is unavailable"


def is_retryable(error: BaseException) -> bool:
    """Whether retrying the failed operation can succeed later.

    Errors without a classification are treated as retryable.
    """
    return bool(getattr(error, "retryable", True))
