"""Shared errors, status values and routes."""

from tasktracker.common.app_error import AppError
from tasktracker.common.exceptions import (
    NotFoundError,
    ServiceUnavailableError,
)
from tasktracker.common.task_status import TaskStatus

__all__ = [
    "AppError",
    "NotFoundError",
    "ServiceUnavailableError",
    "TaskStatus",
]
