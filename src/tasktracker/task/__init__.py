"""Task module for tracked tasks and their background processing.

Key Components:
- Task model and repository: persistence of tasks and their status
- Task service and router: create, read, list and update tasks over HTTP
- Status store: the narrow status write capability used by the processor
- Task processor: moves a task through ``created``, ``processing`` and ``done``
- Task worker: consumes processing requests and dispatches them to the processor
"""

from .exceptions import StorageError, TaskNotFoundError, is_retryable
from .models import Task, TaskCreate
from .processor import TaskProcessor
from .schemas import TaskCreated, TaskFilters
from .store import SQLTaskStore, TaskStore
from .work import DelayWork, NoopWork, WorkUnit
from .worker import TaskWorker

__all__ = [
    "DelayWork",
    "NoopWork",
    "SQLTaskStore",
    "StorageError",
    "Task",
    "TaskCreate",
    "TaskCreated",
    "TaskFilters",
    "TaskNotFoundError",
    "TaskProcessor",
    "TaskStore",
    "TaskWorker",
    "WorkUnit",
    "is_retryable",
]
