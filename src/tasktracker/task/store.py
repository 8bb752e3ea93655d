"""Status store used by the task processor."""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncEngine
from sqlmodel.ext.asyncio.session import AsyncSession

from tasktracker.common.task_status import TaskStatus

from .repository import update_task_status_db

__all__ = ["SQLTaskStore", "TaskStore"]


class TaskStore(Protocol):
    """Write access to the status of a task."""

    async def update_status(self, task_id: str, status: TaskStatus) -> None:
        """Set the status of a task.

        Raises:
            TaskNotFoundError: If no task has the given ID.
            StorageError: For any other storage failure.
        """
        ...


class SQLTaskStore:
    """Task store backed by the relational database.

    Every call runs in its own session and commits on its own.
    """

    def __init__(self, engine: AsyncEngine) -> None:
        """Initialize with the engine sessions are opened on."""
        self._engine = engine

    async def update_status(self, task_id: str, status: TaskStatus) -> None:
        """Set the status of a task in its own transaction."""
        async with AsyncSession(self._engine, expire_on_commit=False) as db:
            await update_task_status_db(db, task_id, status)
