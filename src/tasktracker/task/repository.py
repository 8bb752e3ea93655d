"""Task repository."""

from collections.abc import Sequence
from uuid import UUID

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from tasktracker.common.task_status import TaskStatus

from .exceptions import StorageError, TaskNotFoundError
from .models import Task
from .schemas import TaskFilters

__all__ = ["get_task_db", "get_tasks_db", "save_task_db", "update_task_status_db"]


async def save_task_db(db: AsyncSession, task: Task) -> Task:
    """Persist a new task and commit it.

    Args:
        db: Database session instance.
        task: The task to save.

    Returns:
        The saved task with its generated fields.
    """
    db.add(task)
    await db.commit()
    await db.refresh(task)

    logger.debug("Task saved to DB", taskId=task.id)
    return task


async def get_task_db(db: AsyncSession, task_id: UUID | str) -> Task:
    """Retrieve a task by its ID.

    Args:
        db: Database session instance.
        task_id: The ID of the task to retrieve.

    Returns:
        Task: The task with the given ID.

    Raises:
        TaskNotFoundError: If the task is not found.
    """
    uid = _parse_id(task_id)
    result = await db.exec(select(Task).where(Task.id == uid))
    task = result.first()

    if task is None:
        raise TaskNotFoundError(task_id)

    logger.debug("Task loaded from DB", taskId=uid)
    return task


async def get_tasks_db(db: AsyncSession, params: TaskFilters) -> Sequence[Task]:
    """Retrieve tasks, optionally filtered by status and paginated.

    Args:
        db: Database session instance.
        params: Status filter and page window.

    Returns:
        Tasks ordered by creation date (oldest first).
    """
    stmt = select(Task)
    if params.status is not None:
        stmt = stmt.where(Task.status == params.status)
    stmt = stmt.order_by(Task.created_at)  # type: ignore[arg-type]

    if params.paginated and params.amount and params.page:
        stmt = stmt.offset((params.page - 1) * params.amount).limit(params.amount)

    result = await db.exec(stmt)
    tasks = result.all()
    logger.debug("Tasks fetched from DB", count=len(tasks), params=str(params))
    return tasks


async def update_task_status_db(
    db: AsyncSession, task_id: UUID | str, status: TaskStatus
) -> None:
    """Overwrite the status of a task and commit.

    No compare-and-swap is done, concurrent writers race and the last write wins.

    Args:
        db: Database session instance.
        task_id: The ID of the task to update.
        status: The new status.

    Raises:
        TaskNotFoundError: If no task has the given ID.
        StorageError: If the database rejected the update.
    """
    uid = _parse_id(task_id)
    try:
        result = await db.exec(select(Task).where(Task.id == uid))
        task = result.first()
        if task is None:
            raise TaskNotFoundError(task_id)

        task.status = status
        db.add(task)
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        raise StorageError(f"Failed to update status of task {task_id}: {e}") from e

    logger.debug("Task status updated in DB", taskId=uid, status=status)


def _parse_id(task_id: UUID | str) -> UUID:
    """Convert a task id, ids that are no UUID cannot match any task."""
    if isinstance(task_id, UUID):
        return task_id
    try:
        return UUID(task_id)
    except ValueError as e:
        raise TaskNotFoundError(task_id) from e
