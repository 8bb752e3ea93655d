"""Task service."""

from collections.abc import Sequence
from uuid import UUID

from loguru import logger
from sqlmodel.ext.asyncio.session import AsyncSession

from tasktracker.common.task_status import TaskStatus
from tasktracker.config.errors import ErrorNames
from tasktracker.queue import Message, Producer, QueueError
from tasktracker.utils.prometheus import QUEUE_PUBLISH_FAILURES

from .models import Task, TaskCreate
from .repository import get_task_db, get_tasks_db, save_task_db, update_task_status_db
from .schemas import TaskCreated, TaskFilters

__all__ = [
    "create_task_svc",
    "get_task_svc",
    "get_tasks_svc",
    "update_task_status_svc",
]


async def create_task_svc(
    db: AsyncSession, producer: Producer, task_in: TaskCreate
) -> TaskCreated:
    """Create a task and request its background processing.

    The task row is committed before the processing request is published. A
    failed publish does not fail the creation, the task then stays in
    ``created`` and the response carries a warning instead.

    Args:
        db: Database session instance.
        producer: Producer for processing requests.
        task_in: Title and description of the new task.

    Returns:
        The ID of the new task and whether it was queued.
    """
    task = await save_task_db(
        db, Task(title=task_in.title, description=task_in.description)
    )
    task_id = str(task.id)

    try:
        await producer.send_message(Message.for_task(task_id))
    except QueueError as e:
        QUEUE_PUBLISH_FAILURES.inc()
        logger.warning("Failed to send task to queue", taskId=task_id, error=e.message)
        return TaskCreated(
            id=task.id, queued=False, warning=ErrorNames.QUEUE_UNAVAILABLE_WARNING
        )

    logger.info("Task created and sent to queue", taskId=task_id)
    return TaskCreated(id=task.id, queued=True)


async def get_task_svc(db: AsyncSession, task_id: UUID) -> Task:
    """Read a single task."""
    return await get_task_db(db, task_id)


async def get_tasks_svc(db: AsyncSession, params: TaskFilters) -> Sequence[Task]:
    """Read tasks matching the filters."""
    return await get_tasks_db(db, params)


async def update_task_status_svc(
    db: AsyncSession, task_id: UUID, status: TaskStatus
) -> None:
    """Overwrite the status of a task.

    This races the background worker, whichever write comes last wins.
    """
    await update_task_status_db(db, task_id, status)
    logger.info("Task status updated", taskId=task_id, status=status)
