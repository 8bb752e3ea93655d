"""Tasks router."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from loguru import logger
from sqlmodel.ext.asyncio.session import AsyncSession

from tasktracker.common.task_status import TaskStatus
from tasktracker.config.channel import get_producer
from tasktracker.config.db import get_session
from tasktracker.queue import Producer

from .models import Task, TaskCreate
from .schemas import StatusUpdateResponse, TaskCreated, TaskFilters
from .service import (
    create_task_svc,
    get_task_svc,
    get_tasks_svc,
    update_task_status_svc,
)

__all__ = ["router"]


router = APIRouter(tags=["Tasks"])


@router.post("", summary="Create a task", status_code=status.HTTP_201_CREATED)
async def create_task(
    task_in: TaskCreate,
    db: Annotated[AsyncSession, Depends(get_session)],
    producer: Annotated[Producer, Depends(get_producer)],
) -> TaskCreated:
    """Create a task and queue it for background processing.

    Args:
        task_in: Title and description of the task.
        db: Database session for persistence.
        producer: Producer for processing requests.

    Returns:
        The ID of the created task, ``queued`` is false when the processing
        request could not be published.
    """
    return await create_task_svc(db, producer, task_in)


@router.get("", summary="List tasks")
async def get_tasks(
    db: Annotated[AsyncSession, Depends(get_session)],
    amount: Annotated[int | None, Query()] = None,
    page: Annotated[int | None, Query()] = None,
    task_status: Annotated[TaskStatus | None, Query(alias="status")] = None,
) -> list[Task]:
    """List tasks, optionally filtered by status and paginated.

    Args:
        db: Database session for queries.
        amount: Number of tasks per page.
        page: Page number starting at 1, only used together with ``amount``.
        task_status: Only return tasks in this status.

    Returns:
        List of tasks.
    """
    filters = TaskFilters(amount=amount, page=page, status=task_status)
    logger.debug("Fetching tasks with parameters", filters=str(filters))
    return list(await get_tasks_svc(db, filters))


@router.get("/{task_id}", summary="Get a task by ID")
async def get_task(
    task_id: UUID, db: Annotated[AsyncSession, Depends(get_session)]
) -> Task:
    """Get a single task.

    Raises:
        TaskNotFoundError: If the task does not exist.
    """
    return await get_task_svc(db, task_id)


@router.patch("/{task_id}/status", summary="Update the status of a task")
async def update_task_status(
    task_id: UUID,
    task_status: Annotated[TaskStatus, Query(alias="status")],
    db: Annotated[AsyncSession, Depends(get_session)],
) -> StatusUpdateResponse:
    """Overwrite the status of a task.

    Raises:
        TaskNotFoundError: If the task does not exist.
    """
    await update_task_status_svc(db, task_id, task_status)
    return StatusUpdateResponse(
        code=status.HTTP_200_OK, message="task's status updated"
    )
