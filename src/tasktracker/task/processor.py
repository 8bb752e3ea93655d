"""Task processor invoked once per queued message."""

from loguru import logger

from tasktracker.common.app_error import AppError
from tasktracker.common.task_status import TaskStatus
from tasktracker.queue.message import Message

from .exceptions import is_retryable
from .store import TaskStore
from .work import WorkUnit

__all__ = ["TaskProcessor"]


class TaskProcessor:
    """Moves a task from ``created`` over ``processing`` to ``done``.

    The two status writes are independent commits. A crash in between leaves
    the task in ``processing``. Handling the same task again repeats both
    writes, which leaves it in ``done``.
    """

    def __init__(self, store: TaskStore, work: WorkUnit) -> None:
        """Initialize with the status store and the work to perform."""
        self._store = store
        self._work = work

    async def handle(self, task_id: str) -> None:
        """Process one task.

        Args:
            task_id: ID of the task to process.

        Raises:
            TaskNotFoundError: If the task does not exist.
            StorageError: If a status write failed.
        """
        logger.info("Task processing", taskId=task_id)
        try:
            await self._store.update_status(task_id, TaskStatus.PROCESSING)
            await self._work.run(task_id)
            await self._store.update_status(task_id, TaskStatus.DONE)
        except AppError as e:
            logger.error(
                "Failed to update task's status",
                taskId=task_id,
                error=e.message,
                retryable=is_retryable(e),
            )
            raise
        logger.info("Task processed", taskId=task_id)

    async def handle_message(self, message: Message) -> None:
        """Process the task referenced by the message payload."""
        await self.handle(message.task_id)
