"""Units of work executed while a task is processing."""

import asyncio
from typing import Protocol

from loguru import logger

__all__ = ["DelayWork", "NoopWork", "WorkUnit"]


class WorkUnit(Protocol):
    """The actual processing of a task."""

    async def run(self, task_id: str) -> None:
        """Process the task, raising on failure."""
        ...


class DelayWork:
    """Holds the consumer for a fixed time in place of real processing."""

    def __init__(self, seconds: float) -> None:
        """Initialize with the delay in seconds."""
        self.seconds = seconds

    async def run(self, task_id: str) -> None:
        """Wait for the configured delay."""
        logger.debug("Processing task", taskId=task_id, delay=self.seconds)
        await asyncio.sleep(self.seconds)


class NoopWork:
    """Finishes immediately."""

    async def run(self, task_id: str) -> None:  # noqa: ARG002
        """Do nothing."""
        return
