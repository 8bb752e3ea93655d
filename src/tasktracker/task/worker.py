"""Background worker consuming task processing requests."""

import asyncio
import sys
from typing import NoReturn

from loguru import logger
from sqlmodel import SQLModel

from tasktracker.config import config_logger, engine, settings
from tasktracker.config.channel import create_channel
from tasktracker.queue import ChannelReadError, Consumer, MessageChannel

from .processor import TaskProcessor
from .store import SQLTaskStore, TaskStore
from .work import DelayWork, WorkUnit

__all__ = ["TaskWorker", "main"]


class TaskWorker:
    """Runs the task processor on every message of the channel."""

    def __init__(
        self, channel: MessageChannel, store: TaskStore, work: WorkUnit
    ) -> None:
        """Initialize the consumer and the processor it dispatches to."""
        self._consumer = Consumer(channel)
        self.processor = TaskProcessor(store, work)

    async def run(self) -> NoReturn:
        """Consume messages until the channel fails.

        Raises:
            ChannelReadError: If the channel can no longer be read.
        """
        logger.info("Starting task worker")
        await self._consumer.handle_messages(self.processor.handle_message)


async def _run_standalone() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    if settings.queue_backend == "memory":
        logger.warning("Stand-alone worker uses an in-memory channel")

    channel = create_channel(settings)
    worker = TaskWorker(
        channel, SQLTaskStore(engine), DelayWork(settings.processing_delay)
    )
    try:
        await worker.run()
    finally:
        await channel.close()
        await engine.dispose()


def main() -> None:
    """Run the task worker as its own process."""
    config_logger("worker")
    try:
        asyncio.run(_run_standalone())
    except ChannelReadError as e:
        logger.critical("Task worker stopped", error=str(e))
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("Task worker interrupted")
