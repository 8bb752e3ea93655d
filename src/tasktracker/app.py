"""Main application module for the task tracker service."""

import asyncio
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Final

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from prometheus_fastapi_instrumentator import Instrumentator
from sqlmodel import SQLModel

from tasktracker.config import config_logger, engine, settings
from tasktracker.config.channel import create_channel
from tasktracker.queue import Producer
from tasktracker.task import DelayWork, SQLTaskStore, TaskWorker
from tasktracker.utils.banner import create_banner
from tasktracker.utils.error_handler import register_exception_handlers
from tasktracker.utils.prometheus import add_prometheus_metrics
from tasktracker.utils.routers import register_routers

config_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Initialize database, message channel and task worker on startup."""
    create_banner(settings)

    async with engine.begin() as conn:
        if settings.clear_db_on_restart:
            await conn.run_sync(SQLModel.metadata.drop_all)
        await conn.run_sync(SQLModel.metadata.create_all)

    channel = create_channel(settings)
    app.state.producer = Producer(channel, settings.queue_publish_timeout)

    app.state.worker_task = None
    if settings.worker_enabled:
        worker = TaskWorker(
            channel, SQLTaskStore(engine), DelayWork(settings.processing_delay)
        )
        app.state.worker_task = asyncio.create_task(
            worker.run(), name="task-worker"
        )
        app.state.worker_task.add_done_callback(_on_worker_exit)
        logger.info("Task worker started")

    yield

    worker_task: asyncio.Task | None = app.state.worker_task
    if worker_task is not None:
        worker_task.cancel()
        await asyncio.gather(worker_task, return_exceptions=True)
    await channel.close()
    await engine.dispose()


def _on_worker_exit(task: asyncio.Task) -> None:
    """Report a worker that stopped while the application is still running."""
    if task.cancelled():
        logger.info("Task worker stopped")
        return
    if (exc := task.exception()) is not None:
        logger.opt(exception=exc).critical(
            "Task worker stopped, processing requests are no longer consumed"
        )


app: Final = FastAPI(
    title="Task Tracker",
    description="Task tracking service with background task processing",
    version=settings.version,
    lifespan=lifespan,
)


# --------------------------------------------------------
# P R O M E T H E U S
# --------------------------------------------------------
Instrumentator().instrument(app).expose(app, include_in_schema=False)
add_prometheus_metrics(app)


# --------------------------------------------------------
# C O R S
# --------------------------------------------------------
if settings.app_env != "production":
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allow_origin,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


# --------------------------------------------------------
# R O U T E R S
# --------------------------------------------------------
register_routers(app)


# --------------------------------------------------------
# E X C E P T I O N S
# --------------------------------------------------------
register_exception_handlers(app)
