"""ASGI server for the FastAPI application."""

from pathlib import Path

import uvicorn
from loguru import logger
from uvicorn.config import LOGGING_CONFIG

from tasktracker.config import settings

__all__ = ["run"]


def run() -> None:
    """Serve the application with uvicorn.

    Auto reload only happens in development. Every reload also restarts the
    in-process task worker, unacknowledged messages are redelivered to it.
    """
    is_development = settings.app_env == "development"
    logger.info(
        "Starting server",
        host=settings.host_binding,
        port=settings.port,
        reload=settings.reload,
        worker=settings.worker_enabled,
    )

    uvicorn.run(
        "tasktracker:app",
        host=settings.host_binding,
        port=settings.port,
        reload=settings.reload,
        reload_dirs=[str(Path(__file__).parent)] if settings.reload else None,
        server_header=False,
        log_config=LOGGING_CONFIG if is_development else None,
        log_level="info" if is_development else None,
    )
