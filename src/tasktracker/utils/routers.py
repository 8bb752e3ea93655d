"""Router Initializer."""

from fastapi import FastAPI

from tasktracker.common.router import router as common_router
from tasktracker.task.router import router as task_router

__all__ = ["API_PREFIX", "register_routers"]


API_PREFIX = "/api/v1"


def register_routers(app: FastAPI) -> None:
    """Register all API routers with the FastAPI application.

    Args:
        app: FastAPI application instance.
    """
    app.include_router(common_router)
    app.include_router(task_router, prefix=f"{API_PREFIX}/tasks")
