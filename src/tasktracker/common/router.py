"""Common router."""

import asyncio

from fastapi import APIRouter, Request, Response, status

from .exceptions import ServiceUnavailableError

__all__ = ["router"]


router = APIRouter(tags=["Common", "Health"])


@router.get("/", include_in_schema=False, summary="Root endpoint")
async def root() -> Response:
    """Root endpoint."""
    return Response("OK")


@router.get("/health", include_in_schema=False, summary="Health check endpoint")
async def health(request: Request) -> Response:
    """Health check endpoint.

    Raises:
        ServiceUnavailableError: If the in-process task worker has stopped.
    """
    worker_task: asyncio.Task | None = getattr(request.app.state, "worker_task", None)
    if worker_task is not None and worker_task.done():
        raise ServiceUnavailableError("Task worker is not running")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
