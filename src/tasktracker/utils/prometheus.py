"""Prometheus metrics for tracking custom metrics."""

from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, Response
from prometheus_client import Counter, Gauge

__all__ = [
    "QUEUE_MESSAGES",
    "QUEUE_PUBLISH_FAILURES",
    "REQUESTS_IN_PROGRESS",
    "add_prometheus_metrics",
]


REQUESTS_IN_PROGRESS = Gauge(
    "http_requests_in_progress_total",
    "Active HTTP requests",
    ["method", "path"],
)

QUEUE_PUBLISH_FAILURES = Counter(
    "task_queue_publish_failures_total",
    "Processing requests that could not be published after task creation",
)

QUEUE_MESSAGES = Counter(
    "task_queue_messages_total",
    "Messages handled by the task consumer",
    ["outcome"],
)


def add_prometheus_metrics(app: FastAPI) -> None:
    """Configure the FastAPI application to track in-flight HTTP requests.

    Args:
        app: The FastAPI application instance where the middleware will be added.
    """

    @app.middleware("http")
    async def track_in_flight(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        """Middleware to track the number of in-flight requests."""
        REQUESTS_IN_PROGRESS.labels(request.method, request.url.path).inc()
        try:
            return await call_next(request)
        finally:
            REQUESTS_IN_PROGRESS.labels(request.method, request.url.path).dec()
