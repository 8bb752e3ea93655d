"""Request and response schemas for tasks."""

from uuid import UUID

from pydantic import BaseModel, Field

from tasktracker.common.task_status import TaskStatus

__all__ = ["StatusUpdateResponse", "TaskCreated", "TaskFilters"]


class TaskCreated(BaseModel):
    """Response returned after a task was created."""

    id: UUID = Field(description="ID of the created task.")
    queued: bool = Field(
        description="Whether the task was handed to the background worker."
    )
    warning: str | None = Field(
        default=None, description="Non-fatal problem that occurred after creation."
    )


class StatusUpdateResponse(BaseModel):
    """Response returned after a status update."""

    code: int
    message: str


class TaskFilters(BaseModel):
    """Parameters for listing tasks.

    Pagination is only applied when both ``amount`` and ``page`` are positive.
    """

    amount: int | None = Field(None, description="Number of tasks per page")
    page: int | None = Field(None, description="Page number, starting at 1")
    status: TaskStatus | None = Field(None, description="Filter by task status")

    @property
    def paginated(self) -> bool:
        """Whether a page window should be applied."""
        return bool(self.amount and self.page and self.amount > 0 and self.page > 0)
