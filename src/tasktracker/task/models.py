"""Task model."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, SQLModel, func

from tasktracker.common.task_status import TaskStatus

__all__ = ["Task", "TaskCreate"]


class _TaskBase(SQLModel):
    title: str = Field(
        min_length=1, max_length=256, description="Short title of the task."
    )

    description: str | None = Field(
        default=None, max_length=4096, description="Optional free text description."
    )


class TaskCreate(_TaskBase):
    """Payload for creating a task."""


class Task(_TaskBase, table=True):
    """Tracked task processed in the background."""

    __tablename__ = "task"

    id: UUID = Field(
        default_factory=uuid4,
        primary_key=True,
        description="Unique identifier for the task.",
    )

    status: TaskStatus = Field(
        default=TaskStatus.CREATED,
        index=True,
        description="Current processing status of the task.",
    )

    created_at: datetime | None = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True), insert_default=func.now()),
        description="Timestamp when the task was created.",
    )

    updated_at: datetime | None = Field(
        default=None,
        sa_column=Column(
            DateTime(timezone=True), onupdate=func.now(), insert_default=func.now()
        ),
        description="Timestamp when the task was last updated.",
    )
