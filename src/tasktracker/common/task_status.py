"""TaskStatus model for tracked tasks."""

from enum import StrEnum

__all__ = ["TaskStatus"]


class TaskStatus(StrEnum):
    """Status of a task along its processing lifecycle."""

    CREATED = "created"
    PROCESSING = "processing"
    DONE = "done"
