"""Message envelope shared by producer and consumer."""

from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
from typing import Self

from pydantic import BaseModel, ConfigDict, Field

__all__ = ["Delivery", "Message", "MessageHandler"]


class Message(BaseModel):
    """Unit crossing the channel.

    ``key`` is the correlation id used for partition affinity, ``value`` carries
    the same id as raw bytes and is what the worker processes.
    """

    model_config = ConfigDict(frozen=True)

    key: str = Field(description="Correlation id of the message (the task id).")
    value: bytes = Field(description="Opaque payload, the task id as UTF-8 bytes.")
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="Creation time, informational only.",
    )

    @classmethod
    def for_task(cls, task_id: str) -> Self:
        """Build the processing request for a task."""
        return cls(key=task_id, value=task_id.encode(), timestamp=datetime.now(UTC))

    @property
    def task_id(self) -> str:
        """Task id decoded from the payload."""
        return self.value.decode()


class Delivery(BaseModel):
    """A received message together with what the channel needs to ack it."""

    model_config = ConfigDict(frozen=True)

    message: Message
    receipt: str = Field(description="Channel specific acknowledgement handle.")
    attempt: int = Field(
        default=1, ge=1, description="How often this message has been delivered."
    )


MessageHandler = Callable[[Message], Awaitable[None]]
