"""Transport agnostic message channel contract."""

from typing import Protocol

from .message import Delivery, Message

__all__ = ["MessageChannel"]


class MessageChannel(Protocol):
    """Publish/fetch/ack capability of a broker.

    ``fetch`` blocks until a message is available and raises
    ``ChannelReadError`` when the channel can no longer be read. ``ack`` durably
    moves the delivery cursor past one message.
    """

    async def publish(self, message: Message, timeout: float) -> None:
        """Durably enqueue one message or raise ``PublishError``."""
        ...

    async def fetch(self) -> Delivery:
        """Return the next message to handle."""
        ...

    async def ack(self, delivery: Delivery) -> None:
        """Acknowledge a successfully handled message."""
        ...

    async def close(self) -> None:
        """Release the underlying connection."""
        ...
