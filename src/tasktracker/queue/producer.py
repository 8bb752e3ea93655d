"""Producer publishing processing requests to the message channel."""

from loguru import logger

from .channel import MessageChannel
from .message import Message

__all__ = ["Producer"]


class Producer:
    """Publishes messages with a fixed per-publish timeout."""

    def __init__(self, channel: MessageChannel, timeout: float) -> None:
        """Initialize with the channel and the publish timeout in seconds."""
        self._channel = channel
        self._timeout = timeout

    async def send_message(self, message: Message) -> None:
        """Publish one message.

        Args:
            message: The message to enqueue.

        Raises:
            PublishTimeoutError: If the channel did not confirm within the timeout.
            PublishError: If the channel rejected the message.
        """
        await self._channel.publish(message, self._timeout)
        logger.debug("Message sent to queue", key=message.key)
