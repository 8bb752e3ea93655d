"""Consumer loop with manual acknowledgement.

Messages are handled strictly one at a time. A message is acknowledged right
after its handler returned and never before; a failing handler leaves the
message unacknowledged so the channel can redeliver it later. Only a failing
channel read ends the loop.
"""

from typing import NoReturn

from loguru import logger

from tasktracker.utils.prometheus import QUEUE_MESSAGES

from .channel import MessageChannel
from .exceptions import ChannelReadError, QueueError
from .message import Delivery, MessageHandler

__all__ = ["Consumer"]


class Consumer:
    """Pulls messages from a channel and dispatches them to a handler."""

    def __init__(self, channel: MessageChannel) -> None:
        """Initialize with the channel to consume from."""
        self._channel = channel

    async def handle_messages(self, handler: MessageHandler) -> NoReturn:
        """Consume messages until the channel read fails.

        Args:
            handler: Called once per received message. Raising means the
                message must not be acknowledged.

        Raises:
            ChannelReadError: If the channel can no longer be read.
        """
        while True:
            try:
                delivery = await self._channel.fetch()
            except ChannelReadError as e:
                logger.error("Failed to read message, stopping consumer", error=str(e))
                raise
            await self.dispatch(delivery, handler)

    async def dispatch(self, delivery: Delivery, handler: MessageHandler) -> bool:
        """Handle a single delivery and acknowledge it on success.

        Returns:
            True if the message was handled and acknowledged.
        """
        message = delivery.message
        try:
            await handler(message)
        except Exception as e:
            QUEUE_MESSAGES.labels("failed").inc()
            logger.warning(
                "Failed to handle message, leaving it unacknowledged",
                key=message.key,
                attempt=delivery.attempt,
                error=str(e),
            )
            return False

        try:
            await self._channel.ack(delivery)
        except QueueError as e:
            QUEUE_MESSAGES.labels("ack_failed").inc()
            logger.error(
                "Failed to acknowledge handled message",
                key=message.key,
                receipt=delivery.receipt,
                error=str(e),
            )
            return False

        QUEUE_MESSAGES.labels("acked").inc()
        logger.debug("Message acknowledged", key=message.key, receipt=delivery.receipt)
        return True
