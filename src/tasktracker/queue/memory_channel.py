"""In-process message channel.

Keeps every published message in an append-only log and tracks which offsets
have been acknowledged. Unacknowledged deliveries stay outstanding until
``redeliver`` puts them back in front of the queue, which is what a broker does
when a consumer restarts or the group rebalances.
"""

import asyncio
from collections import Counter, deque

from loguru import logger

from .exceptions import ChannelClosedError, PublishError
from .message import Delivery, Message

__all__ = ["InMemoryChannel"]


class InMemoryChannel:
    """Message channel backed by process memory."""

    def __init__(self) -> None:
        """Initialize an empty, open channel."""
        self._log: list[Message] = []
        self._ready: deque[int] = deque()
        self._outstanding: set[int] = set()
        self._acked: set[int] = set()
        self._deliveries: Counter[int] = Counter()
        self._acks: Counter[int] = Counter()
        self._condition = asyncio.Condition()
        self._closed = False

    async def publish(self, message: Message, timeout: float) -> None:  # noqa: ARG002
        """Append a message to the log and wake up a waiting consumer."""
        if self._closed:
            raise PublishError("Message channel is closed")
        async with self._condition:
            offset = len(self._log)
            self._log.append(message)
            self._ready.append(offset)
            self._condition.notify()
        logger.debug("Message appended to log", key=message.key, offset=offset)

    async def fetch(self) -> Delivery:
        """Wait for the next ready message and mark it outstanding.

        Raises:
            ChannelClosedError: If the channel was closed.
        """
        async with self._condition:
            await self._condition.wait_for(lambda: self._closed or bool(self._ready))
            if self._closed:
                raise ChannelClosedError()
            offset = self._ready.popleft()
            self._outstanding.add(offset)
            self._deliveries[offset] += 1
            return Delivery(
                message=self._log[offset],
                receipt=str(offset),
                attempt=self._deliveries[offset],
            )

    async def ack(self, delivery: Delivery) -> None:
        """Acknowledge one delivered message."""
        offset = int(delivery.receipt)
        self._outstanding.discard(offset)
        self._acked.add(offset)
        self._acks[offset] += 1

    async def redeliver(self) -> int:
        """Put all outstanding messages back in front of the queue.

        Returns:
            Number of messages scheduled for redelivery.
        """
        async with self._condition:
            pending = sorted(self._outstanding)
            self._outstanding.clear()
            self._ready.extendleft(reversed(pending))
            self._condition.notify_all()
        if pending:
            logger.debug("Redelivering unacknowledged messages", count=len(pending))
        return len(pending)

    async def close(self) -> None:
        """Close the channel and wake up all waiting consumers."""
        async with self._condition:
            self._closed = True
            self._condition.notify_all()

    @property
    def messages(self) -> list[Message]:
        """All messages ever published, in publish order."""
        return list(self._log)

    @property
    def committed_offset(self) -> int:
        """Offset of the first message that has not been acknowledged."""
        offset = 0
        while offset in self._acked:
            offset += 1
        return offset

    @property
    def backlog(self) -> int:
        """Messages waiting to be delivered."""
        return len(self._ready)

    @property
    def unacked(self) -> int:
        """Messages that are not acknowledged yet, delivered or not."""
        return len(self._log) - len(self._acked)

    def is_acked(self, offset: int) -> bool:
        """Whether the message at ``offset`` has been acknowledged."""
        return offset in self._acked

    def ack_count(self, offset: int) -> int:
        """How often the message at ``offset`` was acknowledged."""
        return self._acks[offset]

    def delivery_count(self, offset: int) -> int:
        """How often the message at ``offset`` was delivered."""
        return self._deliveries[offset]
