"""Redis Streams message channel.

The stream plays the role of the topic and the consumer group the role of the
delivery cursor: an entry stays in the group's pending entries list until it is
acknowledged with ``XACK``. Entries that were delivered but never acknowledged
are handed out again when this consumer restarts (its own pending list is
drained first) or, once they have been idle for ``claim_idle_ms``, through
``XAUTOCLAIM``.
"""

import asyncio
from collections import deque
from datetime import UTC, datetime
from typing import Any, Self

import redis.asyncio as aioredis
from loguru import logger
from redis.exceptions import RedisError, ResponseError

from .exceptions import (
    AckError,
    ChannelClosedError,
    ChannelReadError,
    PublishError,
    PublishTimeoutError,
)
from .message import Delivery, Message

__all__ = ["RedisStreamChannel"]


_PENDING_BATCH = 100

_Entry = tuple[bytes | str, dict[bytes, bytes] | None]


class RedisStreamChannel:
    """Message channel backed by a Redis stream and consumer group."""

    def __init__(  # noqa: PLR0913
        self,
        client: aioredis.Redis,
        stream: str,
        group: str,
        consumer: str,
        *,
        block_ms: int = 2000,
        claim_idle_ms: int = 60000,
        max_len: int = 100000,
    ) -> None:
        """Initialize the channel.

        Args:
            client: Redis client, created without ``decode_responses``.
            stream: Stream name the messages are published to.
            group: Consumer group the consumer belongs to.
            consumer: Name of this consumer inside the group.
            block_ms: How long a single read blocks before it is retried.
            claim_idle_ms: Idle time after which unacknowledged entries are
                redelivered, 0 disables claiming.
            max_len: Approximate maximum length of the stream.
        """
        self._client = client
        self._stream = stream
        self._group = group
        self._consumer = consumer
        self._block_ms = block_ms
        self._claim_idle_ms = claim_idle_ms
        self._max_len = max_len
        self._backlog: deque[tuple[str, Message]] = deque()
        self._group_ready = False
        self._pending_loaded = False
        self._claim_cursor = "0-0"
        self._closed = False

    @classmethod
    def from_url(
        cls, url: str, stream: str, group: str, consumer: str, **kwargs: Any
    ) -> Self:
        """Create a channel with its own Redis connection pool."""
        client = aioredis.from_url(url)
        return cls(client, stream, group, consumer, **kwargs)

    async def publish(self, message: Message, timeout: float) -> None:
        """Append the message to the stream with ``XADD``.

        Raises:
            PublishTimeoutError: If Redis did not confirm within ``timeout``.
            PublishError: If Redis rejected the command.
        """
        fields = {
            "key": message.key,
            "value": message.value,
            "timestamp": message.timestamp.isoformat(),
        }
        try:
            entry_id = await asyncio.wait_for(
                self._client.xadd(
                    self._stream, fields, maxlen=self._max_len, approximate=True
                ),
                timeout=timeout,
            )
        except TimeoutError as e:
            raise PublishTimeoutError(timeout) from e
        except RedisError as e:
            raise PublishError(f"Failed to publish message: {e}") from e

        logger.debug(
            "Message published", stream=self._stream, key=message.key, entryId=entry_id
        )

    async def fetch(self) -> Delivery:
        """Return the next entry for this consumer.

        Own pending entries come first, then idle entries claimed from the
        group, then new entries.

        Raises:
            ChannelClosedError: If the channel was closed.
            ChannelReadError: If Redis could not be read.
        """
        try:
            await self._ensure_group()
            if not self._pending_loaded:
                await self._load_own_pending()
                self._pending_loaded = True

            while True:
                if self._closed:
                    raise ChannelClosedError()
                if self._backlog:
                    entry_id, message = self._backlog.popleft()
                    attempt = await self._delivery_count(entry_id)
                    return Delivery(message=message, receipt=entry_id, attempt=attempt)
                if self._claim_idle_ms and await self._claim_idle():
                    continue

                response = await self._client.xreadgroup(
                    self._group,
                    self._consumer,
                    {self._stream: ">"},
                    count=1,
                    block=self._block_ms,
                )
                for entry_id, message in await self._keep_existing(
                    self._entries(response)
                ):
                    return Delivery(message=message, receipt=entry_id)
        except RedisError as e:
            if self._closed:
                raise ChannelClosedError() from e
            raise ChannelReadError(f"Failed to read from stream: {e}") from e

    async def ack(self, delivery: Delivery) -> None:
        """Acknowledge the entry with ``XACK``.

        Raises:
            AckError: If Redis rejected the acknowledgement.
        """
        try:
            await self._client.xack(self._stream, self._group, delivery.receipt)
        except RedisError as e:
            raise AckError(f"Failed to acknowledge {delivery.receipt}: {e}") from e

    async def close(self) -> None:
        """Close the Redis connection pool."""
        if self._closed:
            return
        self._closed = True
        await self._client.aclose()

    async def _ensure_group(self) -> None:
        if self._group_ready:
            return
        try:
            await self._client.xgroup_create(
                self._stream, self._group, id="0", mkstream=True
            )
            logger.info(
                "Consumer group created", stream=self._stream, group=self._group
            )
        except ResponseError as e:
            if "BUSYGROUP" not in str(e):
                raise
        self._group_ready = True

    async def _load_own_pending(self) -> None:
        """Queue entries delivered to this consumer earlier but never acked."""
        last_id = "0"
        while True:
            response = await self._client.xreadgroup(
                self._group,
                self._consumer,
                {self._stream: last_id},
                count=_PENDING_BATCH,
            )
            entries = self._entries(response)
            if not entries:
                break
            last_id = _decode(entries[-1][0])
            self._backlog.extend(await self._keep_existing(entries))

        if self._backlog:
            logger.info(
                "Redelivering pending messages",
                consumer=self._consumer,
                count=len(self._backlog),
            )

    async def _claim_idle(self) -> bool:
        """Claim entries that stayed unacknowledged for too long.

        Returns:
            Whether anything was claimed.
        """
        response = await self._client.xautoclaim(
            self._stream,
            self._group,
            self._consumer,
            min_idle_time=self._claim_idle_ms,
            start_id=self._claim_cursor,
            count=1,
        )
        self._claim_cursor = _decode(response[0])
        claimed = await self._keep_existing(response[1])
        if claimed:
            logger.debug("Claimed idle message", entryId=claimed[0][0])
        self._backlog.extend(claimed)
        return bool(claimed)

    async def _keep_existing(self, entries: list[_Entry]) -> list[tuple[str, Message]]:
        """Decode entries, acking and dropping the ones that cannot be handled.

        Entries trimmed from the stream while pending come back without fields.
        Entries that are no valid message would fail on every redelivery.
        """
        kept = []
        for raw_id, fields in entries:
            entry_id = _decode(raw_id)
            if not fields:
                logger.warning("Dropping trimmed stream entry", entryId=entry_id)
                await self._client.xack(self._stream, self._group, entry_id)
                continue
            try:
                message = _to_message(fields)
            except (KeyError, ValueError) as e:
                logger.error(
                    "Dropping malformed stream entry", entryId=entry_id, error=repr(e)
                )
                await self._client.xack(self._stream, self._group, entry_id)
                continue
            kept.append((entry_id, message))
        return kept

    async def _delivery_count(self, entry_id: str) -> int:
        pending = await self._client.xpending_range(
            self._stream, self._group, min=entry_id, max=entry_id, count=1
        )
        if not pending:
            return 1
        return max(int(pending[0]["times_delivered"]), 1)

    @staticmethod
    def _entries(response: Any) -> list[_Entry]:
        if not response:
            return []
        entries: list[_Entry] = []
        for _stream, stream_entries in response:
            entries.extend(stream_entries)
        return entries


def _decode(value: bytes | str) -> str:
    return value.decode() if isinstance(value, bytes) else value


def _to_message(fields: dict[bytes, bytes]) -> Message:
    """Rebuild a message from the stream entry fields."""
    values = {_decode(k): v for k, v in fields.items()}
    value = values["value"]
    timestamp = values.get("timestamp")
    return Message(
        key=_decode(values["key"]),
        value=value if isinstance(value, bytes) else value.encode(),
        timestamp=(
            datetime.fromisoformat(_decode(timestamp))
            if timestamp
            else datetime.now(UTC)
        ),
    )
