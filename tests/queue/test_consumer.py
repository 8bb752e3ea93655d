# ruff: noqa: S101

"""Tests for the consumer loop."""

import asyncio

import pytest

from tasktracker.queue import (
    ChannelClosedError,
    ChannelReadError,
    Consumer,
    InMemoryChannel,
    Message,
)
from tests.fakes import BrokenReadChannel, FailingAckChannel
from tests.utils import wait_until

_TIMEOUT = 1.0


async def _ok(_message: Message) -> None:
    return


async def _fail(_message: Message) -> None:
    raise RuntimeError("handler failed")


@pytest.mark.asyncio
@pytest.mark.queue
class TestConsumerDispatch:
    """Tests for handling a single delivery."""

    @classmethod
    async def test_success_acks_once(cls, channel: InMemoryChannel) -> None:
        """A handled message is acknowledged exactly once."""
        await channel.publish(Message.for_task("t1"), _TIMEOUT)

        handled = await Consumer(channel).dispatch(await channel.fetch(), _ok)

        assert handled
        assert channel.ack_count(0) == 1
        assert channel.committed_offset == 1

    @classmethod
    async def test_failure_does_not_ack(cls, channel: InMemoryChannel) -> None:
        """The cursor stays before a message whose handler failed."""
        await channel.publish(Message.for_task("t1"), _TIMEOUT)

        handled = await Consumer(channel).dispatch(await channel.fetch(), _fail)

        assert not handled
        assert not channel.is_acked(0)
        assert channel.committed_offset == 0

    @classmethod
    async def test_ack_failure_is_contained(cls) -> None:
        """A failed acknowledgement is reported but does not raise."""
        channel = FailingAckChannel()
        calls: list[str] = []

        async def handler(message: Message) -> None:
            calls.append(message.task_id)

        await channel.publish(Message.for_task("t1"), _TIMEOUT)

        handled = await Consumer(channel).dispatch(await channel.fetch(), handler)

        assert not handled
        assert calls == ["t1"]


@pytest.mark.asyncio
@pytest.mark.queue
class TestConsumerLoop:
    """Tests for the blocking consume loop."""

    @classmethod
    async def test_messages_are_handled_one_at_a_time(
        cls, channel: InMemoryChannel
    ) -> None:
        """A message is fully handled before the next one starts."""
        events: list[tuple[str, str]] = []

        async def handler(message: Message) -> None:
            events.append(("start", message.task_id))
            await asyncio.sleep(0.01)
            events.append(("end", message.task_id))

        for task_id in ("t1", "t2", "t3"):
            await channel.publish(Message.for_task(task_id), _TIMEOUT)

        loop = asyncio.create_task(Consumer(channel).handle_messages(handler))
        await wait_until(lambda: channel.committed_offset == 3)  # noqa: PLR2004
        await channel.close()

        with pytest.raises(ChannelClosedError):
            await loop
        assert events == [
            ("start", "t1"),
            ("end", "t1"),
            ("start", "t2"),
            ("end", "t2"),
            ("start", "t3"),
            ("end", "t3"),
        ]

    @classmethod
    async def test_failed_message_is_skipped_not_retried(
        cls, channel: InMemoryChannel
    ) -> None:
        """The loop moves on after a failure and leaves redelivery to the channel."""
        seen: list[str] = []

        async def handler(message: Message) -> None:
            seen.append(message.task_id)
            if message.task_id == "t1":
                raise RuntimeError("boom")

        await channel.publish(Message.for_task("t1"), _TIMEOUT)
        await channel.publish(Message.for_task("t2"), _TIMEOUT)

        loop = asyncio.create_task(Consumer(channel).handle_messages(handler))
        await wait_until(lambda: channel.is_acked(1))
        await channel.close()

        with pytest.raises(ChannelClosedError):
            await loop
        assert seen == ["t1", "t2"]
        assert not channel.is_acked(0)
        assert channel.delivery_count(0) == 1
        assert channel.committed_offset == 0

    @classmethod
    async def test_read_failure_stops_loop(cls) -> None:
        """A failing channel read ends the loop with that error."""
        with pytest.raises(ChannelReadError):
            await Consumer(BrokenReadChannel()).handle_messages(_ok)
