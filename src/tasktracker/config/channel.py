"""Message channel configuration for the task queue."""

from fastapi import Request

from tasktracker.queue import (
    InMemoryChannel,
    MessageChannel,
    Producer,
    RedisStreamChannel,
)

from .config import Settings

__all__ = ["create_channel", "get_producer"]


def create_channel(config: Settings) -> MessageChannel:
    """Create the message channel selected by ``QUEUE_BACKEND``."""
    if config.queue_backend == "memory":
        return InMemoryChannel()
    return RedisStreamChannel.from_url(
        config.redis_url,
        stream=config.queue_stream,
        group=config.queue_group,
        consumer=config.queue_consumer,
        block_ms=config.queue_block_ms,
        claim_idle_ms=config.queue_claim_idle_ms,
        max_len=config.queue_max_len,
    )


def get_producer(request: Request) -> Producer:
    """Get the producer created during application startup."""
    return request.app.state.producer
