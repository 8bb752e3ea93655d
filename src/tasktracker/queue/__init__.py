"""Message queue layer: envelope, channels, producer and consumer loop."""

from tasktracker.queue.channel import MessageChannel
from tasktracker.queue.consumer import Consumer
from tasktracker.queue.exceptions import (
    AckError,
    ChannelClosedError,
    ChannelReadError,
    PublishError,
    PublishTimeoutError,
    QueueError,
)
from tasktracker.queue.memory_channel import InMemoryChannel
from tasktracker.queue.message import Delivery, Message, MessageHandler
from tasktracker.queue.producer import Producer
from tasktracker.queue.redis_channel import RedisStreamChannel

__all__ = [
    "AckError",
    "ChannelClosedError",
    "ChannelReadError",
    "Consumer",
    "Delivery",
    "InMemoryChannel",
    "Message",
    "MessageChannel",
    "MessageHandler",
    "Producer",
    "PublishError",
    "PublishTimeoutError",
    "QueueError",
    "RedisStreamChannel",
]
