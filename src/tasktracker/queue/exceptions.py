"""Exceptions raised by message channels."""

from tasktracker.common.exceptions import ServiceUnavailableError
from tasktracker.config.errors import ErrorCode

__all__ = [
    "AckError",
    "ChannelClosedError",
    "ChannelReadError",
    "PublishError",
    "PublishTimeoutError",
    "QueueError",
]


class QueueError(ServiceUnavailableError):
    """Base exception for message channel failures."""

    message = "Message channel failure"


class PublishError(QueueError):
    """Exception raised when a message could not be published."""

    error_code = ErrorCode.PUBLISH_FAILED
    message = "Failed to publish message"


class PublishTimeoutError(PublishError):
    """Exception raised when publishing exceeds the caller supplied timeout."""

    error_code = ErrorCode.PUBLISH_TIMEOUT

    def __init__(self, timeout: float) -> None:
        """Initialize with the timeout that elapsed."""
        self.timeout = timeout
        super().__init__(f"Publishing did not complete within {timeout} seconds")


class ChannelReadError(QueueError):
    """Exception raised when the channel can no longer be read from."""

    error_code = ErrorCode.CHANNEL_READ_FAILED
    message = "Failed to read from message channel"


class ChannelClosedError(ChannelReadError):
    """Exception raised when reading from a closed channel."""

    error_code = ErrorCode.CHANNEL_CLOSED
    message = "Message channel is closed"


class AckError(QueueError):
    """Exception raised when a handled message could not be acknowledged."""

    message = "Failed to acknowledge message"
