"""Helpers for driving the consumer loop in tests."""

import asyncio
from collections.abc import Callable

__all__ = ["wait_until"]


_DEFAULT_TIMEOUT = 5.0  # seconds


async def wait_until(
    predicate: Callable[[], bool],
    poll_interval: float = 0.01,
    timeout_value: float = _DEFAULT_TIMEOUT,
) -> None:
    """Poll until ``predicate`` holds.

    Raises:
        TimeoutError: If the predicate does not hold within the timeout.
    """
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout_value
    while not predicate():
        if loop.time() > deadline:
            raise TimeoutError(f"Condition not met within {timeout_value} seconds")
        await asyncio.sleep(poll_interval)
