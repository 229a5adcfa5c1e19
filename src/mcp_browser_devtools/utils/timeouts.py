"""Bounded operations: await something for at most N milliseconds."""

import asyncio
from typing import Awaitable, TypeVar

from ..errors import ScriptTimeoutError

T = TypeVar("T")


async def with_timeout(awaitable: Awaitable[T], timeout_ms: int, message: str) -> T:
    """
    Await `awaitable`, giving up after `timeout_ms` milliseconds.

    Only the local await is cancelled. Whatever the browser started on our
    behalf keeps running; a timeout means we stopped waiting, not that the
    page stopped working.

    Args:
        awaitable: The operation to bound.
        timeout_ms: Deadline in milliseconds.
        message: Message of the ScriptTimeoutError raised on expiry, so each
            call site can say which phase hung.

    Returns:
        The operation's result.

    Raises:
        ScriptTimeoutError: If the deadline passed first.
    """
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout_ms / 1000.0)
    except asyncio.TimeoutError:
        raise ScriptTimeoutError(message) from None


__all__ = ["with_timeout"]
