"""Scoped ownership of Playwright JS/element handles."""

import asyncio
import logging
from typing import Any, List, Optional

logger = logging.getLogger(__name__)

# Keeps fire-and-forget cleanup tasks referenced until they finish.
_pending_cleanups = set()


async def _dispose_all(handles: List[Any]) -> None:
    results = await asyncio.gather(*(h.dispose() for h in handles), return_exceptions=True)
    for handle, result in zip(handles, results):
        if isinstance(result, BaseException):
            logger.debug("Ignoring failure while disposing %r: %s", handle, result)


class HandleScope:
    """
    Collects handles acquired during one tool invocation and releases them on exit.

    Usage:
        async with HandleScope() as scope:
            handle = scope.add(await frame.evaluate_handle(...))
            ...

    On exit (normal return, exception or cancellation) every collected handle
    is disposed exactly once. Disposal runs in a background task: the caller
    never waits for it and never sees its errors.
    """

    def __init__(self):
        self._handles: List[Any] = []
        self.cleanup_task: Optional[asyncio.Task] = None

    def add(self, handle: Any) -> Any:
        self._handles.append(handle)
        return handle

    @property
    def handles(self) -> List[Any]:
        return list(self._handles)

    def release(self) -> Optional[asyncio.Task]:
        """Schedule disposal of everything collected so far and forget it."""
        handles, self._handles = self._handles, []
        if not handles:
            return None
        task = asyncio.ensure_future(_dispose_all(handles))
        _pending_cleanups.add(task)
        task.add_done_callback(_pending_cleanups.discard)
        self.cleanup_task = task
        return task

    async def __aenter__(self) -> "HandleScope":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        self.release()
        return False


__all__ = ["HandleScope"]
