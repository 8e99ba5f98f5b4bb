"""Timeout middleware — bound the rest of the pipeline by a deadline.

Dispatch has no cancellation of its own; this layer runs the
continuation as a task, waits up to the deadline, and short-circuits with
a caller-built response only when the task is still pending.  Errors the
chain raises itself, ``TimeoutError`` included, propagate unchanged.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable

from rpc_dispatch.middleware.chain import Handler

logger = logging.getLogger(__name__)


class TimeoutMiddleware:
    """Cancel the downstream chain after *seconds* and answer via *on_timeout*.

    Parameters
    ----------
    seconds:
        Deadline for everything inside this layer.
    on_timeout:
        ``(request) -> response`` used when the deadline passes.
    """

    def __init__(self, seconds: float, on_timeout: Callable[[Any], Any]) -> None:
        if seconds <= 0:
            raise ValueError(f"timeout must be positive, got {seconds!r}")
        self._seconds = seconds
        self._on_timeout = on_timeout

    @property
    def seconds(self) -> float:
        return self._seconds

    async def __call__(self, request: Any, next_handler: Handler) -> Any:
        task = asyncio.ensure_future(next_handler(request))
        try:
            done, _ = await asyncio.wait({task}, timeout=self._seconds)
        except asyncio.CancelledError:
            task.cancel()
            raise

        if task in done:
            return task.result()

        task.cancel()
        await asyncio.wait({task})
        logger.warning("Request timed out after %.3fs: %r", self._seconds, request)
        return self._on_timeout(request)
