"""Access log middleware — one record per request with elapsed time.

Requests slower than ``slow_call_ms`` are logged at WARNING so they
stand out from the INFO stream.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Optional

from rpc_dispatch.middleware.chain import Handler

logger = logging.getLogger("rpc_dispatch.access")


class AccessLogMiddleware:
    """Log request start and completion.

    Parameters
    ----------
    describe:
        Renders a request for the log line; defaults to :func:`repr`.
    slow_call_ms:
        Threshold above which completion is logged at WARNING.
        ``None`` disables the check.
    """

    def __init__(
        self,
        describe: Callable[[Any], str] = repr,
        slow_call_ms: Optional[float] = None,
    ) -> None:
        self._describe = describe
        self._slow_call_ms = slow_call_ms

    async def __call__(self, request: Any, next_handler: Handler) -> Any:
        label = self._describe(request)
        logger.debug("REQUEST  %s", label)
        start = time.monotonic()
        try:
            return await next_handler(request)
        finally:
            elapsed_ms = (time.monotonic() - start) * 1000.0
            if self._slow_call_ms is not None and elapsed_ms > self._slow_call_ms:
                logger.warning("SLOW     %s elapsed_ms=%.1f", label, elapsed_ms)
            else:
                logger.info("RESPONSE %s elapsed_ms=%.1f", label, elapsed_ms)
