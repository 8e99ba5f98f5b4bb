"""Recovery middleware — exception safety net.

Dispatch itself never raises, but the functions a caller plugs in
(transport definition, context factory, implementations) might.  This
layer catches anything they leak and turns it into a response so the
transport always gets a well-formed reply.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from rpc_dispatch.middleware.chain import Handler

logger = logging.getLogger(__name__)


class RecoveryMiddleware:
    """Wrap the chain in a try/except and answer via *fallback*.

    Parameters
    ----------
    fallback:
        ``(request, exc) -> response`` built from the caught exception.
    log_tracebacks:
        Attach the traceback to the error record.
    """

    def __init__(
        self,
        fallback: Callable[[Any, Exception], Any],
        *,
        log_tracebacks: bool = True,
    ) -> None:
        self._fallback = fallback
        self._log_tracebacks = log_tracebacks

    async def __call__(self, request: Any, next_handler: Handler) -> Any:
        try:
            return await next_handler(request)
        except Exception as exc:
            logger.error(
                "Recovery caught %s while handling %r: %s",
                type(exc).__name__,
                request,
                exc,
                exc_info=self._log_tracebacks,
            )
            return self._fallback(request, exc)
