"""Middleware chain for composable request processing.

Middleware wrap dispatch in layers that can inspect, transform or answer
a request before it reaches a procedure, and inspect the response on the
way back.

Public API
----------
- :data:`Handler` / :data:`Middleware` — Async callable protocols
- :func:`build_chain` — Compose a sequence of middleware around a handler
- :class:`AccessLogMiddleware` — Per-request access logging
- :class:`RecoveryMiddleware` — Exception safety net
- :class:`TimeoutMiddleware` — Deadline for the downstream chain
"""

from rpc_dispatch.middleware.access_log import AccessLogMiddleware
from rpc_dispatch.middleware.chain import Handler, Middleware, build_chain
from rpc_dispatch.middleware.recovery import RecoveryMiddleware
from rpc_dispatch.middleware.timeout import TimeoutMiddleware

__all__ = [
    "AccessLogMiddleware",
    "Handler",
    "Middleware",
    "RecoveryMiddleware",
    "TimeoutMiddleware",
    "build_chain",
]
