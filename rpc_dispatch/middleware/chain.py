"""Core middleware chain infrastructure.

Defines the handler/middleware protocols and the chain builder that
composes middleware into a single async handler around dispatch.
"""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Protocol, Sequence

# ── Type protocol ────────────────────────────────────────────────────────


class Handler(Protocol):
    """Async callable that takes a request and returns a response."""

    async def __call__(self, request: Any) -> Any: ...


class Middleware(Protocol):
    """Async callable that wraps the next handler in the chain.

    A middleware either awaits ``next_handler`` (optionally with a
    transformed request) or short-circuits by returning a response itself.
    """

    async def __call__(self, request: Any, next_handler: Handler) -> Any: ...


# ── Chain builder ────────────────────────────────────────────────────────


def build_chain(
    middlewares: Sequence[Any],
    handler: Any,
) -> Callable[[Any], Awaitable[Any]]:
    """Compose *middlewares* around a final *handler*.

    Middleware are applied in sequence order: the first middleware is the
    outermost wrapper (executed first for requests, last for responses).

    Args:
        middlewares: Callables conforming to :class:`Middleware`.
        handler: The innermost handler (the dispatch engine).

    Returns:
        An async callable ``(request) -> response``.
    """
    chain = handler
    for mw in reversed(middlewares):
        next_handler = chain

        async def _wrap(
            request: Any,
            _mw: Any = mw,
            _next: Any = next_handler,
        ) -> Any:
            return await _mw(request, _next)

        chain = _wrap
    return chain
