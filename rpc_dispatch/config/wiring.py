"""Apply :class:`DispatchSettings`: logging plus the built-in middlewares."""

from __future__ import annotations

import logging
from typing import Any, Callable, List, Optional

from rpc_dispatch.config.schema import DispatchSettings
from rpc_dispatch.errors import ConfigurationError
from rpc_dispatch.logging_config import setup_logging
from rpc_dispatch.middleware.access_log import AccessLogMiddleware
from rpc_dispatch.middleware.recovery import RecoveryMiddleware
from rpc_dispatch.middleware.timeout import TimeoutMiddleware

logger = logging.getLogger(__name__)


def middlewares_from_settings(
    settings: DispatchSettings,
    *,
    timeout_fallback: Optional[Callable[[Any], Any]] = None,
    recovery_fallback: Optional[Callable[[Any, Exception], Any]] = None,
    describe: Callable[[Any], str] = repr,
) -> List[Any]:
    """Return the enabled middlewares in ``with_middlewares`` order.

    The list runs innermost to outermost (timeout, access log, recovery):
    ``ProcedureServer.with_middlewares`` adds them one by one, and the last
    one added runs first.

    Raises:
        ConfigurationError: A layer is enabled but its fallback is missing.
    """
    layers: List[Any] = []

    if settings.timeout.seconds is not None:
        if timeout_fallback is None:
            raise ConfigurationError("timeout.seconds is set but no timeout_fallback was given")
        layers.append(TimeoutMiddleware(settings.timeout.seconds, timeout_fallback))

    if settings.access_log.enabled:
        layers.append(
            AccessLogMiddleware(describe=describe, slow_call_ms=settings.access_log.slow_call_ms)
        )

    if settings.recovery.enabled:
        if recovery_fallback is None:
            raise ConfigurationError("recovery is enabled but no recovery_fallback was given")
        layers.append(
            RecoveryMiddleware(recovery_fallback, log_tracebacks=settings.recovery.log_tracebacks)
        )

    logger.debug("Configured middlewares: %s", [type(mw).__name__ for mw in layers])
    return layers


def configure(
    settings: DispatchSettings,
    *,
    log_file: Optional[str] = None,
    timeout_fallback: Optional[Callable[[Any], Any]] = None,
    recovery_fallback: Optional[Callable[[Any, Exception], Any]] = None,
    describe: Callable[[Any], str] = repr,
) -> List[Any]:
    """Set up logging at ``settings.log_level`` and build the middlewares.

    The fallbacks are checked before logging is touched, so a rejected
    settings document leaves the logging configuration as it was.

    Raises:
        ConfigurationError: See :func:`middlewares_from_settings`.
    """
    layers = middlewares_from_settings(
        settings,
        timeout_fallback=timeout_fallback,
        recovery_fallback=recovery_fallback,
        describe=describe,
    )
    setup_logging(settings.log_level, log_file=log_file)
    return layers
