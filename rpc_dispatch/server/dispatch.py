"""Dispatch engine: request → identity → registration → params → outcome.

Every branch ends in exactly one response value.  Failures are mapped to a
single :mod:`~rpc_dispatch.server.taxonomy` member and passed through the
definition's ``recover_error``; successes go through ``encode_result``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Awaitable, Callable

from rpc_dispatch.middleware.chain import build_chain
from rpc_dispatch.result import Err
from rpc_dispatch.server.taxonomy import GetIdentityError, GetParamsError, WrongProcedure

if TYPE_CHECKING:
    from rpc_dispatch.server.server import ProcedureServer

logger = logging.getLogger(__name__)


def serve(server: ProcedureServer[Any, Any, Any, Any]) -> Callable[[Any], Awaitable[Any]]:
    """Return an async ``In -> Out`` callable for *server*.

    The middleware and registration tuples are captured as they are now;
    later builder steps produce new servers and do not affect the returned
    callable.
    """
    definition = server.definition
    context_factory = server.context_factory

    async def dispatch(request: Any) -> Any:
        ctx = context_factory(request)

        identity_result = definition.get_identity(request)
        if isinstance(identity_result, Err):
            logger.debug("Identity extraction failed: %r", identity_result.error)
            return definition.recover_error(GetIdentityError(error=identity_result.error))
        identity = identity_result.value

        registration = server.find_registration(identity)
        if registration is None:
            logger.info("No procedure registered for %s", identity)
            return definition.recover_error(WrongProcedure(identity=identity))

        params_result = registration.get_params(request)
        if isinstance(params_result, Err):
            logger.debug("Params extraction for %s failed: %r", identity, params_result.error)
            return definition.recover_error(GetParamsError(error=params_result.error))

        logger.debug("Executing %s", identity)
        outcome = await registration.exec(params_result.value, ctx)
        if isinstance(outcome, Err):
            logger.debug("%s finished with %s", identity, type(outcome.error).__name__)
            return definition.recover_error(outcome.error)
        return definition.encode_result(outcome.value)

    return build_chain(server.middlewares, dispatch)
