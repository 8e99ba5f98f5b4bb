"""Immutable, incrementally built procedure server.

Each builder method returns a new :class:`ProcedureServer`; the receiver
is never modified, so a partially built server can serve as a template
for several variants.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, Iterable, Optional, Tuple, TypeVar

from rpc_dispatch.procedure.declaration import Procedure
from rpc_dispatch.procedure.identity import ProcedureIdentity
from rpc_dispatch.server.definition import (
    ImplementationFn,
    ProcedureRegistration,
    ProcedureServerDefinition,
    make_registration,
)
from rpc_dispatch.server.dispatch import serve

logger = logging.getLogger(__name__)

In = TypeVar("In")
Out = TypeVar("Out")
Ctx = TypeVar("Ctx")
E = TypeVar("E")


def _identity_context(request: Any) -> Any:
    return request


@dataclass(frozen=True)
class ProcedureServer(Generic[In, Out, Ctx, E]):
    """Definition, context factory, middlewares and registrations.

    ``middlewares`` and ``implementations`` are stored most-recent-first.
    Lookup returns the first structural identity match in that order, so
    the most recently registered implementation of an identity wins.
    """

    definition: ProcedureServerDefinition[In, Out, E]
    context_factory: Callable[[In], Ctx] = _identity_context
    middlewares: Tuple[Any, ...] = ()
    implementations: Tuple[ProcedureRegistration[In, Ctx, E], ...] = ()

    @classmethod
    def create(
        cls,
        definition: ProcedureServerDefinition[In, Out, E],
        context_factory: Optional[Callable[[In], Ctx]] = None,
    ) -> ProcedureServer[In, Out, Ctx, E]:
        """Start an empty server; the context defaults to the raw request."""
        return cls(definition=definition, context_factory=context_factory or _identity_context)

    # ── Builder steps ────────────────────────────────────────────────

    def with_context(self, context_factory: Callable[[In], Any]) -> ProcedureServer[In, Out, Any, E]:
        return dataclasses.replace(self, context_factory=context_factory)

    def with_middleware(self, middleware: Any) -> ProcedureServer[In, Out, Ctx, E]:
        """Return a server whose chain runs *middleware* before all existing ones."""
        return dataclasses.replace(self, middlewares=(middleware,) + self.middlewares)

    def with_middlewares(self, middlewares: Iterable[Any]) -> ProcedureServer[In, Out, Ctx, E]:
        """Add each of *middlewares* in order; the last one ends up outermost."""
        server = self
        for mw in middlewares:
            server = server.with_middleware(mw)
        return server

    def with_implementation(
        self,
        procedure: Procedure[Any, Any],
        implementation: ImplementationFn,
    ) -> ProcedureServer[In, Out, Ctx, E]:
        """Return a server with *implementation* registered for *procedure*.

        Raises:
            RegistrationError: The declaration or implementation is invalid.
        """
        registration = make_registration(self.definition, procedure, implementation)
        if self.find_registration(registration.identity) is not None:
            logger.debug(
                "%s registered again; the newest registration takes precedence.",
                procedure.identity,
            )
        return dataclasses.replace(
            self,
            implementations=(registration,) + self.implementations,
        )

    # ── Introspection ────────────────────────────────────────────────

    @property
    def identities(self) -> Tuple[ProcedureIdentity, ...]:
        return tuple(reg.identity for reg in self.implementations)

    def find_registration(
        self, identity: ProcedureIdentity
    ) -> Optional[ProcedureRegistration[In, Ctx, E]]:
        for registration in self.implementations:
            if registration.identity == identity:
                return registration
        return None

    def serve(self) -> Callable[[In], Awaitable[Out]]:
        return serve(self)

    def __repr__(self) -> str:
        return (
            f"ProcedureServer(procedures={len(self.implementations)}, "
            f"middlewares={len(self.middlewares)})"
        )
