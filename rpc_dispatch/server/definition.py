"""Transport contract and type-erased procedure registrations.

A transport binding supplies a :class:`ProcedureServerDefinition`;
:func:`make_registration` closes each typed implementation over its
procedure's codecs and stores only the generic-value surface.
"""

from __future__ import annotations

import functools
import inspect
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, List, TypeVar, Union

from rpc_dispatch.errors import RegistrationError
from rpc_dispatch.procedure.codec import DecodeError, GenericValue, TypeDescriptor
from rpc_dispatch.procedure.declaration import Procedure
from rpc_dispatch.procedure.identity import ProcedureIdentity, ProcedureKind
from rpc_dispatch.result import Err, Ok, Result
from rpc_dispatch.server.taxonomy import ParamsDecodeError, ProcedureExecError, ServerError

logger = logging.getLogger(__name__)

In = TypeVar("In")
Out = TypeVar("Out")
Ctx = TypeVar("Ctx")
E = TypeVar("E")

GetIdentityFn = Callable[[Any], Result[ProcedureIdentity, Any]]
GetParamsFn = Callable[[Any, ProcedureKind, TypeDescriptor], Result[GenericValue, Any]]
RecoverErrorFn = Callable[[Any], Any]
EncodeResultFn = Callable[[GenericValue], Any]

ImplementationFn = Callable[[Any, Any], Union[Awaitable[Result[Any, Any]], Result[Any, Any]]]
ExecFn = Callable[[GenericValue, Any], Awaitable[Result[GenericValue, Any]]]


@dataclass(frozen=True)
class ProcedureServerDefinition(Generic[In, Out, E]):
    """The four functions a transport binding supplies.

    Attributes:
        get_identity: ``In -> Result[ProcedureIdentity, E]``.
        get_params: ``(In, ProcedureKind, TypeDescriptor) -> Result[GenericValue, E]``.
        recover_error: ``ServerError[E] -> Out``.
        encode_result: ``GenericValue -> Out``.
    """

    get_identity: GetIdentityFn
    get_params: GetParamsFn
    recover_error: RecoverErrorFn
    encode_result: EncodeResultFn


@dataclass(frozen=True)
class ProcedureRegistration(Generic[In, Ctx, E]):
    """A stored binding of an identity to its extraction and execution logic."""

    identity: ProcedureIdentity
    get_params: Callable[[In], Result[GenericValue, E]]
    exec: ExecFn


def _decode_failure(errors: List[DecodeError]) -> Err[ServerError[Any]]:
    return Err(ParamsDecodeError(errors=tuple(errors)))


def make_registration(
    definition: ProcedureServerDefinition[Any, Any, Any],
    procedure: Procedure[Any, Any],
    implementation: ImplementationFn,
) -> ProcedureRegistration[Any, Any, Any]:
    """Build the type-erased registration for *procedure*.

    ``get_params`` is the definition's ``get_params`` partially applied
    with the procedure's kind and parameter descriptor.  ``exec`` decodes
    the generic value, runs *implementation* only when decoding succeeds,
    encodes a successful return and maps implementation failures to
    :class:`ProcedureExecError`.

    Raises:
        RegistrationError: *procedure* is not a :class:`Procedure` or
            *implementation* is not callable.
    """
    if not isinstance(procedure, Procedure):
        raise RegistrationError(f"expected a Procedure declaration, got {type(procedure).__name__}")
    if not callable(implementation):
        raise RegistrationError("implementation is not callable", procedure_name=procedure.name)

    identity = procedure.identity
    params_codec = procedure.params_codec
    returns_codec = procedure.returns_codec

    get_params = functools.partial(
        _call_get_params,
        definition.get_params,
        procedure.kind,
        procedure.params_type,
    )

    async def exec_(value: GenericValue, ctx: Any) -> Result[GenericValue, ServerError[Any]]:
        decoded = params_codec.decode(value)
        if isinstance(decoded, Err):
            logger.debug("Params for %s failed to decode: %s", identity, decoded.error)
            return _decode_failure(decoded.error)

        outcome = implementation(decoded.value, ctx)
        if inspect.isawaitable(outcome):
            outcome = await outcome

        if isinstance(outcome, Ok):
            return Ok(returns_codec.encode(outcome.value))
        if isinstance(outcome, Err):
            return Err(ProcedureExecError(error=outcome.error))
        raise TypeError(
            f"Implementation of {identity} must return Ok or Err, got {type(outcome).__name__}"
        )

    return ProcedureRegistration(identity=identity, get_params=get_params, exec=exec_)


def _call_get_params(
    get_params: GetParamsFn,
    kind: ProcedureKind,
    descriptor: TypeDescriptor,
    request: Any,
) -> Result[GenericValue, Any]:
    return get_params(request, kind, descriptor)
