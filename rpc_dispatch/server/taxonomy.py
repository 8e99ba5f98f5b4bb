"""Closed set of dispatch failures handed to ``recover_error``.

Exactly one of these reaches the caller for every failing request.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, Optional, Tuple, TypeVar, Union

from rpc_dispatch.procedure.codec import DecodeError
from rpc_dispatch.procedure.identity import ProcedureIdentity

E = TypeVar("E")


@dataclass(frozen=True)
class WrongProcedure:
    """No registration matched the resolved identity."""

    identity: Optional[ProcedureIdentity] = field(default=None, compare=False)


@dataclass(frozen=True)
class ProcedureExecError(Generic[E]):
    """The implementation returned a failure."""

    error: E


@dataclass(frozen=True)
class GetParamsError(Generic[E]):
    """The transport could not extract raw parameters."""

    error: E


@dataclass(frozen=True)
class ParamsDecodeError:
    """The extracted generic value did not convert to the parameter type."""

    errors: Tuple[DecodeError, ...]


@dataclass(frozen=True)
class GetIdentityError(Generic[E]):
    """The transport could not extract a procedure identity."""

    error: E


ServerError = Union[
    WrongProcedure,
    ProcedureExecError[E],
    GetParamsError[E],
    ParamsDecodeError,
    GetIdentityError[E],
]
