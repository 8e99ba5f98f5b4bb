"""Procedure declarations: identity plus parameter and return codecs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar

from rpc_dispatch.procedure.codec import Codec, TypeDescriptor
from rpc_dispatch.procedure.identity import ProcedureIdentity, ProcedureKind

P = TypeVar("P")
R = TypeVar("R")


@dataclass(frozen=True)
class Procedure(Generic[P, R]):
    """An immutable procedure declaration.

    Attributes:
        identity: Lookup key matched against incoming requests.
        params_codec: Converts generic values into the parameter type.
        returns_codec: Converts the return type into generic values.
    """

    identity: ProcedureIdentity
    params_codec: Codec[P]
    returns_codec: Codec[R]

    @property
    def name(self) -> str:
        return self.identity.name

    @property
    def kind(self) -> ProcedureKind:
        return self.identity.kind

    @property
    def router(self) -> Optional[str]:
        return self.identity.router

    @property
    def params_type(self) -> TypeDescriptor:
        """Type descriptor handed to the transport's ``get_params``."""
        return self.params_codec.descriptor

    @property
    def returns_type(self) -> TypeDescriptor:
        return self.returns_codec.descriptor


def declare(
    name: str,
    kind: ProcedureKind,
    params: Any,
    returns: Any,
    router: Optional[str] = None,
) -> Procedure[Any, Any]:
    """Declare a procedure of any *kind*; *params*/*returns* are Python types."""
    return Procedure(
        identity=ProcedureIdentity(name=name, kind=kind, router=router),
        params_codec=Codec(params),
        returns_codec=Codec(returns),
    )


def query(name: str, params: Any, returns: Any, router: Optional[str] = None) -> Procedure[Any, Any]:
    return declare(name, ProcedureKind.QUERY, params, returns, router=router)


def mutation(
    name: str, params: Any, returns: Any, router: Optional[str] = None
) -> Procedure[Any, Any]:
    return declare(name, ProcedureKind.MUTATION, params, returns, router=router)
