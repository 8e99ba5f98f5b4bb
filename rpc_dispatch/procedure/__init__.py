"""Procedure declarations, identities and codecs."""

from rpc_dispatch.procedure.codec import (
    Codec,
    DecodeError,
    GenericValue,
    TypeDescriptor,
    decode_errors_from,
)
from rpc_dispatch.procedure.declaration import Procedure, declare, mutation, query
from rpc_dispatch.procedure.identity import ProcedureIdentity, ProcedureKind

__all__ = [
    "Codec",
    "DecodeError",
    "GenericValue",
    "Procedure",
    "ProcedureIdentity",
    "ProcedureKind",
    "TypeDescriptor",
    "declare",
    "decode_errors_from",
    "mutation",
    "query",
]
