"""Server subpackage - registration, the error taxonomy and dispatch."""

from rpc_dispatch.server.definition import (
    ProcedureRegistration,
    ProcedureServerDefinition,
    make_registration,
)
from rpc_dispatch.server.dispatch import serve
from rpc_dispatch.server.server import ProcedureServer
from rpc_dispatch.server.taxonomy import (
    GetIdentityError,
    GetParamsError,
    ParamsDecodeError,
    ProcedureExecError,
    ServerError,
    WrongProcedure,
)

__all__ = [
    "GetIdentityError",
    "GetParamsError",
    "ParamsDecodeError",
    "ProcedureExecError",
    "ProcedureRegistration",
    "ProcedureServer",
    "ProcedureServerDefinition",
    "ServerError",
    "WrongProcedure",
    "make_registration",
    "serve",
]
