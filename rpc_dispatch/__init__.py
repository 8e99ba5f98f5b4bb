"""rpc-dispatch: transport-agnostic procedure dispatch.

A transport binding supplies four functions (identity extraction, params
extraction, error recovery, result encoding); :class:`ProcedureServer`
matches requests to registered procedures, decodes parameters, runs the
implementation under the middleware chain and encodes the outcome.
"""

from rpc_dispatch.constants import PACKAGE_VERSION
from rpc_dispatch.errors import ConfigurationError, DispatchBaseError, RegistrationError
from rpc_dispatch.middleware import (
    AccessLogMiddleware,
    RecoveryMiddleware,
    TimeoutMiddleware,
    build_chain,
)
from rpc_dispatch.procedure import (
    Codec,
    DecodeError,
    Procedure,
    ProcedureIdentity,
    ProcedureKind,
    declare,
    mutation,
    query,
)
from rpc_dispatch.result import Err, Ok, Result
from rpc_dispatch.server import (
    GetIdentityError,
    GetParamsError,
    ParamsDecodeError,
    ProcedureExecError,
    ProcedureRegistration,
    ProcedureServer,
    ProcedureServerDefinition,
    ServerError,
    WrongProcedure,
    serve,
)

__version__ = PACKAGE_VERSION

__all__ = [
    "AccessLogMiddleware",
    "Codec",
    "ConfigurationError",
    "DecodeError",
    "DispatchBaseError",
    "Err",
    "GetIdentityError",
    "GetParamsError",
    "Ok",
    "ParamsDecodeError",
    "Procedure",
    "ProcedureExecError",
    "ProcedureIdentity",
    "ProcedureKind",
    "ProcedureRegistration",
    "ProcedureServer",
    "ProcedureServerDefinition",
    "RecoveryMiddleware",
    "RegistrationError",
    "Result",
    "ServerError",
    "TimeoutMiddleware",
    "WrongProcedure",
    "build_chain",
    "declare",
    "mutation",
    "query",
    "serve",
]
