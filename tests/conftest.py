"""Shared fixtures: an in-memory JSON transport binding.

Requests carry a procedure name and a raw JSON string; responses are
JSON strings.  Errors are rendered as ``{"error": <kind>, ...}``.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Optional
from unittest.mock import MagicMock

import pytest

from rpc_dispatch import (
    Err,
    GetIdentityError,
    GetParamsError,
    Ok,
    ParamsDecodeError,
    ProcedureExecError,
    ProcedureIdentity,
    ProcedureKind,
    ProcedureServer,
    ProcedureServerDefinition,
)


@dataclass(frozen=True)
class JsonRequest:
    """Minimal transport request: procedure name plus raw JSON params."""

    name: Optional[str]
    raw: Optional[str] = None
    kind: ProcedureKind = ProcedureKind.QUERY
    router: Optional[str] = None
    user: str = "anonymous"


def get_identity(request: JsonRequest) -> Any:
    if not request.name:
        return Err("missing procedure name")
    return Ok(ProcedureIdentity(name=request.name, kind=request.kind, router=request.router))


def get_params(request: JsonRequest, kind: ProcedureKind, descriptor: Any) -> Any:
    if request.raw is None:
        return Err("missing params")
    try:
        return Ok(json.loads(request.raw))
    except json.JSONDecodeError as exc:
        return Err(f"invalid JSON: {exc.msg}")


def recover_error(err: Any) -> str:
    body: dict = {"error": type(err).__name__}
    if isinstance(err, (ProcedureExecError, GetParamsError, GetIdentityError)):
        body["detail"] = err.error
    elif isinstance(err, ParamsDecodeError):
        body["detail"] = [str(e) for e in err.errors]
    return json.dumps(body)


def encode_result(value: Any) -> str:
    return json.dumps(value)


@pytest.fixture()
def make_request():
    return JsonRequest


@pytest.fixture()
def definition() -> ProcedureServerDefinition:
    """JSON definition whose four functions are spies around the real ones."""
    return ProcedureServerDefinition(
        get_identity=MagicMock(side_effect=get_identity),
        get_params=MagicMock(side_effect=get_params),
        recover_error=MagicMock(side_effect=recover_error),
        encode_result=MagicMock(side_effect=encode_result),
    )


@pytest.fixture()
def server(definition: ProcedureServerDefinition) -> ProcedureServer:
    return ProcedureServer.create(definition)
