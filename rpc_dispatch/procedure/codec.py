"""Conversion between generic values and typed parameters/results.

A *generic value* is JSON-compatible Python data (``None``, ``bool``,
``int``, ``float``, ``str``, ``list``, ``dict``).  :class:`Codec` uses a
Pydantic :class:`~pydantic.TypeAdapter` to validate generic values into a
declared Python type and to dump typed values back out.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Generic, List, Tuple, TypeVar, Union

from pydantic import TypeAdapter, ValidationError

from rpc_dispatch.result import Err, Ok, Result

T = TypeVar("T")

GenericValue = Any
TypeDescriptor = Dict[str, Any]


@dataclass(frozen=True)
class DecodeError:
    """One structured conversion failure.

    Attributes:
        loc: Path to the offending value (empty for the root).
        message: Human-readable description.
        kind: Machine-readable error type (Pydantic's ``type`` field).
    """

    loc: Tuple[Union[str, int], ...]
    message: str
    kind: str

    def __str__(self) -> str:
        where = " → ".join(str(part) for part in self.loc) or "<root>"
        return f"{where}: {self.message}"


def decode_errors_from(exc: ValidationError) -> List[DecodeError]:
    """Flatten a Pydantic :class:`ValidationError` into :class:`DecodeError` records."""
    return [
        DecodeError(loc=tuple(err["loc"]), message=err["msg"], kind=err["type"])
        for err in exc.errors()
    ]


class Codec(Generic[T]):
    """Typed view over generic values for a single Python type."""

    __slots__ = ("_adapter", "_python_type")

    def __init__(self, python_type: Any) -> None:
        self._python_type = python_type
        self._adapter: TypeAdapter[T] = TypeAdapter(python_type)

    @property
    def python_type(self) -> Any:
        return self._python_type

    @property
    def descriptor(self) -> TypeDescriptor:
        """JSON schema describing the accepted generic values."""
        return self._adapter.json_schema()

    def decode(self, value: GenericValue) -> Result[T, List[DecodeError]]:
        try:
            return Ok(self._adapter.validate_python(value))
        except ValidationError as exc:
            return Err(decode_errors_from(exc))

    def encode(self, value: T) -> GenericValue:
        return self._adapter.dump_python(value, mode="json")

    def __repr__(self) -> str:
        return f"Codec({getattr(self._python_type, '__name__', self._python_type)!r})"
