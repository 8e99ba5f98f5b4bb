"""Success/failure values used for control flow throughout dispatch.

Every fallible step returns :class:`Ok` or :class:`Err` instead of
raising, so callers branch with ``isinstance`` (or ``match``).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful outcome carrying *value*."""

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def map(self, fn: Callable[[T], Any]) -> Ok[Any]:
        return Ok(fn(self.value))

    def map_err(self, fn: Callable[[Any], Any]) -> Ok[T]:
        return self


@dataclass(frozen=True)
class Err(Generic[E]):
    """Failed outcome carrying *error*."""

    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def map(self, fn: Callable[[Any], Any]) -> Err[E]:
        return self

    def map_err(self, fn: Callable[[E], Any]) -> Err[Any]:
        return Err(fn(self.error))


Result = Union[Ok[T], Err[E]]
