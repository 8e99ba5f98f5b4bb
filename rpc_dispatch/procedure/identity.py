"""Procedure identity: the structural key used to match requests."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ProcedureKind(str, Enum):
    """How a procedure is invoked; transports may route kinds differently."""

    QUERY = "query"
    MUTATION = "mutation"
    SUBSCRIPTION = "subscription"


@dataclass(frozen=True)
class ProcedureIdentity:
    """Name, optional router namespace and kind of a declared procedure.

    Equality and hashing are structural, so two identities built from the
    same parts are interchangeable as lookup keys.
    """

    name: str
    kind: ProcedureKind = ProcedureKind.QUERY
    router: Optional[str] = None

    @property
    def qualified_name(self) -> str:
        """``router.name`` when namespaced, otherwise ``name``."""
        if self.router:
            return f"{self.router}.{self.name}"
        return self.name

    def __str__(self) -> str:
        return f"{self.kind.value} {self.qualified_name}"
