"""Custom exception classes for rpc-dispatch.

Dispatch failures never surface as exceptions: they are
:mod:`rpc_dispatch.server.taxonomy` values handed to the caller's
``recover_error``.  The classes below cover library misuse and
configuration problems only.
"""

from typing import Optional


class DispatchBaseError(Exception):
    """Base class for all custom exceptions in rpc-dispatch."""

    pass


class ConfigurationError(DispatchBaseError):
    """Raised when loading or validating a settings file fails."""

    pass


class RegistrationError(DispatchBaseError):
    """
    Raised when a procedure cannot be registered on a server,
    e.g. the declaration is not a Procedure or the implementation
    is not callable.
    """

    def __init__(self, message: str, procedure_name: Optional[str] = None):
        self.procedure_name = procedure_name

        full_msg = "Registration error"
        if procedure_name:
            full_msg += f" (procedure: {procedure_name})"
        full_msg += f": {message}"
        super().__init__(full_msg)
