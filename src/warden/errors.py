"""
Error taxonomy for Warden.

Every failure surfaced by the facade is one of three kinds:
- ConfigurationError: bad endpoint, unknown option, gas ceiling too low
- TransportError: an RPC call failed or returned nothing
- ValidationError: an amount or address violates its preconditions

Each class carries the exit code the CLI uses when it aborts.
"""

from __future__ import annotations


class WardenError(RuntimeError):
    exit_code: int = 1


class ConfigurationError(WardenError):
    exit_code = 2


class TransportError(WardenError):
    """Raised when a chain query fails.

    The failed operation is kept on ``operation``; the underlying
    exception, if any, is chained as ``__cause__``.
    """

    exit_code = 3

    def __init__(self, operation: str, detail: str | None = None) -> None:
        self.operation = operation
        message = operation if detail is None else f"{operation}: {detail}"
        super().__init__(message)


class ValidationError(WardenError, ValueError):
    exit_code = 4
