"""
Error types for the RDS probe handler.

Every step of an invocation (secret lookup, connect, schema, insert, select)
reports failure as an `OperationFailure`. The handler catches it once and maps
it to a 500 response; nothing is retried.
"""

from __future__ import annotations

from typing import Optional

STEP_SECRET = "secret"
STEP_CONNECT = "connect"
STEP_SCHEMA = "schema"
STEP_INSERT = "insert"
STEP_SELECT = "select"
STEP_UNEXPECTED = "unexpected"


class OperationFailure(Exception):
    """
    A terminal failure of one invocation step.

    Attributes
    ----------
    message : str
        Human-readable description, surfaced verbatim as the response `error`.
    step : str
        Which step failed (one of the STEP_* constants).
    cause : BaseException, optional
        The underlying library exception, if any.
    """

    def __init__(
        self,
        message: str,
        step: str = STEP_UNEXPECTED,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.step = step
        self.cause = cause

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"OperationFailure(step={self.step!r}, message={self.message!r})"


__all__ = [
    "OperationFailure",
    "STEP_SECRET",
    "STEP_CONNECT",
    "STEP_SCHEMA",
    "STEP_INSERT",
    "STEP_SELECT",
    "STEP_UNEXPECTED",
]
