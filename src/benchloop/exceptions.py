"""
benchloop Exception Hierarchy

Precondition violations (advancing a finished context, querying an
unfinished one, feeding meaningless values to a barrier) are benchmark
author bugs. They subclass the matching builtin so they read as assertion
or type failures and are never caught by the harness.
"""
from __future__ import annotations

from typing import Any, Optional


class BenchloopError(Exception):
    """Base exception for all benchloop errors.

    Attributes:
        message: Human-readable error description.
        context: Optional dict of additional context for debugging.
    """

    def __init__(
        self,
        message: str,
        *,
        context: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __repr__(self) -> str:
        """Detailed representation for debugging."""
        ctx_str = f", context={self.context}" if self.context else ""
        return f"{self.__class__.__name__}({self.message!r}{ctx_str})"


class ContextStateError(BenchloopError, AssertionError):
    """Raised when a Context is driven outside its lifecycle.

    Attributes:
        phase: Phase the context was in.
        operation: Operation that was attempted.
    """

    def __init__(
        self,
        operation: str,
        phase: str,
        *,
        message: Optional[str] = None,
    ) -> None:
        self.operation = operation
        self.phase = phase

        if message is None:
            message = f"Cannot {operation} while context is {phase}"

        super().__init__(
            message,
            context={"operation": operation, "phase": phase},
        )


class UnsupportedValueError(BenchloopError, TypeError):
    """Raised when do_not_optimize receives a value it cannot mark as used.

    Attributes:
        kind: Name of the rejected value kind.
    """

    def __init__(
        self,
        kind: str,
        *,
        message: Optional[str] = None,
    ) -> None:
        self.kind = kind

        if message is None:
            message = f"do_not_optimize is not implemented for {kind}"

        super().__init__(message, context={"kind": kind})


class WorkloadSignatureError(BenchloopError, TypeError):
    """Raised when a workload or its arguments do not fit the entry point.

    Attributes:
        workload: Qualified name of the workload.
    """

    def __init__(self, workload: str, message: str) -> None:
        self.workload = workload
        super().__init__(message, context={"workload": workload})


class ConfigError(BenchloopError, ValueError):
    """Raised for invalid harness configuration."""
