"""
Benchmark results and report formatting.

This module provides:
- BenchmarkResult: Outcome of one finished Context
- select_unit(): Pick the display unit for an average
- format_arg_label(): Render a benchmark argument for a report label
- print_line(): Default report sink (stdout)
"""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

import torch

from benchloop.config import BenchConfig
from benchloop.context import Context
from benchloop.enums import TimeUnit

logger = logging.getLogger(__name__)

Emitter = Callable[[str], None]

_SCALAR_TYPES = (bool, int, float, complex, str)


def select_unit(average_ns: float, config: BenchConfig) -> TimeUnit:
    """Select the display unit for an average given in nanoseconds.

    A value exactly on a threshold reports in the smaller unit.

    Args:
        average_ns: Average time in nanoseconds.
        config: Supplies the microsecond and millisecond thresholds.

    Returns:
        TimeUnit to report in.
    """
    if average_ns <= config.us_threshold_ns:
        return TimeUnit.NS
    if average_ns <= config.ms_threshold_ns:
        return TimeUnit.US
    return TimeUnit.MS


def is_type_descriptor(value: Any) -> bool:
    """Whether ``value`` is a type-level argument (a class or torch dtype)."""
    return isinstance(value, (type, torch.dtype))


def format_arg_label(arg: Any) -> str:
    """Render a benchmark argument for a report label.

    Type descriptors render as their name and scalars as their value.
    Everything else renders as its type name so collections and tensors
    never end up dumped into the report.
    """
    if isinstance(arg, type):
        return arg.__qualname__
    if isinstance(arg, torch.dtype):
        return str(arg)
    if isinstance(arg, enum.Enum):
        return str(arg.value)
    if isinstance(arg, _SCALAR_TYPES):
        return str(arg)
    return type(arg).__qualname__


def print_line(line: str) -> None:
    """Write a report line to stdout."""
    print(line, flush=True)


@dataclass
class BenchmarkResult:
    """Result of a benchmark run.

    Attributes:
        name: Benchmark name.
        label: Name as reported, including the argument label if any.
        argument: Argument the workload ran with, None for plain benchmarks.
        iterations: Iterations in the measured window.
        warmup_iterations: Iterations spent heating.
        elapsed_ns: Measured nanoseconds.
        average_ns: Average nanoseconds per iteration.
        unit: Display unit chosen for the average.
        precision: Decimal places in the report line.
    """

    name: str
    label: str
    argument: Any
    iterations: int
    warmup_iterations: int
    elapsed_ns: int
    average_ns: float
    unit: TimeUnit
    precision: int = 3

    @classmethod
    def from_context(
        cls,
        name: str,
        ctx: Context,
        argument: Any = None,
        arg_label: Optional[str] = None,
    ) -> "BenchmarkResult":
        """Build a result from a finished context.

        Args:
            name: Benchmark name.
            ctx: Finished context.
            argument: Argument passed to the workload.
            arg_label: Rendered argument, appended to the name as ``<...>``.

        Returns:
            BenchmarkResult instance.
        """
        average_ns = ctx.average_time(1)
        assert average_ns >= 0
        label = name if arg_label is None else f"{name} <{arg_label}>"
        return cls(
            name=name,
            label=label,
            argument=argument,
            iterations=ctx.iterations,
            warmup_iterations=ctx.warmup_iterations,
            elapsed_ns=ctx.elapsed_ns,
            average_ns=average_ns,
            unit=select_unit(average_ns, ctx.config),
            precision=ctx.config.precision,
        )

    def average(self, unit: TimeUnit | None = None) -> float:
        """Average per iteration in ``unit`` (the display unit by default)."""
        unit = unit or self.unit
        return self.elapsed_ns / unit.divisor / self.iterations

    def format_line(self) -> str:
        """Render the report line.

        Returns:
            ``"<label>: avg <value><unit> (<iterations> iterations)"``
        """
        return (
            f"{self.label}: avg {self.average():.{self.precision}f}"
            f"{self.unit.value} ({self.iterations} iterations)"
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert result to dictionary.

        The argument is stored as its label.
        """
        return {
            "name": self.name,
            "label": self.label,
            "argument": None if self.argument is None else format_arg_label(self.argument),
            "iterations": self.iterations,
            "warmup_iterations": self.warmup_iterations,
            "elapsed_ns": self.elapsed_ns,
            "average_ns": self.average_ns,
            "unit": self.unit.value,
            "precision": self.precision,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BenchmarkResult":
        """Create result from dictionary."""
        return cls(
            name=data["name"],
            label=data["label"],
            argument=data.get("argument"),
            iterations=data["iterations"],
            warmup_iterations=data["warmup_iterations"],
            elapsed_ns=data["elapsed_ns"],
            average_ns=data["average_ns"],
            unit=TimeUnit(data["unit"]),
            precision=data.get("precision", 3),
        )

    def emit(self, emit: Optional[Emitter] = None) -> None:
        """Send the report line to ``emit`` (stdout by default) and the log."""
        line = self.format_line()
        logger.info("%s", line)
        (emit or print_line)(line)
