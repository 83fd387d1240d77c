"""
benchloop Core Enumerations

This module provides:
- Phase: Lifecycle stages of a measurement Context
- TimeUnit: Display units for reported averages
"""
from __future__ import annotations

from enum import Enum, unique


@unique
class Phase(str, Enum):
    """Measurement lifecycle phase of a Context.

    Phases only move forward, in declaration order.

    Members:
        IDLE: Freshly created, nothing measured yet
        HEATING: Warm-up, estimating the per-iteration cost
        RUNNING: Timed window with a planned iteration count
        FINISHED: Terminal; the average may be queried
    """

    IDLE = "idle"
    HEATING = "heating"
    RUNNING = "running"
    FINISHED = "finished"

    @property
    def order(self) -> int:
        """Position of the phase in the lifecycle (0 for IDLE)."""
        return _PHASE_ORDER[self]


_PHASE_ORDER = {
    Phase.IDLE: 0,
    Phase.HEATING: 1,
    Phase.RUNNING: 2,
    Phase.FINISHED: 3,
}


@unique
class TimeUnit(str, Enum):
    """Reporting time units.

    The value is the literal suffix used in report lines.

    Members:
        NS: nanoseconds
        US: microseconds
        MS: milliseconds
    """

    NS = "ns"
    US = "us"
    MS = "ms"

    @property
    def divisor(self) -> int:
        """Nanoseconds per unit."""
        return _UNIT_DIVISORS[self]


_UNIT_DIVISORS = {
    TimeUnit.NS: 1,
    TimeUnit.US: 1_000,
    TimeUnit.MS: 1_000_000,
}
