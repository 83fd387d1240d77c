"""
Calibration and measurement state machine.

A workload drives its Context in a loop::

    def bench_sum(ctx: Context) -> None:
        while ctx.run():
            do_not_optimize(sum(values))

Each Context goes IDLE -> HEATING -> RUNNING -> FINISHED exactly once.
HEATING runs the workload until the warm-up target has elapsed and derives
from the observed per-iteration cost how many iterations fill the run
target. RUNNING executes that many iterations under a single clock window.

In explicit timing mode (``run_explicit_timing``) the workload brackets the
measured segment of each iteration with ``start_timer``/``stop_timer`` (or
``with ctx.timed():``), and only those segments count.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, Optional, Protocol, Union

from benchloop.clock import Clock
from benchloop.config import BenchConfig, resolve_config
from benchloop.enums import Phase, TimeUnit
from benchloop.exceptions import ContextStateError

logger = logging.getLogger(__name__)


class ClockLike(Protocol):
    """Anything that can stand in for Clock inside a Context."""

    def reset(self) -> None: ...

    def read(self) -> int: ...


class Context:
    """Measurement state for one benchmarked workload.

    Attributes are read-only views; only ``run``/``run_explicit_timing``
    and the timer operations mutate state.

    Example:
        ```python
        ctx = Context(BenchConfig(warmup_ns=50_000_000, run_ns=50_000_000))
        while ctx.run():
            work()
        print(ctx.average_time(TimeUnit.US))
        ```
    """

    def __init__(
        self,
        config: Optional[BenchConfig] = None,
        clock: Optional[ClockLike] = None,
    ) -> None:
        """Initialize an idle context.

        Args:
            config: Calibration targets. Defaults to the process-wide config.
            clock: Clock to measure with. Defaults to a new Clock.
        """
        self._config = resolve_config(config)
        self._clock = clock if clock is not None else Clock(self._config.sync_cuda)
        self._phase = Phase.IDLE
        self._iterations = 0
        self._planned = 0
        self._warmup_iterations = 0
        self._elapsed_ns = 0

    @property
    def config(self) -> BenchConfig:
        """Get the calibration configuration."""
        return self._config

    @property
    def phase(self) -> Phase:
        """Current lifecycle phase."""
        return self._phase

    @property
    def iterations(self) -> int:
        """Iterations counted in the current phase."""
        return self._iterations

    @property
    def planned_iterations(self) -> int:
        """Iteration target of the RUNNING phase (0 until calibrated)."""
        return self._planned

    @property
    def warmup_iterations(self) -> int:
        """Iterations spent in HEATING."""
        return self._warmup_iterations

    @property
    def elapsed_ns(self) -> int:
        """Measured nanoseconds."""
        return self._elapsed_ns

    def run(self) -> bool:
        """Advance the automatic-timing state machine.

        Returns:
            True while the workload should execute another iteration,
            False once the measurement is complete.

        Raises:
            ContextStateError: If the context already finished.
        """
        if self._phase is Phase.IDLE:
            self._clock.reset()
            self._enter(Phase.HEATING)
            return True

        if self._phase is Phase.HEATING:
            self._iterations += 1
            elapsed = self._clock.read()
            if elapsed >= self._config.warmup_ns:
                self._calibrate(elapsed)
                self._clock.reset()
                self._enter(Phase.RUNNING)
            return True

        if self._phase is Phase.RUNNING:
            if self._iterations < self._planned:
                self._iterations += 1
                return True
            self._elapsed_ns = self._clock.read()
            self._enter(Phase.FINISHED)
            return False

        raise ContextStateError("advance", self._phase.value)

    def run_explicit_timing(self) -> bool:
        """Advance the explicit-timing state machine.

        Heating and planning are driven by the time accumulated through
        ``stop_timer``; the clock is never read here.

        Returns:
            True while the workload should execute another iteration,
            False once the measurement is complete.

        Raises:
            ContextStateError: If the context already finished.
        """
        if self._phase is Phase.IDLE:
            self._enter(Phase.HEATING)
            return True

        if self._phase is Phase.HEATING:
            self._iterations += 1
            if self._elapsed_ns >= self._config.warmup_ns:
                self._calibrate(self._elapsed_ns)
                self._elapsed_ns = 0
                self._enter(Phase.RUNNING)
            return True

        if self._phase is Phase.RUNNING:
            if self._iterations < self._planned:
                self._iterations += 1
                return True
            self._enter(Phase.FINISHED)
            return False

        raise ContextStateError("advance", self._phase.value)

    def start_timer(self) -> None:
        """Begin a measured segment."""
        self._clock.reset()

    def stop_timer(self) -> None:
        """End a measured segment and accumulate its duration."""
        self._elapsed_ns += self._clock.read()

    @contextmanager
    def timed(self) -> Iterator[None]:
        """Measure the body of a ``with`` block.

        Example:
            while ctx.run_explicit_timing():
                data = setup()
                with ctx.timed():
                    process(data)
        """
        self.start_timer()
        try:
            yield
        finally:
            self.stop_timer()

    def average_time(self, unit: Union[int, TimeUnit] = 1) -> float:
        """Average measured time per iteration.

        Args:
            unit: Nanoseconds per reported unit, or a TimeUnit.

        Returns:
            Average per-iteration time expressed in ``unit``.

        Raises:
            ContextStateError: If the context has not finished.
        """
        if self._phase is not Phase.FINISHED:
            raise ContextStateError("query the average", self._phase.value)

        divisor = unit.divisor if isinstance(unit, TimeUnit) else unit
        return self._elapsed_ns / divisor / self._iterations

    def _calibrate(self, heating_ns: int) -> None:
        # planned = run / (heating / count), kept in integers
        self._warmup_iterations = self._iterations
        planned = self._config.run_ns * self._iterations // heating_ns
        if planned < BenchConfig.MIN_PLANNED_ITERATIONS:
            logger.debug(
                "Calibration produced %d planned iterations, clamping to %d",
                planned,
                BenchConfig.MIN_PLANNED_ITERATIONS,
            )
            planned = BenchConfig.MIN_PLANNED_ITERATIONS
        logger.debug(
            "Heated %d iterations in %d ns, planning %d iterations",
            self._iterations,
            heating_ns,
            planned,
        )
        self._planned = planned
        self._iterations = 0

    def _enter(self, phase: Phase) -> None:
        logger.debug("Context phase %s -> %s", self._phase.value, phase.value)
        self._phase = phase
