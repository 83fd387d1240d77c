"""
benchloop - Self-calibrating micro-benchmark harness

Measures the steady-state average cost of a workload. Each workload
drives a Context through a warm-up window that estimates its
per-iteration cost and a timed window sized to a fixed target duration.

Main APIs:
- benchloop.benchmark(): Benchmark a workload
- benchloop.benchmark_args(): Benchmark a workload per runtime argument
- benchloop.benchmark_types(): Benchmark a type-generic workload per type
- benchloop.do_not_optimize() / benchloop.clobber_memory(): Barriers

Example:
    import benchloop

    def bench_sum(ctx: benchloop.Context) -> None:
        values = list(range(1000))
        while ctx.run():
            benchloop.do_not_optimize(sum(values))

    benchloop.benchmark("sum", bench_sum)
    # sum: avg 4.127us (121304 iterations)
"""

__version__ = "0.1.0"

from benchloop.barriers import clobber_memory, do_not_optimize
from benchloop.clock import Clock
from benchloop.config import BenchConfig, configure, get_config, load_config
from benchloop.context import Context
from benchloop.enums import Phase, TimeUnit
from benchloop.exceptions import (
    BenchloopError,
    ConfigError,
    ContextStateError,
    UnsupportedValueError,
    WorkloadSignatureError,
)
from benchloop.report import BenchmarkResult, format_arg_label, select_unit
from benchloop.runner import (
    benchmark,
    benchmark_args,
    benchmark_types,
    specialize,
)

__all__ = [
    "__version__",
    # Core
    "Clock",
    "Context",
    "Phase",
    "TimeUnit",
    # Config
    "BenchConfig",
    "configure",
    "get_config",
    "load_config",
    # Invocation
    "benchmark",
    "benchmark_args",
    "benchmark_types",
    "specialize",
    # Reporting
    "BenchmarkResult",
    "format_arg_label",
    "select_unit",
    # Barriers
    "do_not_optimize",
    "clobber_memory",
    # Exceptions
    "BenchloopError",
    "ConfigError",
    "ContextStateError",
    "UnsupportedValueError",
    "WorkloadSignatureError",
]
