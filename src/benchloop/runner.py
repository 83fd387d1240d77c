"""
Benchmark invocation.

This module provides:
- benchmark(): Run a workload once through a fresh Context and report it
- benchmark_args(): Repeat for each runtime argument
- benchmark_types(): Repeat for each type argument, specialising the
  workload per type before any of them runs

Workloads receive the Context as first parameter and drive it themselves:

    def bench_sleep(ctx: Context, ms: int) -> None:
        while ctx.run():
            time.sleep(ms / 1000)

    benchmark_args("Sleep", bench_sleep, [20, 30, 57])
"""
from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional

from benchloop.config import BenchConfig, resolve_config
from benchloop.context import Context
from benchloop.exceptions import WorkloadSignatureError
from benchloop.report import (
    BenchmarkResult,
    Emitter,
    format_arg_label,
    is_type_descriptor,
)

logger = logging.getLogger(__name__)

BenchFn = Callable[[Context], None]
BenchArgFn = Callable[[Context, Any], None]


def _workload_name(fn: Callable[..., Any]) -> str:
    return getattr(fn, "__qualname__", None) or repr(fn)


def _check_arity(fn: Callable[..., Any], expected: int) -> None:
    """Reject workloads that cannot be called with ``expected`` positionals."""
    name = _workload_name(fn)
    if not callable(fn):
        raise WorkloadSignatureError(name, "Workload must be a function.")
    try:
        signature = inspect.signature(fn)
    except (TypeError, ValueError):
        # Builtins without introspectable signatures are taken on trust
        return
    try:
        signature.bind(*([None] * expected))
    except TypeError:
        expected_str = "only the context" if expected == 1 else "the context and 1 argument"
        raise WorkloadSignatureError(
            name, f"Workload {name} must take {expected_str}"
        ) from None


def _run(
    name: str,
    fn: BenchFn,
    config: BenchConfig,
    emit: Optional[Emitter],
    argument: Any = None,
    arg_label: Optional[str] = None,
) -> BenchmarkResult:
    ctx = Context(config)
    fn(ctx)
    result = BenchmarkResult.from_context(name, ctx, argument, arg_label)
    result.emit(emit)
    return result


def benchmark(
    name: str,
    fn: BenchFn,
    *,
    config: Optional[BenchConfig] = None,
    emit: Optional[Emitter] = None,
) -> BenchmarkResult:
    """Benchmark a workload and report its average.

    Args:
        name: Name to report under.
        fn: Workload taking the Context and looping on ``ctx.run()`` or
            ``ctx.run_explicit_timing()``.
        config: Calibration and reporting config. Defaults to the
            process-wide config.
        emit: Receives the report line. Defaults to printing on stdout.

    Returns:
        BenchmarkResult for the run.

    Raises:
        WorkloadSignatureError: If ``fn`` does not take exactly the context.
    """
    _check_arity(fn, 1)
    return _run(name, fn, resolve_config(config), emit)


def benchmark_args(
    name: str,
    fn: BenchArgFn,
    args: Iterable[Any],
    *,
    config: Optional[BenchConfig] = None,
    emit: Optional[Emitter] = None,
) -> list[BenchmarkResult]:
    """Benchmark a workload once per runtime argument, in order.

    Each argument gets its own Context, reported as ``"<name> <<arg>>"``.

    Args:
        name: Name to report under.
        fn: Workload taking the Context and one argument.
        args: Runtime arguments.
        config: Calibration and reporting config.
        emit: Receives the report lines.

    Returns:
        One BenchmarkResult per argument.

    Raises:
        WorkloadSignatureError: If ``fn`` does not take the context and one
            argument, or if ``args`` holds type arguments.
    """
    _check_arity(fn, 2)
    args = list(args)
    for arg in args:
        if is_type_descriptor(arg):
            raise WorkloadSignatureError(
                _workload_name(fn),
                f"Type argument {format_arg_label(arg)} passed to benchmark_args; "
                "use benchmark_types for type-parametrised workloads",
            )

    config = resolve_config(config)
    results = []
    for arg in args:
        results.append(_run(name, _bind(fn, arg), config, emit, arg, format_arg_label(arg)))
    return results


@dataclass(frozen=True)
class _Specialization:
    type_arg: Any
    label: str
    workload: BenchFn


def specialize(fn: BenchArgFn, type_arg: Any) -> BenchFn:
    """Bind a type argument into a workload, yielding a context-only workload.

    Args:
        fn: Workload generic over a type, taking the Context and the type.
        type_arg: Class or torch dtype to specialise for.

    Returns:
        Workload taking only the Context.

    Raises:
        WorkloadSignatureError: If ``type_arg`` is not a type descriptor.
    """
    if not is_type_descriptor(type_arg):
        raise WorkloadSignatureError(
            _workload_name(fn),
            f"benchmark_types expects classes or dtypes, got {type(type_arg).__qualname__}",
        )
    specialized = _bind(fn, type_arg)
    specialized.__qualname__ = f"{_workload_name(fn)}[{format_arg_label(type_arg)}]"
    return specialized


def benchmark_types(
    name: str,
    fn: BenchArgFn,
    type_args: Iterable[Any],
    *,
    config: Optional[BenchConfig] = None,
    emit: Optional[Emitter] = None,
) -> list[BenchmarkResult]:
    """Benchmark a type-generic workload once per type, in order.

    Every type is validated and bound into its own specialised workload
    before the first benchmark starts, so a bad entry fails the whole call
    up front rather than halfway through.

    Args:
        name: Name to report under.
        fn: Workload taking the Context and a type.
        type_args: Classes or torch dtypes.
        config: Calibration and reporting config.
        emit: Receives the report lines.

    Returns:
        One BenchmarkResult per type.

    Raises:
        WorkloadSignatureError: If ``fn`` does not take the context and one
            argument, or an entry is not a type descriptor.
    """
    _check_arity(fn, 2)
    specializations = [
        _Specialization(t, format_arg_label(t), specialize(fn, t)) for t in type_args
    ]
    logger.debug(
        "Specialised %s for %d types", _workload_name(fn), len(specializations)
    )

    config = resolve_config(config)
    return [
        _run(name, s.workload, config, emit, s.type_arg, s.label)
        for s in specializations
    ]


def _bind(fn: BenchArgFn, arg: Any) -> BenchFn:
    def bound(ctx: Context) -> None:
        fn(ctx, arg)

    bound.__qualname__ = _workload_name(fn)
    return bound
