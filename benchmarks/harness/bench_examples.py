#!/usr/bin/env python3
"""
Example workloads for the benchloop harness.

Suites:
- sleep: fixed 57ms sleep, and sleeps over [20, 30, 57] ms
- runtime: summing two slices of a timestamp list
- types: one workload specialised per Python type and per torch dtype
- explicit: 30ms untimed setup around a 10ms timed segment
"""
from __future__ import annotations

import sys
import time
from pathlib import Path
from typing import Callable

import torch

# Add project root to path for imports
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root / "src"))

from benchloop import (  # noqa: E402
    BenchConfig,
    BenchmarkResult,
    Context,
    benchmark,
    benchmark_args,
    benchmark_types,
    clobber_memory,
    do_not_optimize,
)


def bench_sleep_57(ctx: Context) -> None:
    while ctx.run():
        time.sleep(0.057)


def bench_sleep(ctx: Context, ms: int) -> None:
    while ctx.run():
        time.sleep(ms / 1000)


def bench_sum(ctx: Context, stamps: list[int]) -> None:
    while ctx.run():
        total = 0
        for val in stamps:
            total += val
        do_not_optimize(total)


def bench_min(ctx: Context, num_type: type) -> None:
    a, b = num_type(37), num_type(48)
    while ctx.run():
        do_not_optimize(min(a, b))


def bench_matmul(ctx: Context, dtype: torch.dtype) -> None:
    x = torch.randn(64, 64).to(dtype)
    while ctx.run():
        do_not_optimize(x @ x)
        clobber_memory()


def bench_explicit_sleep(ctx: Context) -> None:
    while ctx.run_explicit_timing():
        time.sleep(0.030)
        with ctx.timed():
            time.sleep(0.010)


def run_sleep_suite(config: BenchConfig) -> list[BenchmarkResult]:
    results = [benchmark("Sleep57", bench_sleep_57, config=config)]
    results.extend(benchmark_args("Sleep", bench_sleep, [20, 30, 57], config=config))
    return results


def run_runtime_suite(config: BenchConfig) -> list[BenchmarkResult]:
    now_ms = time.time_ns() // 1_000_000
    stamps = [now_ms] * 100
    return benchmark_args(
        "runtime args", bench_sum, [stamps[0:20], stamps[20:100]], config=config
    )


def run_types_suite(config: BenchConfig) -> list[BenchmarkResult]:
    results = benchmark_types("Min", bench_min, [int, float], config=config)
    results.extend(
        benchmark_types(
            "matmul", bench_matmul, [torch.float32, torch.float64], config=config
        )
    )
    return results


def run_explicit_suite(config: BenchConfig) -> list[BenchmarkResult]:
    return [benchmark("sleep", bench_explicit_sleep, config=config)]


SUITES: dict[str, Callable[[BenchConfig], list[BenchmarkResult]]] = {
    "sleep": run_sleep_suite,
    "runtime": run_runtime_suite,
    "types": run_types_suite,
    "explicit": run_explicit_suite,
}


if __name__ == "__main__":
    for suite in SUITES.values():
        suite(BenchConfig.from_env())
