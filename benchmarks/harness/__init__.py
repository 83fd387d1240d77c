"""
benchloop Example Benchmarks

Runnable workloads exercising every harness entry point:
- bench_examples.py: Sleep, runtime-argument, type-argument and
  explicit-timing workloads
- run_benchmarks.py: Runner script that executes the suites
"""
