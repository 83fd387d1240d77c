#!/usr/bin/env python3
"""
benchloop Example Benchmark Runner

Executes the example suites and optionally saves the results.

Usage:
    # Run all suites with default half-second targets
    python -m benchmarks.harness.run_benchmarks

    # Run one suite
    python -m benchmarks.harness.run_benchmarks --only types

    # Quick mode (50ms targets)
    python -m benchmarks.harness.run_benchmarks --quick

    # Load targets from YAML and save results to JSON
    python -m benchmarks.harness.run_benchmarks --config bench.yaml --output results.json
"""
from __future__ import annotations

import argparse
import json
import logging
import platform
import sys
import time
from dataclasses import dataclass, field, replace
from datetime import datetime
from pathlib import Path
from typing import Any

# Add project root to path for imports
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root / "src"))
sys.path.insert(0, str(project_root))

from benchloop import BenchConfig, get_config, load_config  # noqa: E402
from benchmarks.harness.bench_examples import SUITES  # noqa: E402

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)

QUICK_TARGET_NS = 50_000_000


@dataclass
class BenchmarkSuite:
    """Collection of benchmark results from a suite.

    Attributes:
        name: Suite name.
        results: Serialized benchmark results.
        total_time_seconds: Total time to run the suite.
    """
    name: str
    results: list[dict[str, Any]] = field(default_factory=list)
    total_time_seconds: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "results": self.results,
            "total_time_seconds": self.total_time_seconds,
        }


def get_system_info() -> dict[str, Any]:
    """Collect system information for reproducibility."""
    import os

    import torch

    return {
        "platform": platform.platform(),
        "python_version": platform.python_version(),
        "processor": platform.processor(),
        "machine": platform.machine(),
        "cpu_count": os.cpu_count(),
        "torch_version": torch.__version__,
        "cuda_available": torch.cuda.is_available(),
        "timestamp": datetime.now().isoformat(),
    }


def run_suite(name: str, config: BenchConfig) -> BenchmarkSuite:
    """Run one example suite.

    Args:
        name: Key into SUITES.
        config: Harness configuration.

    Returns:
        BenchmarkSuite with results.
    """
    logger.info("Running suite %s", name)
    start_time = time.monotonic()
    results = SUITES[name](config)
    end_time = time.monotonic()

    return BenchmarkSuite(
        name=name,
        results=[r.to_dict() for r in results],
        total_time_seconds=end_time - start_time,
    )


def save_results(suites: list[BenchmarkSuite], config: BenchConfig, output_path: Path) -> None:
    """Save combined results to JSON file."""
    results = {
        "benchmark_run": {
            "timestamp": datetime.now().isoformat(),
            "config": config.to_dict(),
            "system_info": get_system_info(),
        },
        "suites": [s.to_dict() for s in suites],
    }

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w") as f:
        json.dump(results, f, indent=2)

    logger.info("Results saved to: %s", output_path)


def main() -> int:
    """Main entry point for benchmark runner.

    Returns:
        Exit code (0 for success).
    """
    parser = argparse.ArgumentParser(
        description="benchloop Example Benchmark Runner",
    )
    parser.add_argument(
        "--only",
        type=str,
        choices=sorted(SUITES),
        default=None,
        help="Run only a specific suite",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="YAML file with harness configuration",
    )
    parser.add_argument(
        "--quick",
        action="store_true",
        help="Use 50ms heating and running targets",
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Output JSON file path for results",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log state machine transitions",
    )
    args = parser.parse_args()

    if args.verbose:
        logging.getLogger("benchloop").setLevel(logging.DEBUG)

    config = load_config(args.config) if args.config else get_config()
    if args.quick:
        config = replace(config, warmup_ns=QUICK_TARGET_NS, run_ns=QUICK_TARGET_NS)

    names = [args.only] if args.only else list(SUITES)
    suites = [run_suite(name, config) for name in names]

    total = sum(s.total_time_seconds for s in suites)
    logger.info("Ran %d suites in %.2f seconds", len(suites), total)

    if args.output:
        save_results(suites, config, Path(args.output))

    return 0


if __name__ == "__main__":
    sys.exit(main())
