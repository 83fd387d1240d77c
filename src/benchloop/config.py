"""
Harness configuration.

This module provides:
- BenchConfig: Calibration targets and reporting options
- configure() / get_config(): Process-wide default configuration
- load_config(): Load the default configuration from YAML
"""
from __future__ import annotations

import os
import threading
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, ClassVar, Optional

import yaml

from benchloop.exceptions import ConfigError

NS_PER_MS = 1_000_000


def _env_flag(value: str) -> bool:
    return value.lower() not in ("0", "false", "no", "")


@dataclass(frozen=True)
class BenchConfig:
    """Configuration for a benchmark run.

    Attributes:
        warmup_ns: Target duration of the Heating phase in nanoseconds.
        run_ns: Target duration of the Running phase in nanoseconds.
        us_threshold_ns: Averages up to this many nanoseconds report in "ns".
        ms_threshold_ns: Averages up to this many nanoseconds report in "us";
            anything larger reports in "ms".
        precision: Decimal places of the average in report lines.
        sync_cuda: Whether the clock synchronizes CUDA before reads.

    Example:
        config = BenchConfig(warmup_ns=50_000_000, run_ns=50_000_000)
    """

    DEFAULT_WARMUP_NS: ClassVar[int] = 500 * NS_PER_MS
    DEFAULT_RUN_NS: ClassVar[int] = 500 * NS_PER_MS
    MIN_PLANNED_ITERATIONS: ClassVar[int] = 1

    warmup_ns: int = 500 * NS_PER_MS
    run_ns: int = 500 * NS_PER_MS
    us_threshold_ns: float = 1_000.0
    ms_threshold_ns: float = 1_000_000.0
    precision: int = 3
    sync_cuda: bool = False

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.warmup_ns <= 0:
            raise ConfigError("warmup_ns must be positive")
        if self.run_ns <= 0:
            raise ConfigError("run_ns must be positive")
        if self.us_threshold_ns <= 0:
            raise ConfigError("us_threshold_ns must be positive")
        if self.ms_threshold_ns <= self.us_threshold_ns:
            raise ConfigError("ms_threshold_ns must be greater than us_threshold_ns")
        if self.precision < 0:
            raise ConfigError("precision must not be negative")

    @classmethod
    def from_env(cls) -> "BenchConfig":
        """Create config from environment variables.

        Environment variables:
            BENCHLOOP_WARMUP_MS: Heating target in milliseconds
            BENCHLOOP_RUN_MS: Running target in milliseconds
            BENCHLOOP_PRECISION: Decimal places in reports
            BENCHLOOP_SYNC_CUDA: "1" or "true" to synchronize CUDA

        Returns:
            BenchConfig with values from environment.
        """
        warmup_str = os.environ.get("BENCHLOOP_WARMUP_MS")
        warmup_ns = (
            int(float(warmup_str) * NS_PER_MS) if warmup_str else cls.DEFAULT_WARMUP_NS
        )

        run_str = os.environ.get("BENCHLOOP_RUN_MS")
        run_ns = int(float(run_str) * NS_PER_MS) if run_str else cls.DEFAULT_RUN_NS

        precision_str = os.environ.get("BENCHLOOP_PRECISION")
        precision = int(precision_str) if precision_str else 3

        sync_cuda = _env_flag(os.environ.get("BENCHLOOP_SYNC_CUDA", "0"))

        return cls(
            warmup_ns=warmup_ns,
            run_ns=run_ns,
            precision=precision,
            sync_cuda=sync_cuda,
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BenchConfig":
        """Create config from a mapping.

        Durations may be given in milliseconds with ``warmup_ms`` /
        ``run_ms`` instead of nanoseconds.

        Args:
            data: Mapping of field names to values.

        Returns:
            BenchConfig instance.

        Raises:
            ConfigError: If the mapping has unknown keys.
        """
        data = dict(data)
        if "warmup_ms" in data:
            data["warmup_ns"] = int(float(data.pop("warmup_ms")) * NS_PER_MS)
        if "run_ms" in data:
            data["run_ns"] = int(float(data.pop("run_ms")) * NS_PER_MS)

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(
                f"Unknown config keys: {unknown}",
                context={"unknown": unknown},
            )
        return cls(**data)

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary."""
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass
class _GlobalState:
    config: BenchConfig
    lock: threading.Lock


_state = _GlobalState(config=BenchConfig(), lock=threading.Lock())


def configure(reset: bool = False, **overrides: Any) -> BenchConfig:
    """Set the process-wide default configuration.

    Args:
        reset: If True, start from defaults before applying overrides.
        **overrides: BenchConfig fields to change. ``None`` values are ignored.

    Returns:
        The new default configuration.

    Example:
        >>> import benchloop
        >>> benchloop.configure(warmup_ns=100_000_000, run_ns=100_000_000)
        >>> benchloop.configure(reset=True)
    """
    with _state.lock:
        base = BenchConfig() if reset else _state.config
        changes = {k: v for k, v in overrides.items() if v is not None}
        try:
            _state.config = replace(base, **changes)
        except TypeError as e:
            raise ConfigError(f"Invalid config override: {e}") from e
        return _state.config


def get_config() -> BenchConfig:
    """Get the process-wide default configuration."""
    with _state.lock:
        return _state.config


def load_config(path: str | Path) -> BenchConfig:
    """Load the default configuration from a YAML file.

    YAML format::

        warmup_ms: 250
        run_ms: 250
        precision: 3
        sync_cuda: false

    Args:
        path: Path to YAML configuration file.

    Returns:
        The new default configuration.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ConfigError: If config file is invalid.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "r") as f:
        data = yaml.safe_load(f)

    if not isinstance(data, dict):
        raise ConfigError(f"Invalid config file format: {path}")

    config = BenchConfig.from_dict(data)
    with _state.lock:
        _state.config = config
    return config


def resolve_config(config: Optional[BenchConfig]) -> BenchConfig:
    """Return ``config`` or the process-wide default when it is None."""
    return config if config is not None else get_config()
