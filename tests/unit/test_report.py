"""Tests for unit selection, labels and report lines."""
from __future__ import annotations

import enum
import logging

import pytest
import torch

from benchloop.config import BenchConfig
from benchloop.context import Context
from benchloop.enums import TimeUnit
from benchloop.report import (
    BenchmarkResult,
    format_arg_label,
    is_type_descriptor,
    select_unit,
)
from tests.fixtures.clocks import FakeClock


class Color(enum.Enum):
    RED = "red"


class TestSelectUnit:
    """Unit thresholds: <=1000ns is ns, <=1_000_000ns is us, else ms."""

    @pytest.fixture
    def config(self) -> BenchConfig:
        return BenchConfig()

    @pytest.mark.parametrize(
        "average_ns,expected",
        [
            (0.0, TimeUnit.NS),
            (500.0, TimeUnit.NS),
            (999.999, TimeUnit.NS),
            (1_000.0, TimeUnit.NS),
            (1_000.001, TimeUnit.US),
            (250_000.0, TimeUnit.US),
            (1_000_000.0, TimeUnit.US),
            (1_000_000.001, TimeUnit.MS),
            (1_500_000.0, TimeUnit.MS),
            (57_000_000.0, TimeUnit.MS),
        ],
    )
    def test_thresholds(self, config: BenchConfig, average_ns: float, expected: TimeUnit) -> None:
        assert select_unit(average_ns, config) is expected

    def test_custom_thresholds(self) -> None:
        """Thresholds come from the config."""
        config = BenchConfig(us_threshold_ns=10.0, ms_threshold_ns=100.0)

        assert select_unit(10.0, config) is TimeUnit.NS
        assert select_unit(11.0, config) is TimeUnit.US
        assert select_unit(101.0, config) is TimeUnit.MS


class TestFormatArgLabel:
    """Argument rendering in report labels."""

    @pytest.mark.parametrize(
        "arg,expected",
        [
            (20, "20"),
            (2.5, "2.5"),
            (True, "True"),
            ("small", "small"),
            (Color.RED, "red"),
            (int, "int"),
            (torch.float16, "torch.float16"),
            ([1, 2, 3], "list"),
            ((1, 2), "tuple"),
            ({"a": 1}, "dict"),
            (b"abc", "bytes"),
        ],
    )
    def test_labels(self, arg: object, expected: str) -> None:
        assert format_arg_label(arg) == expected

    def test_tensor_label(self) -> None:
        """Tensors render as their type, never their contents."""
        assert format_arg_label(torch.zeros(1000)) == "Tensor"

    def test_type_descriptors(self) -> None:
        assert is_type_descriptor(int)
        assert is_type_descriptor(torch.bfloat16)
        assert not is_type_descriptor(3)
        assert not is_type_descriptor([int])


class TestBenchmarkResult:
    """Result formatting and serialization."""

    @pytest.fixture
    def result(self) -> BenchmarkResult:
        return BenchmarkResult(
            name="sum",
            label="sum",
            argument=None,
            iterations=10,
            warmup_iterations=12,
            elapsed_ns=12_345_000,
            average_ns=1_234_500.0,
            unit=TimeUnit.US,
        )

    def test_format_line(self, result: BenchmarkResult) -> None:
        assert result.format_line() == "sum: avg 1234.500us (10 iterations)"

    def test_format_precision(self, result: BenchmarkResult) -> None:
        result.precision = 1
        assert result.format_line() == "sum: avg 1234.5us (10 iterations)"

    def test_average_in_other_unit(self, result: BenchmarkResult) -> None:
        assert result.average(TimeUnit.MS) == pytest.approx(1.2345)
        assert result.average(TimeUnit.NS) == pytest.approx(1_234_500.0)

    def test_dict_roundtrip(self, result: BenchmarkResult) -> None:
        restored = BenchmarkResult.from_dict(result.to_dict())
        assert restored == result

    def test_from_context(self, tiny_config: BenchConfig, fake_clock: FakeClock) -> None:
        """Results carry the argument label and the context's measurements."""
        ctx = Context(tiny_config, clock=fake_clock)
        while ctx.run():
            fake_clock.advance(100)

        result = BenchmarkResult.from_context("Loop", ctx, argument=[1, 2], arg_label="list")

        assert result.label == "Loop <list>"
        assert result.iterations == 10
        assert result.warmup_iterations == 10
        assert result.average_ns == pytest.approx(110.0)
        assert result.unit is TimeUnit.NS
        assert result.format_line() == "Loop <list>: avg 110.000ns (10 iterations)"
        assert result.to_dict()["argument"] == "list"

    def test_emit(self, result: BenchmarkResult, caplog: pytest.LogCaptureFixture) -> None:
        """Emitting sends the line to the emitter and the log."""
        lines: list[str] = []
        with caplog.at_level(logging.INFO, logger="benchloop.report"):
            result.emit(lines.append)

        assert lines == ["sum: avg 1234.500us (10 iterations)"]
        assert "sum: avg 1234.500us" in caplog.text

    def test_emit_default_stdout(
        self, result: BenchmarkResult, capsys: pytest.CaptureFixture[str]
    ) -> None:
        result.emit()
        assert capsys.readouterr().out == "sum: avg 1234.500us (10 iterations)\n"
