"""Tests for optimization barriers."""
from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple, Optional

import pytest
import torch

import benchloop.barriers as barriers
from benchloop.barriers import clobber_memory, do_not_optimize
from benchloop.exceptions import UnsupportedValueError


class RecordingSink(barriers._Sink):
    """Sink that keeps every consumed leaf."""

    __slots__ = ("seen",)

    def __init__(self) -> None:
        super().__init__()
        self.seen: list[object] = []

    def consume(self, value: object) -> None:
        super().consume(value)
        self.seen.append(value)


@pytest.fixture
def sink(monkeypatch: pytest.MonkeyPatch) -> RecordingSink:
    recording = RecordingSink()
    monkeypatch.setattr(barriers, "_sink", recording)
    return recording


@dataclass
class Point:
    x: float
    y: float


@dataclass
class Segment:
    start: Point
    end: Point
    label: str
    weight: Optional[int] = None


@dataclass
class Empty:
    pass


class Pair(NamedTuple):
    left: int
    right: int


class TestDoNotOptimize:
    """Marking values as used."""

    @pytest.mark.parametrize("value", [True, 7, 2.5, 1 + 2j, "text", b"raw", bytearray(b"x")])
    def test_scalars(self, sink: RecordingSink, value: object) -> None:
        do_not_optimize(value)
        assert sink.seen == [value]

    def test_tensor_is_leaf(self, sink: RecordingSink) -> None:
        t = torch.arange(10)
        do_not_optimize(t)
        assert len(sink.seen) == 1
        assert sink.seen[0] is t

    def test_nested_dataclass_visits_every_field(self, sink: RecordingSink) -> None:
        """Every field of every nested struct is marked."""
        seg = Segment(Point(1.0, 2.0), Point(3.0, 4.0), "s", weight=9)
        do_not_optimize(seg)
        assert sink.seen == [1.0, 2.0, 3.0, 4.0, "s", 9]

    def test_none_field_is_empty_optional(self, sink: RecordingSink) -> None:
        """A None field is skipped like an empty optional."""
        do_not_optimize(Segment(Point(1.0, 2.0), Point(3.0, 4.0), "s"))
        assert sink.seen == [1.0, 2.0, 3.0, 4.0, "s"]

    def test_named_tuple(self, sink: RecordingSink) -> None:
        do_not_optimize(Pair(1, 2))
        assert sink.seen == [1, 2]

    def test_containers(self, sink: RecordingSink) -> None:
        do_not_optimize([1, (2, 3), {"k": 4}])
        assert sink.seen == [1, 2, 3, "k", 4]

    def test_empty_container_allowed(self, sink: RecordingSink) -> None:
        do_not_optimize([])
        assert sink.seen == []

    def test_count_tracks_leaves(self, sink: RecordingSink) -> None:
        do_not_optimize([1, 2, 3])
        assert sink.count == 3

    @pytest.mark.parametrize(
        "value",
        [
            None,
            int,
            Point,
            torch.float32,
            len,
            lambda: None,
            Ellipsis,
            NotImplemented,
            pytest,
        ],
    )
    def test_meaningless_values_rejected(self, value: object) -> None:
        with pytest.raises(UnsupportedValueError, match="makes no sense"):
            do_not_optimize(value)

    def test_bound_method_rejected(self) -> None:
        with pytest.raises(UnsupportedValueError):
            do_not_optimize(Point(1.0, 2.0).__repr__)

    def test_fieldless_dataclass_rejected(self) -> None:
        with pytest.raises(UnsupportedValueError, match="field-less"):
            do_not_optimize(Empty())

    def test_unsupported_kind_rejected(self) -> None:
        """Unknown kinds raise instead of being silently skipped."""
        with pytest.raises(UnsupportedValueError, match="not implemented for object"):
            do_not_optimize(object())

    def test_unsupported_nested_kind_rejected(self) -> None:
        with pytest.raises(UnsupportedValueError):
            do_not_optimize([1, object()])

    def test_rejection_is_type_error(self) -> None:
        with pytest.raises(TypeError):
            do_not_optimize(str)


class TestClobberMemory:
    """Memory barrier."""

    def test_no_effect_on_values(self, sink: RecordingSink) -> None:
        do_not_optimize(1)
        clobber_memory()
        assert sink.value == 1
        assert sink.count == 1

    def test_synchronizes_initialized_cuda(self, monkeypatch: pytest.MonkeyPatch) -> None:
        calls = []
        monkeypatch.setattr(torch.cuda, "is_initialized", lambda: True)
        monkeypatch.setattr(torch.cuda, "synchronize", lambda: calls.append(True))

        clobber_memory()

        assert calls == [True]
