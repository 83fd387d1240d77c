"""
Optimization barriers.

This module provides:
- do_not_optimize(): Keep a benchmarked value observably used
- clobber_memory(): Force outstanding memory effects to complete here

Every leaf of a value passed to ``do_not_optimize`` is written into a
module-level sink, so neither the value nor the work producing it can be
dropped as dead. ``clobber_memory`` waits for queued device work when CUDA
is initialised and otherwise touches the sink, which the interpreter
executes in program order.
"""
from __future__ import annotations

import dataclasses
import types
from typing import Any

import torch

from benchloop.exceptions import UnsupportedValueError

_LEAF_TYPES = (bool, int, float, complex, str, bytes, bytearray, memoryview)

_MEANINGLESS_TYPES = (
    types.FunctionType,
    types.BuiltinFunctionType,
    types.MethodType,
    types.ModuleType,
)


class _Sink:
    """Destination for values marked as used."""

    __slots__ = ("value", "count")

    def __init__(self) -> None:
        self.value: Any = None
        self.count = 0

    def consume(self, value: Any) -> None:
        self.value = value
        self.count += 1


_sink = _Sink()


def do_not_optimize(value: Any) -> None:
    """Mark ``value`` and everything it contains as used.

    Args:
        value: Scalar, string/bytes, tensor, or a dataclass, named tuple,
            tuple, list, set or dict built from those.

    Raises:
        UnsupportedValueError: For None, types, functions, dataclasses with
            no fields, and any value kind not listed above.
    """
    if value is None:
        raise UnsupportedValueError(
            "NoneType",
            message="do_not_optimize makes no sense for NoneType",
        )
    _mark(value)


def _mark(value: Any) -> None:
    if isinstance(value, type) or isinstance(value, torch.dtype):
        raise UnsupportedValueError(
            "type", message=f"do_not_optimize makes no sense for type {value!r}"
        )
    if isinstance(value, _MEANINGLESS_TYPES) or value is Ellipsis or value is NotImplemented:
        raise UnsupportedValueError(
            type(value).__name__,
            message=f"do_not_optimize makes no sense for {type(value).__name__}",
        )

    if isinstance(value, _LEAF_TYPES) or isinstance(value, torch.Tensor):
        _sink.consume(value)
        return

    if dataclasses.is_dataclass(value):
        value_fields = dataclasses.fields(value)
        if not value_fields:
            raise UnsupportedValueError(
                type(value).__name__,
                message=f"do_not_optimize makes no sense for field-less {type(value).__name__}",
            )
        for f in value_fields:
            _mark_optional(getattr(value, f.name))
        return

    if isinstance(value, dict):
        for key, item in value.items():
            _mark_optional(key)
            _mark_optional(item)
        return

    # Named tuples are tuples, so this covers their fields too.
    if isinstance(value, (tuple, list, set, frozenset)):
        for item in value:
            _mark_optional(item)
        return

    raise UnsupportedValueError(type(value).__name__)


def _mark_optional(value: Any) -> None:
    # None inside a composite is an empty optional
    if value is not None:
        _mark(value)


def clobber_memory() -> None:
    """Prevent memory effects from being moved across this point."""
    if torch.cuda.is_initialized():
        torch.cuda.synchronize()
    else:
        _sink.value = _sink.value
