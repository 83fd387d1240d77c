"""
Monotonic nanosecond clock used by measurement contexts.
"""
from __future__ import annotations

import time

import torch


class Clock:
    """Monotonic timer with reset/read semantics.

    ``read()`` returns nanoseconds elapsed since the last ``reset()`` (or
    since construction). With ``sync_cuda`` enabled and a CUDA device
    present, outstanding device work is synchronized before every reset
    and read so it is attributed to the interval that queued it.

    Example:
        ```python
        clock = Clock()
        work()
        print(f"took {clock.read()} ns")
        ```
    """

    def __init__(self, sync_cuda: bool = False) -> None:
        """Initialize and start the clock.

        Args:
            sync_cuda: Whether to synchronize CUDA around clock reads.
        """
        self._sync = sync_cuda and torch.cuda.is_available()
        self._start_ns = 0
        self.reset()

    @property
    def syncs_cuda(self) -> bool:
        """Whether reads synchronize a CUDA device."""
        return self._sync

    def now(self) -> int:
        """Current monotonic timestamp in nanoseconds."""
        if self._sync:
            torch.cuda.synchronize()
        return time.perf_counter_ns()

    def reset(self) -> None:
        """Restart the measured interval."""
        self._start_ns = self.now()

    def read(self) -> int:
        """Nanoseconds elapsed since the last reset."""
        return self.now() - self._start_ns
