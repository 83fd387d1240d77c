"""
benchloop Test Fixtures

Reusable test fixtures for benchloop tests.
"""
from tests.fixtures.clocks import (
    FakeClock,
    busy_wait_ns,
)
from tests.fixtures.devices import (
    gpu_required,
    get_cuda_device,
)

__all__ = [
    # Clocks
    "FakeClock",
    "busy_wait_ns",
    # Devices
    "gpu_required",
    "get_cuda_device",
]
