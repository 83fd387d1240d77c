"""
PyTest Configuration for benchloop Tests

Provides fixtures, markers, and test setup.
"""
import sys
from pathlib import Path

import pytest
import torch

# Add src directory to path for imports
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

# Add project root to path for tests.fixtures
root_path = Path(__file__).parent.parent
sys.path.insert(0, str(root_path))


def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line("markers", "gpu: mark test as requiring GPU")
    config.addinivalue_line("markers", "slow: mark test as slow running (real clock)")


@pytest.fixture(scope="session")
def has_cuda():
    """Check if CUDA is available."""
    try:
        return torch.cuda.is_available()
    except Exception:
        return False


@pytest.fixture(autouse=True)
def reset_global_config():
    """Restore the process-wide default config after every test."""
    from benchloop.config import configure

    yield
    configure(reset=True)


@pytest.fixture
def fake_clock():
    """Manually advanced clock."""
    from tests.fixtures.clocks import FakeClock

    return FakeClock()


@pytest.fixture
def tiny_config():
    """Config with 1000ns heating and running targets, for fake clocks."""
    from benchloop.config import BenchConfig

    return BenchConfig(warmup_ns=1000, run_ns=1000)


@pytest.fixture
def fast_config():
    """Config with short real-time targets (10ms each)."""
    from benchloop.config import BenchConfig

    return BenchConfig(warmup_ns=10_000_000, run_ns=10_000_000)
