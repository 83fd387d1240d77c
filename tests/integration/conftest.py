"""Fixtures for integration tests."""
from __future__ import annotations

import pytest

NS_PER_MS = 1_000_000


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: mark test as integration test")


@pytest.fixture
def accuracy_config():
    """Config with 100ms heating and running targets."""
    from benchloop.config import BenchConfig

    return BenchConfig(warmup_ns=100 * NS_PER_MS, run_ns=100 * NS_PER_MS)
