"""
Pytest configuration for test suite

Markers:
- unit: Fast unit tests (no external dependencies)
- integration: Integration tests (requires a Kafka broker)
- slow: Slow-running tests (>10 seconds)
"""

import pytest

from tests.fakes import RecordingProducer


def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line("markers", "unit: Fast unit tests (no dependencies)")
    config.addinivalue_line(
        "markers", "integration: Integration tests (requires Kafka)"
    )
    config.addinivalue_line("markers", "slow: Slow tests (>10 seconds)")


@pytest.fixture
def recording_producer():
    """Producer that records instead of sending (no retries, no backoff)"""
    return RecordingProducer()
