"""
conftest.py — Shared pytest configuration and fixtures

This file is automatically loaded by pytest.
"""

import pytest
import sys
from pathlib import Path

# Ensure the project root is in the path for imports
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from smsgateway.dispatch import Gateway, EventKind


# ============================================================================
# Markers
# ============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )


# ============================================================================
# Fixtures available to all tests
# ============================================================================

@pytest.fixture
def gateway():
    """A gateway with the default catalog and no providers."""
    return Gateway()


@pytest.fixture
def loopback_gateway():
    """A gateway with two loopback providers: lo0 (default) and lo1."""
    gw = Gateway()
    gw.add_provider("loopback", "lo0", {})
    gw.add_provider("loopback", "lo1", {})
    return gw


@pytest.fixture
def event_log():
    """Factory: record event kinds emitted by a gateway, in order."""
    def attach(gw, kinds=(EventKind.MESSAGE_IN, EventKind.MESSAGE_OUT, EventKind.STATUS, EventKind.ERROR)):
        log = []
        for kind in kinds:
            gw.on(kind, lambda payload, kind=kind: log.append(kind.value))
        return log
    return attach
