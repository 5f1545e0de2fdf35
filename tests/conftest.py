"""
Shared fixtures.
"""
import pytest

from builders import FakeTransport
from roggler_core.wire import WireEncoder


@pytest.fixture
def encoder():
    return WireEncoder()


@pytest.fixture
def transport():
    return FakeTransport()
