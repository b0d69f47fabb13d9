"""Test configuration and fixtures."""

import pytest

from tests.helpers import FrozenClock, Stack


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock()


@pytest.fixture
def stack(clock: FrozenClock) -> Stack:
    return Stack(clock=clock)
