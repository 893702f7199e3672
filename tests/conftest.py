"""Pytest configuration and shared fixtures."""

import random
from datetime import datetime

import pytest

# A Monday, mid-day
FIXED_NOW = datetime(2026, 10, 19, 12, 0, 0)


class SequenceRandom(random.Random):
    """Random source that replays fixed ``random()`` values, then repeats the last one."""

    def __init__(self, values):
        super().__init__(0)
        self._values = list(values)
        self.calls = 0

    def random(self):
        self.calls += 1
        if len(self._values) > 1:
            return self._values.pop(0)
        return self._values[0]


class ForbiddenRandom(random.Random):
    """Fails the test if any randomness is consumed."""

    def random(self):
        raise AssertionError("random() must not be called")


@pytest.fixture
def now():
    return FIXED_NOW


@pytest.fixture
def seeded_rng():
    return random.Random(1234)
