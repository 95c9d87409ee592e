"""Shared fixtures for the cryptocanvas test suite."""

import pytest

from cryptocanvas.art_engine import ArtEngine
from cryptocanvas.parameters import GenerationParameters


@pytest.fixture
def engine():
    return ArtEngine()


@pytest.fixture
def make_params():
    """Factory for small, fast parameter records."""
    def _make(**overrides):
        fields = {'seed': 'seedA', 'canvas_size': 128, 'complexity': 0.5}
        fields.update(overrides)
        return GenerationParameters(**fields)
    return _make


class FakeClock:
    """Millisecond clock advanced by hand."""

    def __init__(self, start=0.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, ms):
        self.now += ms


@pytest.fixture
def clock():
    return FakeClock()
