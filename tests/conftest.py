"""Shared fixtures."""

from __future__ import annotations

import pytest

from spectraforge.art.palettes import get_palette
from spectraforge.render.rng import SeededRNG
from spectraforge.render.surface import PixelSurface


@pytest.fixture
def aurora():
    return get_palette("Aurora")


@pytest.fixture
def rng():
    return SeededRNG("test-seed")


@pytest.fixture
def small_surface():
    """A 64x48 surface: big enough for every layer, fast to draw."""
    return PixelSurface(64, 48)


def pytest_addoption(parser):
    parser.addoption(
        "--update-golden", action="store_true", default=False,
        help="Rewrite the golden checksum files under tests/golden/",
    )
