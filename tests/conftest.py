from __future__ import annotations

import pytest

from colordetect.models import Color
from colordetect.utils.raster import RasterBuffer
from tests.synthetic import SyntheticScene, solid, square_scene, two_squares_scene


@pytest.fixture
def red_square() -> SyntheticScene:
    return square_scene()


@pytest.fixture
def two_squares() -> SyntheticScene:
    return two_squares_scene()


@pytest.fixture
def uniform_gray() -> RasterBuffer:
    return solid(10, 10, Color(120, 120, 120))
