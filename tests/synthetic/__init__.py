"""Synthetic frame builders with known ground truth.

Usage:
    from tests.synthetic import square_scene, two_squares_scene
    from tests.synthetic import horizontal_ramp, random_frame, write_png
"""

from .scenes import (
    SyntheticScene,
    horizontal_ramp,
    paint_box,
    random_frame,
    solid,
    square_scene,
    two_squares_scene,
    write_png,
)

__all__ = [
    "SyntheticScene",
    "horizontal_ramp",
    "paint_box",
    "random_frame",
    "solid",
    "square_scene",
    "two_squares_scene",
    "write_png",
]
