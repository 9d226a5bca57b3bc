"""RGBA color value object with HSL conversion and similarity metrics."""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass, replace
from functools import cached_property
from typing import TYPE_CHECKING, Any, ClassVar

import numpy as np
from numpy.typing import NDArray

from colordetect import config

if TYPE_CHECKING:
    from colordetect.utils.raster import RasterBuffer


def rgb_to_hsl_arrays(
    rgb: NDArray[Any],
) -> tuple[NDArray[np.float64], NDArray[np.float64], NDArray[np.float64]]:
    """
    Vectorized RGB -> HSL over an (..., 3) array of 0-255 values.

    Mirrors Color.to_hsl element by element, including the red -> green -> blue
    priority when several channels share the maximum.
    """
    rgb01 = np.asarray(rgb, dtype=np.float64) / 255
    r, g, b = rgb01[..., 0], rgb01[..., 1], rgb01[..., 2]
    mx = np.maximum(np.maximum(r, g), b)
    mn = np.minimum(np.minimum(r, g), b)
    lightness = (mx + mn) / 2
    d = mx - mn
    chromatic = mx != mn

    with np.errstate(divide="ignore", invalid="ignore"):
        saturation = np.where(lightness > 0.5, d / (2 - mx - mn), d / (mx + mn))
        hue = np.select(
            [mx == r, mx == g],
            [(g - b) / d + np.where(g < b, 6.0, 0.0), (b - r) / d + 2],
            default=(r - g) / d + 4,
        ) / 6

    hue = np.where(chromatic, hue, 0.0)
    saturation = np.where(chromatic, saturation, 0.0)
    return hue, saturation, lightness


@dataclass(frozen=True)
class Color:
    """
    A single RGBA sample.

    Channels are truncated to integers on construction; alpha is a float in
    [0, 1]. Out-of-range values are accepted and reported by is_valid().
    """

    red: int
    green: int
    blue: int
    alpha: float = 1.0

    RED: ClassVar[Color]
    GREEN: ClassVar[Color]
    BLUE: ClassVar[Color]
    YELLOW: ClassVar[Color]
    MAGENTA: ClassVar[Color]
    CYAN: ClassVar[Color]
    WHITE: ClassVar[Color]
    BLACK: ClassVar[Color]

    def __post_init__(self) -> None:
        object.__setattr__(self, "red", int(self.red))
        object.__setattr__(self, "green", int(self.green))
        object.__setattr__(self, "blue", int(self.blue))
        object.__setattr__(self, "alpha", float(self.alpha))

    def __str__(self) -> str:
        if self.alpha != 1:
            return f"rgba({self.red}, {self.green}, {self.blue}, {self.alpha:g})"
        return f"rgb({self.red}, {self.green}, {self.blue})"

    # -------------------------------------------------------------------------
    # Conversion
    # -------------------------------------------------------------------------

    def is_valid(self) -> bool:
        return (
            0 <= self.red <= 255
            and 0 <= self.green <= 255
            and 0 <= self.blue <= 255
            and 0.0 <= self.alpha <= 1.0
        )

    def invert(self) -> Color:
        """Complementary color, alpha preserved."""
        return Color(255 - self.red, 255 - self.green, 255 - self.blue, self.alpha)

    def opacity(self, alpha: float = 0.0) -> Color:
        return replace(self, alpha=alpha)

    def to_hex(self) -> str:
        return f"#{self.red:02x}{self.green:02x}{self.blue:02x}"

    @classmethod
    def from_hex(cls, value: str, alpha: float = 1.0) -> Color:
        """Parse '#rrggbb' (leading '#' optional)."""
        text = value.strip().lstrip("#")
        if len(text) != 6:
            raise ValueError(f"Expected a #rrggbb hex color, got {value!r}")
        try:
            return cls(int(text[0:2], 16), int(text[2:4], 16), int(text[4:6], 16), alpha)
        except ValueError as e:
            raise ValueError(f"Invalid hex color {value!r}") from e

    @cached_property
    def hsl(self) -> tuple[float, float, float]:
        r = self.red / 255
        g = self.green / 255
        b = self.blue / 255
        mx = max(r, g, b)
        mn = min(r, g, b)
        lightness = (mx + mn) / 2

        if mx == mn:
            return 0.0, 0.0, lightness

        d = mx - mn
        saturation = d / (2 - mx - mn) if lightness > 0.5 else d / (mx + mn)
        if mx == r:
            hue = (g - b) / d + (6 if g < b else 0)
        elif mx == g:
            hue = (b - r) / d + 2
        else:
            hue = (r - g) / d + 4
        return hue / 6, saturation, lightness

    def to_hsl(self) -> tuple[float, float, float]:
        """(hue, saturation, lightness), each in [0, 1]."""
        return self.hsl

    # -------------------------------------------------------------------------
    # Distance & similarity
    # -------------------------------------------------------------------------

    def diff_rgb(self, other: Color) -> float:
        """Euclidean distance in RGB space."""
        rd = self.red - other.red
        gd = self.green - other.green
        bd = self.blue - other.blue
        return math.sqrt(rd * rd + gd * gd + bd * bd)

    diff = diff_rgb

    def diff_hsl(self, other: Color) -> float:
        """Hue-weighted distance; lightness is ignored."""
        h1, s1, _ = self.hsl
        h2, s2, _ = other.hsl
        return abs(h1 - h2) * 10 + abs(s1 - s2)

    def similar_rgb(
        self,
        other: Color,
        threshold: float = config.RGB_SIMILARITY_THRESHOLD,
    ) -> bool:
        """Cheap approximation of similar_hsl for hot loops."""
        return self.diff_rgb(other) < threshold

    def similar_hsl(
        self,
        other: Color,
        hue_tol: float = config.HSL_HUE_TOLERANCE,
        sat_tol: float = config.HSL_SATURATION_TOLERANCE,
        light_tol: float = config.HSL_LIGHTNESS_TOLERANCE,
    ) -> bool:
        h1, s1, l1 = self.hsl
        h2, s2, l2 = other.hsl
        return abs(h1 - h2) < hue_tol and abs(s1 - s2) < sat_tol and abs(l1 - l2) < light_tol

    similar = similar_hsl

    def same(self, other: Color) -> bool:
        return self.diff_rgb(other) == 0

    # -------------------------------------------------------------------------
    # Aggregates
    # -------------------------------------------------------------------------

    @staticmethod
    def average(colors: Iterable[Color]) -> Color:
        """
        Component-wise mean of red/green/blue, truncated to integers.

        Raises:
            ValueError: if colors is empty
        """
        colors = list(colors)
        if not colors:
            raise ValueError("Cannot average an empty list of colors")
        n = len(colors)
        return Color(
            sum(c.red for c in colors) / n,
            sum(c.green for c in colors) / n,
            sum(c.blue for c in colors) / n,
        )

    def count_similars(
        self,
        buffer: RasterBuffer,
        max_count: int | None = None,
    ) -> int | bool:
        """
        Count the pixels of buffer that are similar() to this color.

        Args:
            buffer: Pixels to scan
            max_count: Stop after the row in which this many similar pixels
                were seen; zero or negative means no limit

        Returns:
            Exact count, or whether max_count was reached if it was given
        """
        if max_count is not None and max_count <= 0:
            max_count = None
        h0, s0, l0 = self.hsl
        found = 0
        # Rows are scanned one at a time so a reached max_count stops the scan.
        for row in buffer.pixels:
            hue, sat, light = rgb_to_hsl_arrays(row[:, :3])
            matches = (
                (np.abs(hue - h0) < config.HSL_HUE_TOLERANCE)
                & (np.abs(sat - s0) < config.HSL_SATURATION_TOLERANCE)
                & (np.abs(light - l0) < config.HSL_LIGHTNESS_TOLERANCE)
            )
            found += int(np.count_nonzero(matches))
            if max_count is not None and found >= max_count:
                return True

        if max_count is not None:
            return found >= max_count
        return found


Color.RED = Color(255, 0, 0)
Color.GREEN = Color(0, 255, 0)
Color.BLUE = Color(0, 0, 255)
Color.YELLOW = Color(255, 255, 0)
Color.MAGENTA = Color(255, 0, 255)
Color.CYAN = Color(0, 255, 255)
Color.WHITE = Color(255, 255, 255)
Color.BLACK = Color(0, 0, 0)
