"""Iterative scanline flood fill with pluggable match / paint strategies."""

from __future__ import annotations

import logging
from collections.abc import Callable

import numpy as np

from colordetect.models import Color
from colordetect.utils.raster import RasterBuffer, require_buffer

logger = logging.getLogger(__name__)

# (current_color, seed_color, fill_color, buffer, x, y)
Matcher = Callable[[Color, Color, Color, RasterBuffer, int, int], bool]
Painter = Callable[[Color, Color, Color, RasterBuffer, int, int], None]


def default_matcher(
    current: Color, seed: Color, fill: Color, buffer: RasterBuffer, x: int, y: int
) -> bool:
    """Not already the fill color, and RGB-similar to the seed pixel."""
    return not fill.same(current) and seed.similar_rgb(current)


def solid_painter(
    current: Color, seed: Color, fill: Color, buffer: RasterBuffer, x: int, y: int
) -> None:
    buffer.set_color(x, y, fill)


def tint_painter(alpha: float = 0.5) -> Painter:
    """Painter that blends the fill color over each pixel, keeping its alpha."""

    def paint(
        current: Color, seed: Color, fill: Color, buffer: RasterBuffer, x: int, y: int
    ) -> None:
        buffer.set_color(
            x,
            y,
            Color(
                round(current.red * (1 - alpha) + fill.red * alpha),
                round(current.green * (1 - alpha) + fill.green * alpha),
                round(current.blue * (1 - alpha) + fill.blue * alpha),
                current.alpha,
            ),
        )

    return paint


def flood_fill(
    buffer: RasterBuffer,
    x: int,
    y: int,
    fill_color: Color,
    matcher: Matcher | None = None,
    painter: Painter | None = None,
) -> RasterBuffer:
    """
    Paint every pixel 4-connected to (x, y) through pixels the matcher accepts.

    Uses an explicit stack of span seeds: each popped point walks up to the
    top of its run, then paints downward, pushing one seed per contiguous run
    of accepted left / right neighbours. A pixel is painted at most once, so
    painters that leave pixels matchable still terminate.

    Args:
        buffer: Pixels to fill, modified in place
        x: Seed column
        y: Seed row
        fill_color: Color handed to the matcher and painter
        matcher: Acceptance predicate, default_matcher if None
        painter: Pixel mutator, solid_painter if None

    Returns:
        The same buffer

    Raises:
        PixelOutOfBoundsError: if the seed is outside the buffer
    """
    require_buffer(buffer)
    seed_color = buffer.get_color(x, y)
    matcher = matcher or default_matcher
    painter = painter or solid_painter

    width, height = buffer.width, buffer.height
    painted = np.zeros((height, width), dtype=bool)

    def accepts(px: int, py: int) -> bool:
        if painted[py, px]:
            return False
        return matcher(buffer.get_color(px, py), seed_color, fill_color, buffer, px, py)

    stack: list[tuple[int, int]] = [(x, y)]
    filled = 0

    while stack:
        cx, cy = stack.pop()
        if not accepts(cx, cy):
            continue

        while cy > 0 and accepts(cx, cy - 1):
            cy -= 1

        reach_left = False
        reach_right = False

        while cy < height and accepts(cx, cy):
            painter(buffer.get_color(cx, cy), seed_color, fill_color, buffer, cx, cy)
            painted[cy, cx] = True
            filled += 1

            if cx > 0:
                if accepts(cx - 1, cy):
                    if not reach_left:
                        stack.append((cx - 1, cy))
                        reach_left = True
                else:
                    reach_left = False

            if cx < width - 1:
                if accepts(cx + 1, cy):
                    if not reach_right:
                        stack.append((cx + 1, cy))
                        reach_right = True
                else:
                    reach_right = False

            cy += 1

    logger.debug("Flood fill from (%d, %d) painted %d pixels", x, y, filled)
    return buffer
