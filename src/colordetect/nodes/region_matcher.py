"""Region growth around a seed point, in coarse sample blocks."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from colordetect import config
from colordetect.models import Color, Region
from colordetect.utils.raster import RasterBuffer, get_ref_color, require_buffer

logger = logging.getLogger(__name__)


@dataclass
class _Growth:
    """Bounding box and colors of the blocks matched so far."""

    left: int
    top: int
    right: int
    bottom: int
    colors: list[Color] = field(default_factory=list)

    @classmethod
    def from_seed(cls, x: int, y: int, radius: int, color: Color) -> _Growth:
        return cls(x - radius, y - radius, x + radius, y + radius, [color])

    def add(self, cx: int, cy: int, radius: int, color: Color) -> None:
        self.colors.append(color)
        self.left = min(self.left, cx - radius)
        self.top = min(self.top, cy - radius)
        self.right = max(self.right, cx + radius)
        self.bottom = max(self.bottom, cy + radius)


def _grow_vertical(
    buffer: RasterBuffer,
    growth: _Growth,
    cx: int,
    start_y: int,
    step: int,
    reference: Color,
    radius: int,
) -> None:
    """Accept blocks from start_y in steps of `step` until one mismatches or leaves the buffer."""
    cy = start_y
    while True:
        block = get_ref_color(buffer, cx, cy, radius)
        if block is None or not block.similar(reference):
            return
        growth.add(cx, cy, radius, block)
        cy += step


def _scan_column(
    buffer: RasterBuffer,
    growth: _Growth,
    cx: int,
    anchor_y: int,
    reference: Color,
    radius: int,
    include_anchor: bool,
) -> None:
    step = 2 * radius
    _grow_vertical(
        buffer, growth, cx, anchor_y if include_anchor else anchor_y - step, -step, reference, radius
    )
    _grow_vertical(buffer, growth, cx, anchor_y + step, step, reference, radius)


def _sweep_columns(
    buffer: RasterBuffer,
    growth: _Growth,
    start_x: int,
    direction: int,
    radius: int,
) -> None:
    """
    Move column by column away from start_x while each column keeps adding
    blocks. Every new column re-averages the running reference over all
    blocks matched so far and is anchored at the middle of the current box.
    """
    step = 2 * radius
    cx = start_x
    while True:
        if direction > 0:
            contributed = cx < growth.right
            room = cx + step < buffer.width
        else:
            contributed = cx > growth.left
            room = cx - step >= 0
        if not (contributed and room):
            return

        cx += direction * step
        reference = Color.average(growth.colors)
        anchor_y = (growth.top + growth.bottom) // 2
        _scan_column(buffer, growth, cx, anchor_y, reference, radius, include_anchor=True)


def match_area(
    color: Color,
    buffer: RasterBuffer,
    x: int,
    y: int,
    radius: int = config.DEFAULT_SAMPLE_RADIUS,
) -> Region | None:
    """
    Grow a region of blocks similar to `color` from the seed point (x, y).

    The seed pixel and the seed block must both be similar to `color`.
    Growth then walks columns 2 * radius apart, first to the right and then to
    the left of the seed, scanning each column up and down from its anchor.
    Blocks are compared with a running reference that follows local shading;
    the returned Region.diff measures the final average against `color`.

    Args:
        color: Requested reference color
        buffer: Frame to search
        x: Seed column
        y: Seed row
        radius: Half the side of a sample block

    Returns:
        Region, or None if the seed does not match (or lies outside the buffer)
    """
    require_buffer(buffer)
    if radius < 1:
        raise ValueError(f"Sample radius must be >= 1, got {radius}")

    if not buffer.in_bounds(x, y) or not buffer.get_color(x, y).similar(color):
        return None

    seed_block = get_ref_color(buffer, x, y, radius)
    if seed_block is None or not seed_block.similar(color):
        return None

    growth = _Growth.from_seed(x, y, radius, seed_block)
    _scan_column(buffer, growth, x, y, seed_block, radius, include_anchor=False)
    _sweep_columns(buffer, growth, x, +1, radius)
    _sweep_columns(buffer, growth, x, -1, radius)

    region = Region.from_blocks(
        growth.left, growth.top, growth.right, growth.bottom, color, growth.colors
    )
    logger.debug(
        "Region at (%d, %d): box=(%d, %d, %d, %d) weight=%d diff=%.2f",
        x,
        y,
        region.left,
        region.top,
        region.right,
        region.bottom,
        region.weight,
        region.diff,
    )
    return region
