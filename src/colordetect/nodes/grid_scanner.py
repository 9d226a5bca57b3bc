"""Exhaustive grid search for the best matching region (baseline / fallback)."""

from __future__ import annotations

import logging

import cv2

from colordetect import config
from colordetect.models import Color, Region
from colordetect.utils.raster import RasterBuffer, require_buffer

from .region_matcher import match_area

logger = logging.getLogger(__name__)


def search_best_match(
    color: Color,
    buffer: RasterBuffer,
    radius: int = config.DEFAULT_SAMPLE_RADIUS,
    min_match: int | None = None,
    border: int = config.GRID_SCAN_BORDER,
) -> Region | None:
    """
    Run the region matcher on every grid cell and keep the heaviest region.

    Cells are `radius` pixels apart and stay `border` pixels away from the
    frame edges. A cell inside an already found region skips the column
    down to just below that region.

    Args:
        color: Reference color to search for
        buffer: Frame to scan
        radius: Grid stride and sample block radius
        min_match: Return the first region with at least this weight; 0 disables
        border: Margin skipped along every edge

    Returns:
        Region with the largest weight (first found on ties), or None
    """
    require_buffer(buffer)
    if radius < 1:
        raise ValueError(f"Sample radius must be >= 1, got {radius}")

    matches: list[Region] = []
    best: Region | None = None
    y_limit = buffer.height - border

    for x in range(border, buffer.width - border, radius):
        y = border
        while y < y_limit:
            for found in matches:
                if found.contains(x, y):
                    y = found.bottom + radius
            if y >= y_limit:
                break

            region = match_area(color, buffer, x, y, radius)
            if region is not None:
                if min_match and region.weight >= min_match:
                    logger.debug("Early exit at (%d, %d) with weight %d", x, y, region.weight)
                    return region
                matches.append(region)
                if best is None or region.weight > best.weight:
                    best = region
            y += radius

    logger.debug(
        "Grid scan found %d regions, best weight %s",
        len(matches),
        best.weight if best else None,
    )
    return best


def mark_region(buffer: RasterBuffer, region: Region, color: Color | None = None) -> RasterBuffer:
    """Outline region on the buffer, by default in the inverse of its reference color."""
    stroke = color or region.ref_color.invert()
    cv2.rectangle(
        buffer.pixels,
        (region.left, region.top),
        (region.right, region.bottom),
        (stroke.red, stroke.green, stroke.blue, 255),
        1,
    )
    return buffer
