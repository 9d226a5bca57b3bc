"""Tracking functions over a single frame.

Each wrapper has the (color, buffer, config) signature expected by
ColorTracking, and imports its node lazily so the package stays cheap to
import.
"""

from __future__ import annotations

from typing import Any

from colordetect.models import Color, Region
from colordetect.utils.raster import RasterBuffer


def simple_pager(color: Color, buffer: RasterBuffer, cfg: dict[str, Any] | None = None) -> Any:
    from colordetect.nodes.pager import simple_pager as _simple_pager

    cfg = cfg or {}
    return _simple_pager(
        color,
        buffer,
        **{
            k: v
            for k, v in cfg.items()
            if k in ("threshold", "band_fraction", "sample_scale") and v is not None
        },
    )


def search_and_mark(
    color: Color, buffer: RasterBuffer, cfg: dict[str, Any] | None = None
) -> Region | None:
    """Grid-scan for the best region and outline it on the frame."""
    from colordetect.nodes.grid_scanner import mark_region, search_best_match

    cfg = cfg or {}
    region = search_best_match(
        color,
        buffer,
        **{k: v for k, v in cfg.items() if k in ("radius", "min_match", "border") and v is not None},
    )
    if region is not None and cfg.get("mark", True):
        mark_region(buffer, region)
    return region


def count_similars(color: Color, buffer: RasterBuffer, cfg: dict[str, Any] | None = None) -> int | bool:
    return color.count_similars(buffer, (cfg or {}).get("max_count"))


__all__ = [
    "count_similars",
    "search_and_mark",
    "simple_pager",
]
