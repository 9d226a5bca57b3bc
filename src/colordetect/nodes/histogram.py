"""Channel histograms, signal-band detection and linear contrast remapping."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import numpy as np
from numpy.typing import NDArray

from colordetect import config
from colordetect.models import ChannelRange, ChannelRanges, HistogramTable
from colordetect.utils.raster import RasterBuffer, require_buffer

logger = logging.getLogger(__name__)

_CHANNEL_INDEX = {"red": 0, "green": 1, "blue": 2}


def _as_ranges(value: ChannelRanges | Mapping[str, Any] | None) -> ChannelRanges:
    if value is None:
        return ChannelRanges()
    if isinstance(value, ChannelRanges):
        return value
    return ChannelRanges.model_validate(value)


def _normalize(counts: NDArray[np.int64]) -> list[float]:
    """Scale counts so the peak bucket is 100; an empty series stays at 0."""
    peak = int(counts.max()) if counts.size else 0
    if peak == 0:
        return [0.0] * config.HISTOGRAM_BUCKETS
    return (config.HISTOGRAM_NORMALIZED_PEAK * counts / peak).tolist()


def histogram(buffer: RasterBuffer, ignore_transparent: bool = False) -> HistogramTable:
    """
    Build red, green, blue and grayscale histograms of a buffer.

    Grayscale is floor((r + g + b) / 3).

    Args:
        buffer: Pixels to sample
        ignore_transparent: Skip pixels whose alpha is 0

    Returns:
        HistogramTable with raw counts and peak-normalized series
    """
    require_buffer(buffer)
    samples = buffer.pixels.reshape(-1, 4)
    if ignore_transparent:
        samples = samples[samples[:, 3] > 0]

    buckets = config.HISTOGRAM_BUCKETS
    rgb = samples[:, :3].astype(np.int64)
    raw_red = np.bincount(rgb[:, 0], minlength=buckets)
    raw_green = np.bincount(rgb[:, 1], minlength=buckets)
    raw_blue = np.bincount(rgb[:, 2], minlength=buckets)
    raw_gray = np.bincount(rgb.sum(axis=1) // 3, minlength=buckets)

    return HistogramTable(
        red=_normalize(raw_red),
        green=_normalize(raw_green),
        blue=_normalize(raw_blue),
        grayscale=_normalize(raw_gray),
        raw_red=raw_red.tolist(),
        raw_green=raw_green.tolist(),
        raw_blue=raw_blue.tolist(),
        raw_grayscale=raw_gray.tolist(),
    )


def _find_band(counts: list[int], limit: float, border: int) -> ChannelRange:
    low = border
    high = 255 - border
    midpoint = config.HISTOGRAM_MIDPOINT
    while low < midpoint and counts[low] < limit:
        low += 1
    while high > midpoint and counts[high] < limit:
        high -= 1
    return ChannelRange(min=low, max=high)


def histogram_borders(
    buffer: RasterBuffer,
    threshold: float = config.HISTOGRAM_THRESHOLD,
    border: int = config.HISTOGRAM_BORDER,
) -> ChannelRanges:
    """
    Find each channel's signal band, ignoring sparse outlier tails.

    Starting `border` buckets in from either end, the scan moves toward the
    midpoint (128) until a bucket holds at least threshold * pixel count.

    Args:
        buffer: Pixels to analyze
        threshold: Minimum share of all pixels a bucket needs to count as signal
        border: Buckets skipped at each end of the range

    Returns:
        ChannelRanges with the detected min / max per channel
    """
    table = histogram(buffer)
    limit = threshold * buffer.width * buffer.height
    return ChannelRanges(
        **{channel: _find_band(table.raw(channel), limit, border) for channel in _CHANNEL_INDEX}
    )


def transform_histogram(
    buffer: RasterBuffer,
    from_ranges: ChannelRanges | Mapping[str, Any],
    to_ranges: ChannelRanges | Mapping[str, Any] | None = None,
) -> RasterBuffer:
    """
    Linearly remap each channel from one band to another, in place.

    value -> to.min + (to.max - to.min) * (value - from.min) / (from.max - from.min),
    clamped to 0-255 and rounded. A channel whose source band is empty
    (from.max == from.min) is left unchanged. Alpha is not touched.

    Args:
        buffer: Pixels to remap
        from_ranges: Source band per channel
        to_ranges: Target band per channel, full 0-255 if None

    Returns:
        The same buffer
    """
    require_buffer(buffer)
    source = _as_ranges(from_ranges)
    target = _as_ranges(to_ranges)
    pixels = buffer.pixels

    for channel, src in source.channels():
        dst: ChannelRange = getattr(target, channel)
        index = _CHANNEL_INDEX[channel]
        if src.max == src.min:
            logger.debug("Skipping %s remap: source band %d..%d is empty", channel, src.min, src.max)
            continue

        values = pixels[..., index].astype(np.float64)
        mapped = dst.min + (dst.max - dst.min) * (values - src.min) / (src.max - src.min)
        pixels[..., index] = np.rint(np.clip(mapped, 0, 255)).astype(np.uint8)

    return buffer


def stretch_contrast(
    buffer: RasterBuffer,
    threshold: float = config.HISTOGRAM_THRESHOLD,
    border: int = config.HISTOGRAM_BORDER,
) -> RasterBuffer:
    """Detect each channel's signal band and stretch it to the full range, in place."""
    bands = histogram_borders(buffer, threshold, border)
    logger.debug("Stretching contrast from bands %s", bands.model_dump())
    return transform_histogram(buffer, bands)
