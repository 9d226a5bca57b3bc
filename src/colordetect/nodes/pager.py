"""Simple pager: which edge bands of the frame currently show the tracked color."""

from __future__ import annotations

import logging

from pydantic import BaseModel

from colordetect import config
from colordetect.models import Color
from colordetect.utils.raster import RasterBuffer, crop, require_buffer, resize

logger = logging.getLogger(__name__)


class PagerResult(BaseModel):
    top: bool = False
    bottom: bool = False
    left: bool = False
    right: bool = False

    @property
    def active(self) -> list[str]:
        return [side for side in ("top", "bottom", "left", "right") if getattr(self, side)]


def _band_hit(
    color: Color,
    buffer: RasterBuffer,
    box: tuple[int, int, int, int],
    scale: float,
    threshold: int,
) -> bool:
    x, y, w, h = box
    band = crop(buffer, x, y, w, h)
    sampled = resize(band, max(1, round(band.width * scale)), max(1, round(band.height * scale)))
    return bool(color.count_similars(sampled, threshold))


def simple_pager(
    color: Color,
    buffer: RasterBuffer,
    threshold: int = config.PAGER_THRESHOLD,
    band_fraction: float = config.PAGER_BAND_FRACTION,
    sample_scale: float = config.PAGER_SAMPLE_SCALE,
) -> PagerResult:
    """
    Check the top / bottom / left / right bands of the frame for `color`.

    Each band covers `band_fraction` of the frame along its axis and is
    downsampled by `sample_scale` before counting similar pixels; a band is
    active once `threshold` similar pixels are seen.
    """
    require_buffer(buffer)
    w, h = buffer.width, buffer.height
    band_h = max(1, round(h * band_fraction))
    band_w = max(1, round(w * band_fraction))

    result = PagerResult(
        top=_band_hit(color, buffer, (0, 0, w, band_h), sample_scale, threshold),
        bottom=_band_hit(color, buffer, (0, h - band_h, w, band_h), sample_scale, threshold),
        left=_band_hit(color, buffer, (0, 0, band_w, h), sample_scale, threshold),
        right=_band_hit(color, buffer, (w - band_w, 0, band_w, h), sample_scale, threshold),
    )
    logger.debug("Pager bands active: %s", result.active)
    return result

