from typing import Any

from pydantic import BaseModel

from colordetect import config


class DetectConfig(BaseModel):
    # Region growth / grid scan
    radius: int = config.DEFAULT_SAMPLE_RADIUS
    min_match: int | None = None
    grid_border: int = config.GRID_SCAN_BORDER

    # Simple pager
    pager_threshold: int = config.PAGER_THRESHOLD
    pager_band_fraction: float = config.PAGER_BAND_FRACTION
    pager_sample_scale: float = config.PAGER_SAMPLE_SCALE

    def tracking_options(self, mark: bool = True) -> dict[str, Any]:
        """Option dict understood by the tracking functions in colordetect.nodes."""
        return {
            "radius": self.radius,
            "min_match": self.min_match,
            "border": self.grid_border,
            "mark": mark,
            "threshold": self.pager_threshold,
            "band_fraction": self.pager_band_fraction,
            "sample_scale": self.pager_sample_scale,
        }
