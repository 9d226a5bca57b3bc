"""Per-frame dispatch of color trackings.

Frame acquisition and scheduling stay with the caller: whatever loop owns the
camera hands each frame to Tracker.track() once.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from colordetect.models import Color
from colordetect.utils.raster import RasterBuffer, require_buffer

logger = logging.getLogger(__name__)

TrackingFn = Callable[[Color, RasterBuffer, dict[str, Any] | None], Any]
Callback = Callable[[Any], None]


class ColorTracking:
    """A tracked color bound to the function that looks for it."""

    def __init__(
        self,
        color: Color,
        fn: TrackingFn,
        callback: Callback | None = None,
        config: dict[str, Any] | None = None,
    ):
        self.color = color
        self.fn = fn
        self.callback = callback
        self.config = config

    def run(self, buffer: RasterBuffer) -> Any:
        result = self.fn(self.color, buffer, self.config)
        if self.callback is not None:
            self.callback(result)
        return result


class Tracker:
    """Ordered set of trackings run against one frame at a time."""

    def __init__(self) -> None:
        # dicts keep insertion order; replacing a key keeps its position
        self.trackings: dict[str, ColorTracking] = {}

    def add_tracking(self, tracking: ColorTracking, ctid: str) -> None:
        """Register tracking under ctid, replacing any tracking with that id."""
        self.trackings[ctid] = tracking

    def remove_tracking(self, ctid: str) -> ColorTracking | None:
        return self.trackings.pop(ctid, None)

    def track(self, buffer: RasterBuffer) -> dict[str, Any]:
        """Run every tracking once on buffer, in registration order."""
        require_buffer(buffer)
        results: dict[str, Any] = {}
        for ctid, tracking in self.trackings.items():
            results[ctid] = tracking.run(buffer)
            logger.debug("Tracking %s -> %r", ctid, results[ctid])
        return results
