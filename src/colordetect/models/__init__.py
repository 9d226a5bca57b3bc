from .color import Color, rgb_to_hsl_arrays
from .errors import ProcessingError, ProcessingStage
from .histogram import ChannelRange, ChannelRanges, HistogramTable
from .region import Region
from .state import DetectConfig

__all__ = [
    "ChannelRange",
    "ChannelRanges",
    "Color",
    "DetectConfig",
    "HistogramTable",
    "ProcessingError",
    "ProcessingStage",
    "Region",
    "rgb_to_hsl_arrays",
]
