"""Utility modules for colordetect."""

from colordetect.utils.raster import (
    # Type aliases
    BufferSource,
    # Buffer
    PixelOutOfBoundsError,
    RasterBuffer,
    RGBAImage,
    # Sampling
    crop,
    get_ref_color,
    # Image I/O
    load_image,
    require_buffer,
    resize,
    save_image,
)

__all__ = [
    # Type aliases
    "BufferSource",
    "RGBAImage",
    # Buffer
    "PixelOutOfBoundsError",
    "RasterBuffer",
    "require_buffer",
    # Sampling
    "get_ref_color",
    "crop",
    "resize",
    # Image I/O
    "load_image",
    "save_image",
]
