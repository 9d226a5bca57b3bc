"""
Raster buffer access and image I/O.

This module provides:
- RasterBuffer: packed row-major RGBA8 pixels with Color get/set by (x, y)
- Block averaging around a point (the sample unit of region growth)
- Cropping / resizing helpers for sampling sub-areas of a frame
- Image file I/O for the command line, following the Result | ProcessingError pattern
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, TypeAlias

import cv2
import numpy as np
from numpy.typing import NDArray

from colordetect import config
from colordetect.models import Color, ProcessingError, ProcessingStage

# =============================================================================
# TYPE ALIASES
# =============================================================================

RGBAImage: TypeAlias = NDArray[np.uint8]  # (H, W, 4) RGBA
BufferSource: TypeAlias = bytes | bytearray | memoryview | NDArray[Any]

# Formats that cannot carry an alpha channel on write
_OPAQUE_SUFFIXES = {".jpg", ".jpeg", ".bmp", ".ppm", ".pgm"}


class PixelOutOfBoundsError(IndexError):
    """Pixel coordinates outside the buffer."""

    def __init__(self, x: int, y: int, width: int, height: int):
        super().__init__(f"Pixel ({x}, {y}) is out of bounds for a {width}x{height} buffer")
        self.x = x
        self.y = y


# =============================================================================
# SECTION 1: BUFFER
# =============================================================================


class RasterBuffer:
    """
    width x height pixels stored as interleaved RGBA bytes, row-major,
    top-left origin. Pixel (x, y) starts at offset (y * width + x) * 4.

    Writable sources (bytearray, numpy arrays) are viewed, not copied, so
    fill and remap operations are visible to the caller. Read-only sources
    such as bytes are copied.
    """

    def __init__(self, width: int, height: int, data: BufferSource):
        if data is None:
            raise ValueError("A raster buffer is required, got None")
        if width < 0 or height < 0:
            raise ValueError(f"Invalid buffer size {width}x{height}")

        if isinstance(data, np.ndarray):
            if data.dtype != np.uint8:
                raise ValueError(f"Expected uint8 pixel data, got {data.dtype}")
            flat = data.reshape(-1)
        else:
            flat = np.frombuffer(data, dtype=np.uint8)

        expected = width * height * 4
        if flat.size != expected:
            raise ValueError(
                f"Buffer holds {flat.size} bytes, expected {expected} for {width}x{height} RGBA"
            )
        if not flat.flags.writeable:
            flat = flat.copy()

        self.width = width
        self.height = height
        self.pixels: RGBAImage = flat.reshape(height, width, 4)

    def __repr__(self) -> str:
        return f"RasterBuffer({self.width}x{self.height})"

    @classmethod
    def from_bytes(cls, width: int, height: int, data: BufferSource) -> RasterBuffer:
        return cls(width, height, data)

    @classmethod
    def from_array(cls, rgba: NDArray[Any]) -> RasterBuffer:
        """Wrap an (H, W, 4) uint8 RGBA array."""
        if rgba is None:
            raise ValueError("A raster buffer is required, got None")
        if rgba.ndim != 3 or rgba.shape[2] != 4:
            raise ValueError(f"Expected an (H, W, 4) RGBA array, got shape {rgba.shape}")
        height, width = rgba.shape[:2]
        return cls(width, height, np.ascontiguousarray(rgba))

    @classmethod
    def blank(cls, width: int, height: int, color: Color = Color.BLACK) -> RasterBuffer:
        pixels = np.empty((height, width, 4), dtype=np.uint8)
        pixels[:, :] = _color_bytes(color)
        return cls(width, height, pixels)

    @property
    def data(self) -> NDArray[np.uint8]:
        """Flat view of the interleaved RGBA bytes."""
        return self.pixels.reshape(-1)

    def to_bytes(self) -> bytes:
        return self.pixels.tobytes()

    def copy(self) -> RasterBuffer:
        return RasterBuffer(self.width, self.height, self.pixels.copy())

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def get_color(self, x: int, y: int) -> Color:
        """
        Read pixel (x, y).

        Raises:
            PixelOutOfBoundsError: if (x, y) is outside the buffer
        """
        if not self.in_bounds(x, y):
            raise PixelOutOfBoundsError(x, y, self.width, self.height)
        r, g, b, a = self.pixels[y, x]
        return Color(int(r), int(g), int(b), int(a) / 255)

    def set_color(self, x: int, y: int, color: Color) -> None:
        """
        Write pixel (x, y); channels are clamped to 0-255.

        Raises:
            PixelOutOfBoundsError: if (x, y) is outside the buffer
        """
        if not self.in_bounds(x, y):
            raise PixelOutOfBoundsError(x, y, self.width, self.height)
        self.pixels[y, x] = _color_bytes(color)


def _clamp_byte(value: float) -> int:
    return max(0, min(255, int(value)))


def _color_bytes(color: Color) -> tuple[int, int, int, int]:
    return (
        _clamp_byte(color.red),
        _clamp_byte(color.green),
        _clamp_byte(color.blue),
        _clamp_byte(color.alpha * 255),
    )


def require_buffer(buffer: RasterBuffer | None) -> RasterBuffer:
    """Fail fast on a missing buffer instead of scanning garbage."""
    if buffer is None:
        raise ValueError("A raster buffer is required, got None")
    return buffer


# =============================================================================
# SECTION 2: SAMPLING
# =============================================================================


def get_ref_color(
    buffer: RasterBuffer,
    x: int,
    y: int,
    radius: int = config.DEFAULT_SAMPLE_RADIUS,
) -> Color | None:
    """
    Average color of the (2 * radius + 1)^2 block centered at (x, y).

    Args:
        buffer: Pixels to sample
        x: Block center column
        y: Block center row
        radius: Half the block side

    Returns:
        Averaged Color (channels truncated like Color.average), or None when
        any part of the block lies outside the buffer
    """
    left, top, right, bottom = x - radius, y - radius, x + radius, y + radius
    if left < 0 or top < 0 or right >= buffer.width or bottom >= buffer.height:
        return None

    block = buffer.pixels[top : bottom + 1, left : right + 1, :3]
    n = block.shape[0] * block.shape[1]
    totals = block.reshape(-1, 3).sum(axis=0, dtype=np.int64)
    return Color(int(totals[0]) // n, int(totals[1]) // n, int(totals[2]) // n)


def crop(buffer: RasterBuffer, x: int, y: int, width: int, height: int) -> RasterBuffer:
    """Copy of the sub-area starting at (x, y), clipped to the buffer."""
    x0 = max(0, min(x, buffer.width))
    y0 = max(0, min(y, buffer.height))
    x1 = max(x0, min(x + width, buffer.width))
    y1 = max(y0, min(y + height, buffer.height))
    return RasterBuffer.from_array(buffer.pixels[y0:y1, x0:x1].copy())


def resize(buffer: RasterBuffer, width: int, height: int) -> RasterBuffer:
    """Area-interpolated resize, the way a canvas scales a frame down."""
    if width <= 0 or height <= 0 or buffer.width == 0 or buffer.height == 0:
        return RasterBuffer.blank(max(0, width), max(0, height))
    if (width, height) == (buffer.width, buffer.height):
        return buffer.copy()
    resized = cv2.resize(buffer.pixels, (width, height), interpolation=cv2.INTER_AREA)
    return RasterBuffer.from_array(resized)


# =============================================================================
# SECTION 3: IMAGE I/O
# =============================================================================


def load_image(
    path: str | Path,
    stage: ProcessingStage = ProcessingStage.INPUT,
) -> RasterBuffer | ProcessingError:
    """
    Load an image from disk as an RGBA buffer.

    Handles:
    - Corrupted images (cv2.imread failure)
    - Grayscale, BGR and BGRA sources (all converted to RGBA)
    - File not found / permission errors

    Args:
        path: Path to image file
        stage: Processing stage for error reporting

    Returns:
        RasterBuffer or ProcessingError
    """
    path = Path(path)

    if not path.exists():
        return ProcessingError(
            stage=stage,
            error_type="file_not_found",
            recoverable=False,
            message=f"Image file not found: {path}",
            details={"path": str(path)},
        )

    try:
        img = cv2.imread(str(path), cv2.IMREAD_UNCHANGED)

        if img is None:
            return ProcessingError(
                stage=stage,
                error_type="imread_failed",
                recoverable=False,
                message=f"Failed to read image (may be corrupted): {path}",
                details={"path": str(path)},
            )

        if img.dtype != np.uint8:
            img = cv2.convertScaleAbs(img, alpha=255.0 / max(1.0, float(img.max())))

        if img.ndim == 2:
            rgba = cv2.cvtColor(img, cv2.COLOR_GRAY2RGBA)
        elif img.shape[2] == 1:
            rgba = cv2.cvtColor(img[:, :, 0], cv2.COLOR_GRAY2RGBA)
        elif img.shape[2] == 4:
            rgba = cv2.cvtColor(img, cv2.COLOR_BGRA2RGBA)
        else:
            rgba = cv2.cvtColor(img, cv2.COLOR_BGR2RGBA)

        return RasterBuffer.from_array(rgba)

    except PermissionError:
        return ProcessingError(
            stage=stage,
            error_type="permission_denied",
            recoverable=False,
            message=f"Permission denied reading: {path}",
            details={"path": str(path)},
        )
    except (cv2.error, OSError, ValueError) as e:
        return ProcessingError(
            stage=stage,
            error_type="io_error",
            recoverable=False,
            message=f"Error reading image: {e}",
            details={"path": str(path), "error": str(e)},
        )


def save_image(
    buffer: RasterBuffer,
    path: str | Path,
    stage: ProcessingStage = ProcessingStage.OUTPUT,
) -> Path | ProcessingError:
    """
    Save a buffer to disk. Alpha is dropped for formats without it.

    Args:
        buffer: Pixels to save
        path: Output path
        stage: Processing stage for error reporting

    Returns:
        Path to saved file or ProcessingError
    """
    path = Path(path)

    try:
        path.parent.mkdir(parents=True, exist_ok=True)

        if path.suffix.lower() in _OPAQUE_SUFFIXES:
            image = cv2.cvtColor(buffer.pixels, cv2.COLOR_RGBA2BGR)
        else:
            image = cv2.cvtColor(buffer.pixels, cv2.COLOR_RGBA2BGRA)

        success = cv2.imwrite(str(path), image)
        if not success:
            return ProcessingError(
                stage=stage,
                error_type="imwrite_failed",
                recoverable=False,
                message=f"Failed to write image: {path}",
                details={"path": str(path)},
            )
        return path

    except PermissionError:
        return ProcessingError(
            stage=stage,
            error_type="permission_denied",
            recoverable=False,
            message=f"Permission denied writing: {path}",
            details={"path": str(path)},
        )
    except (cv2.error, OSError) as e:
        return ProcessingError(
            stage=stage,
            error_type="io_error",
            recoverable=False,
            message=f"Error writing image: {e}",
            details={"path": str(path), "error": str(e)},
        )
