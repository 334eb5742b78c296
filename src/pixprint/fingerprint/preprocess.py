"""Downsampling of decoded images to a fixed grid of luma samples."""

from __future__ import annotations

from typing import Any, List

import numpy as np
from PIL import Image

from ..errors import DecodeError, InputError
from ..logging import get_logger

logger = get_logger(__name__)

# Trailing channel count of an (H, W, C) array -> whether Pillow can take it as-is
_SUPPORTED_CHANNELS = (1, 3, 4)


def preprocess(pixels: Any, width: int = 8, height: int = 8) -> List[int]:
    """
    Resample a decoded image to ``width x height`` cells of 8-bit luma.

    Each output cell is the area average of the source pixels it covers
    (box filter), computed after reducing colour to ITU-R 601-2 luma.

    Args:
        pixels: A PIL image, or an (H, W), (H, W, 1), (H, W, 3) or (H, W, 4)
            array-like of samples in [0, 255]
        width: Number of grid columns
        height: Number of grid rows

    Returns:
        Row-major list of ``width * height`` integers in [0, 255]

    Raises:
        InputError: If ``pixels`` is None or the grid size is not positive
        DecodeError: If the buffer is empty or malformed
    """
    if pixels is None:
        raise InputError("Pixel buffer cannot be None.")
    if width < 1 or height < 1:
        raise InputError(f"Grid must be at least 1x1, got {width}x{height}")

    image = pixels if isinstance(pixels, Image.Image) else _array_to_image(pixels)
    if image.width == 0 or image.height == 0:
        raise DecodeError(f"Pixel buffer is empty ({image.width}x{image.height})")

    try:
        gray = image if image.mode == "L" else image.convert("L")
        grid = gray.resize((width, height), Image.Resampling.BOX)
    except (OSError, ValueError) as exc:
        raise DecodeError(f"Could not resample {image.mode} image: {exc}") from exc

    samples = np.asarray(grid, dtype=np.uint8).reshape(-1).tolist()
    logger.debug(f"Reduced {image.width}x{image.height} {image.mode} image to {width}x{height} grid")
    return samples


def _array_to_image(pixels: Any) -> Image.Image:
    """Validate an array-like pixel buffer and wrap it as a PIL image."""
    try:
        array = np.asarray(pixels)
    except (TypeError, ValueError) as exc:
        raise DecodeError(f"Pixel buffer is not a rectangular array: {exc}") from exc

    if array.dtype.kind not in "iuf":
        raise DecodeError(f"Pixel buffer must be numeric, got dtype {array.dtype}")
    if array.ndim not in (2, 3):
        raise DecodeError(f"Pixel buffer must be 2-D or 3-D, got shape {array.shape}")
    if array.shape[0] == 0 or array.shape[1] == 0:
        raise DecodeError(f"Pixel buffer is empty (shape {array.shape})")

    if array.ndim == 3:
        channels = array.shape[2]
        if channels not in _SUPPORTED_CHANNELS:
            raise DecodeError(f"Unsupported channel count {channels}, expected one of {_SUPPORTED_CHANNELS}")
        if channels == 1:
            array = array[:, :, 0]

    if array.dtype.kind == "f":
        if not np.isfinite(array).all():
            raise DecodeError("Pixel buffer contains NaN or infinite samples")
        array = np.rint(array)
    if array.min() < 0 or array.max() > 255:
        raise DecodeError(
            f"Pixel samples must lie in [0, 255], got range [{array.min()}, {array.max()}]"
        )

    return Image.fromarray(np.ascontiguousarray(array, dtype=np.uint8))
