"""Image decoding collaborators that feed the fingerprinting core."""

from __future__ import annotations

import io
from pathlib import Path
from typing import Optional, Union

from PIL import Image

from .config import Settings
from .errors import DecodeError, InputError
from .fingerprint.hash import Fingerprint, average_hash
from .logging import get_logger

logger = get_logger(__name__)

_DECODE_ERRORS = (OSError, ValueError, Image.DecompressionBombError)


def load_image(path: Union[Path, str, None]) -> Image.Image:
    """
    Load and fully decode an image file.

    Args:
        path: Path to a file in any format Pillow can read

    Returns:
        Decoded image, detached from the file handle

    Raises:
        InputError: If no path is given
        DecodeError: If the file is missing or cannot be decoded
    """
    if path is None or not str(path).strip():
        raise InputError("Image path cannot be None or empty.")

    image_path = Path(path)
    try:
        with Image.open(image_path) as img:
            return img.copy()
    except _DECODE_ERRORS as exc:
        raise DecodeError(f"Could not decode image from {image_path}: {exc}") from exc


def load_image_bytes(data: Optional[bytes]) -> Image.Image:
    """Decode an in-memory encoded image (e.g. an uploaded file body)."""
    if not data:
        raise InputError("Image data cannot be None or empty.")

    try:
        with Image.open(io.BytesIO(data)) as img:
            return img.copy()
    except _DECODE_ERRORS as exc:
        raise DecodeError(f"Could not decode image from {len(data)} bytes: {exc}") from exc


def fingerprint_file(path: Union[Path, str, None], settings: Optional[Settings] = None) -> Fingerprint:
    """Load an image from disk and compute its average hash."""
    settings = settings or Settings()
    image = load_image(path)
    fingerprint = average_hash(image, width=settings.hash_width, height=settings.hash_height)
    logger.debug(f"Fingerprinted {path}: {fingerprint}")
    return fingerprint


def fingerprint_bytes(data: Optional[bytes], settings: Optional[Settings] = None) -> Fingerprint:
    settings = settings or Settings()
    image = load_image_bytes(data)
    return average_hash(image, width=settings.hash_width, height=settings.hash_height)
