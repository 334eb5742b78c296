"""Average-hash fingerprint computation."""

from __future__ import annotations

import numbers
from dataclasses import dataclass
from typing import Any, Sequence

import imagehash
import numpy as np

from ..errors import FormatError, InputError
from ..logging import get_logger
from .preprocess import preprocess

logger = get_logger(__name__)

DEFAULT_BITS = 64


@dataclass(frozen=True)
class Fingerprint:
    """
    Fixed-width average-hash bitset stored as an unsigned integer.

    Grid cell 0 (top-left) is the most significant bit, so the hex text reads
    in the same row-major order as the grid.
    """
    value: int
    bits: int = DEFAULT_BITS

    def __post_init__(self) -> None:
        if not isinstance(self.bits, int) or isinstance(self.bits, bool) or self.bits < 1:
            raise FormatError(f"Fingerprint width must be a positive integer, got {self.bits!r}")
        if not isinstance(self.value, int) or isinstance(self.value, bool):
            raise FormatError(f"Fingerprint value must be an integer, got {type(self.value).__name__}")
        if not 0 <= self.value < (1 << self.bits):
            raise FormatError(f"Fingerprint value does not fit in {self.bits} bits")

    def __str__(self) -> str:
        from .codec import to_hex
        return to_hex(self)

    def __sub__(self, other: object) -> int:
        """Hamming distance, same convention as ``imagehash.ImageHash``."""
        if not isinstance(other, Fingerprint):
            return NotImplemented
        if other.bits != self.bits:
            raise FormatError(
                f"Cannot compare fingerprints of different widths ({self.bits} vs {other.bits} bits)"
            )
        return bin(self.value ^ other.value).count("1")

    def bit(self, index: int) -> int:
        """Return the bit for grid cell ``index`` (row-major)."""
        if not 0 <= index < self.bits:
            raise IndexError(f"Bit index {index} out of range for {self.bits}-bit fingerprint")
        return (self.value >> (self.bits - 1 - index)) & 1

    def to_imagehash(self) -> imagehash.ImageHash:
        """Convert to an ``imagehash.ImageHash`` with identical hex encoding."""
        cells = np.array([self.bit(i) for i in range(self.bits)], dtype=bool)
        side = int(round(self.bits ** 0.5))
        if side * side == self.bits:
            cells = cells.reshape(side, side)
        return imagehash.ImageHash(cells)

    @classmethod
    def from_imagehash(cls, image_hash: imagehash.ImageHash) -> "Fingerprint":
        cells = np.asarray(image_hash.hash).reshape(-1)
        if cells.size == 0:
            raise FormatError("Cannot build a fingerprint from an empty ImageHash")
        value = 0
        for cell in cells:
            value = (value << 1) | int(bool(cell))
        return cls(value=value, bits=int(cells.size))


def compute_hash(grid: Sequence[int], width: int = 8, height: int = 8) -> Fingerprint:
    """
    Threshold a luma grid against its mean.

    The mean is floor division of the sample sum by the cell count, and a cell
    sets its bit only when strictly above it. A uniform grid hashes to zero.

    Args:
        grid: Row-major luma samples in [0, 255]
        width: Grid columns
        height: Grid rows

    Returns:
        Fingerprint of ``width * height`` bits

    Raises:
        InputError: If the grid is missing, has the wrong size or bad samples
    """
    if grid is None:
        raise InputError("Luma grid cannot be None.")
    if width < 1 or height < 1:
        raise InputError(f"Grid must be at least 1x1, got {width}x{height}")

    samples = [_integral_sample(sample) for sample in grid]
    total_bits = width * height
    if len(samples) != total_bits:
        raise InputError(f"Expected {total_bits} grid samples for {width}x{height}, got {len(samples)}")
    if any(sample < 0 or sample > 255 for sample in samples):
        raise InputError("Grid samples must lie in [0, 255]")

    mean = sum(samples) // total_bits

    value = 0
    for sample in samples:
        value = (value << 1) | (1 if sample > mean else 0)

    return Fingerprint(value=value, bits=total_bits)


def average_hash(pixels: Any, width: int = 8, height: int = 8) -> Fingerprint:
    """Fingerprint a decoded image: preprocess to a luma grid, then threshold it."""
    grid = preprocess(pixels, width=width, height=height)
    fingerprint = compute_hash(grid, width=width, height=height)
    logger.debug(f"Computed {fingerprint.bits}-bit average hash {fingerprint}")
    return fingerprint


def _integral_sample(sample: Any) -> int:
    """Accept integers, and reals with no fractional part; reject everything else."""
    if isinstance(sample, bool):
        raise InputError(f"Grid samples must be integers, got {sample!r}")
    if isinstance(sample, numbers.Integral):
        return int(sample)
    if isinstance(sample, numbers.Real) and float(sample).is_integer():
        return int(sample)
    raise InputError(f"Grid samples must be integers, got {sample!r}")
