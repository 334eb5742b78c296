"""Normalized Hamming similarity between fingerprints."""

from typing import Any, Optional, Union

import imagehash

from ..errors import FormatError
from .codec import from_hex
from .hash import DEFAULT_BITS, Fingerprint

FingerprintLike = Union[Fingerprint, imagehash.ImageHash, str]


def as_fingerprint(value: Any, bits: int = DEFAULT_BITS) -> Fingerprint:
    """
    Coerce a fingerprint, ImageHash or hex text to a ``bits``-wide Fingerprint.

    Raises:
        FormatError: If the value cannot be decoded or has another width
    """
    if isinstance(value, Fingerprint):
        fingerprint = value
    elif isinstance(value, imagehash.ImageHash):
        fingerprint = Fingerprint.from_imagehash(value)
    elif isinstance(value, str) or value is None:
        return from_hex(value, bits=bits)
    else:
        raise FormatError(f"Unsupported fingerprint type {type(value).__name__}")

    if fingerprint.bits != bits:
        raise FormatError(f"Expected a {bits}-bit fingerprint, got {fingerprint.bits} bits")
    return fingerprint


def resolve_width(*values: Any, bits: Optional[int] = None) -> int:
    """Width to compare at: explicit ``bits``, else the first decoded value's, else 64."""
    if bits is not None:
        return bits
    for value in values:
        if isinstance(value, Fingerprint):
            return value.bits
        if isinstance(value, imagehash.ImageHash):
            return int(value.hash.size)
    return DEFAULT_BITS


def hamming_distance(a: Fingerprint, b: Fingerprint) -> int:
    """
    Count differing bits between two fingerprints.

    Args:
        a: First fingerprint
        b: Second fingerprint

    Returns:
        Number of bit positions at which they differ
    """
    return a - b


def similarity(a: FingerprintLike, b: FingerprintLike, bits: Optional[int] = None) -> float:
    """
    Normalized Hamming similarity: 1.0 for identical fingerprints, 0.0 when every bit differs.

    Args:
        a: First fingerprint, ImageHash or hex text
        b: Second fingerprint, ImageHash or hex text
        bits: Expected width; inferred from non-text arguments when omitted

    Raises:
        FormatError: If either input fails decoding or the widths differ
    """
    width = resolve_width(a, b, bits=bits)
    fa = as_fingerprint(a, bits=width)
    fb = as_fingerprint(b, bits=width)
    return 1.0 - hamming_distance(fa, fb) / width
