"""Canonical text encodings of fingerprints."""

from __future__ import annotations

import re

from ..errors import FormatError
from .hash import DEFAULT_BITS, Fingerprint

_HEX_RE = re.compile(r"[0-9a-fA-F]+")
_BITS_RE = re.compile(r"[01]+")


def hex_length(bits: int) -> int:
    """Number of hex characters for a ``bits``-wide fingerprint."""
    return (bits + 3) // 4


def to_hex(fingerprint: Fingerprint) -> str:
    """Lowercase hex, left-padded with zeros to ``hex_length(bits)`` characters."""
    return format(fingerprint.value, f"0{hex_length(fingerprint.bits)}x")


def from_hex(text: str, bits: int = DEFAULT_BITS) -> Fingerprint:
    """
    Parse the canonical hex encoding of a ``bits``-wide fingerprint.

    Raises:
        FormatError: If the text is missing, empty, of the wrong length,
            contains non-hex characters or overflows ``bits``
    """
    if text is None:
        raise FormatError("Fingerprint text cannot be None.")
    if not isinstance(text, str):
        raise FormatError(f"Fingerprint text must be a string, got {type(text).__name__}")
    if not text:
        raise FormatError("Fingerprint text cannot be empty.")

    expected = hex_length(bits)
    if len(text) != expected:
        raise FormatError(
            f"Fingerprint '{text}' has {len(text)} characters, expected {expected} for {bits} bits"
        )
    if not _HEX_RE.fullmatch(text):
        raise FormatError(f"Fingerprint '{text}' contains non-hexadecimal characters")

    value = int(text, 16)
    if value >> bits:
        raise FormatError(f"Fingerprint '{text}' does not fit in {bits} bits")
    return Fingerprint(value=value, bits=bits)


def to_bits(fingerprint: Fingerprint) -> str:
    """Render as a string of ``bits`` '0'/'1' characters in grid order."""
    return format(fingerprint.value, f"0{fingerprint.bits}b")


def from_bits(text: str) -> Fingerprint:
    """Parse a '0'/'1' string; its length is the fingerprint width."""
    if text is None:
        raise FormatError("Fingerprint bit string cannot be None.")
    if not isinstance(text, str) or not text:
        raise FormatError("Fingerprint bit string must be a non-empty string.")
    if not _BITS_RE.fullmatch(text):
        raise FormatError(f"Fingerprint bit string '{text}' contains characters other than 0 and 1")
    return Fingerprint(value=int(text, 2), bits=len(text))
