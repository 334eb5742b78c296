"""pixprint: average-hash image fingerprints and near-duplicate detection."""

from .config import Settings
from .errors import DecodeError, FormatError, InputError, PixprintError
from .fingerprint import (
    Fingerprint,
    HashPair,
    ScanDiagnostic,
    average_hash,
    compute_hash,
    find_similar_pairs,
    from_hex,
    hamming_distance,
    preprocess,
    similarity,
    to_hex,
)
from .ingestion import fingerprint_bytes, fingerprint_file, load_image, load_image_bytes

__version__ = "0.1.0"

__all__ = [
    "Settings",
    "PixprintError",
    "InputError",
    "DecodeError",
    "FormatError",
    "Fingerprint",
    "HashPair",
    "ScanDiagnostic",
    "average_hash",
    "compute_hash",
    "find_similar_pairs",
    "from_hex",
    "hamming_distance",
    "preprocess",
    "similarity",
    "to_hex",
    "fingerprint_bytes",
    "fingerprint_file",
    "load_image",
    "load_image_bytes",
]
