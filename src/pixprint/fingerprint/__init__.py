"""Average-hash fingerprinting and near-duplicate scanning."""

from .preprocess import preprocess
from .hash import DEFAULT_BITS, Fingerprint, average_hash, compute_hash
from .codec import from_bits, from_hex, hex_length, to_bits, to_hex
from .similarity import as_fingerprint, hamming_distance, similarity
from .scan import HashPair, ScanDiagnostic, find_similar_pairs, iter_similar_pairs

__all__ = [
    "preprocess",
    "DEFAULT_BITS",
    "Fingerprint",
    "average_hash",
    "compute_hash",
    "from_bits",
    "from_hex",
    "hex_length",
    "to_bits",
    "to_hex",
    "as_fingerprint",
    "hamming_distance",
    "similarity",
    "HashPair",
    "ScanDiagnostic",
    "find_similar_pairs",
    "iter_similar_pairs",
]
