"""Pairwise near-duplicate scanning over a fingerprint collection."""

from __future__ import annotations

import math
import numbers
from collections import Counter
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass
from typing import Any, Callable, Dict, Hashable, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple, Union

import imagehash

from ..errors import FormatError, InputError
from ..logging import get_logger
from .hash import DEFAULT_BITS, Fingerprint
from .similarity import as_fingerprint

logger = get_logger(__name__)


@dataclass(frozen=True, eq=False)
class HashPair:
    """Two fingerprints whose similarity passed a scan threshold.

    Equality ignores which member came first.
    """
    first_id: Hashable
    first: Fingerprint
    second_id: Hashable
    second: Fingerprint
    similarity: float

    def _members(self) -> frozenset:
        return frozenset({(self.first_id, self.first), (self.second_id, self.second)})

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HashPair):
            return NotImplemented
        return self.similarity == other.similarity and self._members() == other._members()

    def __hash__(self) -> int:
        return hash((self._members(), self.similarity))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "first_id": self.first_id,
            "first": str(self.first),
            "second_id": self.second_id,
            "second": str(self.second),
            "similarity": self.similarity,
        }


@dataclass(frozen=True)
class ScanDiagnostic:
    """An input element that was left out of a scan."""
    item_id: Hashable
    value: Any
    reason: str


# One validated scan element: its id and either the decoded fingerprint or
# the reason it was rejected.
_ScanItem = Tuple[Hashable, Union[Fingerprint, ScanDiagnostic]]
_Diagnose = Optional[Callable[[ScanDiagnostic], None]]


def iter_similar_pairs(
    fingerprints: Union[Sequence[Any], Mapping[Hashable, Any], None],
    threshold: float,
    bits: Optional[int] = None,
    on_diagnostic: _Diagnose = None,
) -> Iterator[HashPair]:
    """
    Lazily yield every pair whose similarity is strictly above ``threshold``.

    Pairs come out in (first position, second position) order. Stopping
    iteration early abandons the remaining comparisons.
    """
    _check_threshold(threshold)
    entries = _valid_entries(_prepare(fingerprints, bits, on_diagnostic))

    for i in range(len(entries)):
        id_i, fp_i = entries[i]
        for j in range(i + 1, len(entries)):
            id_j, fp_j = entries[j]
            score = 1.0 - (fp_i - fp_j) / fp_i.bits
            if score > threshold:
                logger.debug(f"Matched {id_i} and {id_j} (similarity: {score:.6f})")
                yield HashPair(first_id=id_i, first=fp_i, second_id=id_j, second=fp_j, similarity=score)


def find_similar_pairs(
    fingerprints: Union[Sequence[Any], Mapping[Hashable, Any], None],
    threshold: float,
    bits: Optional[int] = None,
    on_diagnostic: _Diagnose = None,
    workers: int = 1,
) -> List[HashPair]:
    """
    Find all unordered pairs of near-duplicate fingerprints.

    Args:
        fingerprints: Sequence of fingerprints (ids are positions) or a
            mapping of id -> fingerprint. Elements may be Fingerprint,
            ImageHash or hex text.
        threshold: A pair is kept only when its similarity is strictly greater
        bits: Fingerprint width; inferred from the most common element width when omitted
        on_diagnostic: Called once for every element that fails validation
        workers: Number of processes to spread comparisons over

    Returns:
        HashPair list sorted by member positions
    """
    if workers < 1:
        raise InputError(f"Worker count must be positive, got {workers}")
    if workers == 1:
        pairs = list(iter_similar_pairs(fingerprints, threshold, bits=bits, on_diagnostic=on_diagnostic))
        logger.info(f"Scan complete: {len(pairs)} pairs above {threshold}")
        return pairs

    _check_threshold(threshold)
    entries = _valid_entries(_prepare(fingerprints, bits, on_diagnostic))
    if len(entries) < 2:
        return []

    width = entries[0][1].bits
    values = [fp.value for _, fp in entries]
    tasks = [(values, width, threshold, start, workers) for start in range(workers)]

    matches: List[Tuple[int, int, float]] = []
    with ProcessPoolExecutor(max_workers=workers) as executor:
        for chunk in executor.map(_compare_rows, tasks):
            matches.extend(chunk)
    matches.sort()

    pairs = [
        HashPair(
            first_id=entries[i][0],
            first=entries[i][1],
            second_id=entries[j][0],
            second=entries[j][1],
            similarity=score,
        )
        for i, j, score in matches
    ]
    logger.info(f"Scan complete: {len(pairs)} pairs above {threshold} using {workers} workers")
    return pairs


def _compare_rows(task: Tuple[List[int], int, float, int, int]) -> List[Tuple[int, int, float]]:
    """Compare rows start, start + step, ... against every later entry."""
    values, width, threshold, start, step = task
    found = []
    for i in range(start, len(values), step):
        for j in range(i + 1, len(values)):
            score = 1.0 - bin(values[i] ^ values[j]).count("1") / width
            if score > threshold:
                found.append((i, j, score))
    return found


def _check_threshold(threshold: Any) -> None:
    if isinstance(threshold, bool) or not isinstance(threshold, numbers.Real) or math.isnan(threshold):
        raise InputError(f"Threshold must be a number, got {threshold!r}")


def _prepare(
    fingerprints: Union[Sequence[Any], Mapping[Hashable, Any], None],
    bits: Optional[int],
    on_diagnostic: _Diagnose,
) -> List[_ScanItem]:
    """Decode every element once, turning failures into diagnostics."""
    if fingerprints is None:
        return []
    if isinstance(fingerprints, (str, bytes)):
        raise InputError("Expected a collection of fingerprints, got a single string")

    if isinstance(fingerprints, Mapping):
        labelled = list(fingerprints.items())
    else:
        labelled = list(enumerate(fingerprints))
    if len(labelled) < 2:
        return []

    width = bits if bits is not None else _batch_width(value for _, value in labelled)

    items: List[_ScanItem] = []
    for item_id, value in labelled:
        try:
            items.append((item_id, as_fingerprint(value, bits=width)))
        except FormatError as exc:
            diagnostic = ScanDiagnostic(item_id=item_id, value=value, reason=str(exc))
            logger.warning(f"Skipping fingerprint {item_id!r}: {exc}")
            if on_diagnostic is not None:
                on_diagnostic(diagnostic)
            items.append((item_id, diagnostic))
    return items


def _batch_width(values: Iterable[Any]) -> int:
    """
    Pick the width most elements agree on.

    Hex text counts as four bits per character. Ties go to the default
    width when it is among the leaders, otherwise to the earliest seen.
    """
    widths: Counter = Counter()
    for value in values:
        if isinstance(value, Fingerprint):
            widths[value.bits] += 1
        elif isinstance(value, imagehash.ImageHash):
            widths[int(value.hash.size)] += 1
        elif isinstance(value, str) and value:
            widths[len(value) * 4] += 1
    if not widths:
        return DEFAULT_BITS

    top = max(widths.values())
    leaders = [width for width, count in widths.items() if count == top]
    return DEFAULT_BITS if DEFAULT_BITS in leaders else leaders[0]


def _valid_entries(items: List[_ScanItem]) -> List[Tuple[Hashable, Fingerprint]]:
    return [(item_id, result) for item_id, result in items if isinstance(result, Fingerprint)]
