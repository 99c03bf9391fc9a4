"""
Resource checks and alignment result validation.
"""

import logging
from typing import List, Optional, Tuple

import psutil

from ..core.errors import InsufficientMemoryError
from ..core.result import AlignmentMode

logger = logging.getLogger('seqalign')

DEFAULT_MAX_MEMORY_FRACTION = 0.8


def available_memory_bytes() -> int:
    """Memory the OS reports as available to new allocations."""
    return int(psutil.virtual_memory().available)


def check_memory(required_bytes: int, max_fraction: Optional[float] = None, what: str = "allocation") -> int:
    """
    Fail fast when ``required_bytes`` exceeds the allowed share of available memory.

    Args:
        required_bytes: Size of the planned allocation.
        max_fraction: Share of available memory one allocation may claim.
        what: Label used in messages.

    Returns:
        The available memory in bytes at the time of the check.
    """
    if max_fraction is None:
        max_fraction = DEFAULT_MAX_MEMORY_FRACTION
    available = available_memory_bytes()
    allowed = available * max_fraction
    if required_bytes > allowed:
        raise InsufficientMemoryError(
            f"Not enough memory for {what}: {required_bytes / 1e6:,.0f} MB required, "
            f"{allowed / 1e6:,.0f} MB allowed ({available / 1e6:,.0f} MB available)")
    if required_bytes > allowed / 2:
        logger.warning(f"{what} will use {required_bytes / 1e6:,.0f} MB of "
                       f"{available / 1e6:,.0f} MB available memory")
    return available


def validate_alignment_result(result, seq1, seq2) -> Tuple[bool, List[str]]:
    """
    Check an alignment against the sequences it was computed from.

    For global results the gap-free aligned strings must reproduce the full
    inputs; for local results, the slices between ``origin`` and ``terminal``.
    Repeat results must carry sequence 1 ungapped and in full.

    Returns:
        Tuple of (is_valid, error_messages)
    """
    errors = []
    if getattr(result, 'cancelled', False):
        return False, ["Alignment was cancelled"]

    gap = result.gap_char
    a1, a2 = result.aligned1, result.aligned2

    if len(a1) != len(a2):
        errors.append(f"Aligned lengths differ: {len(a1)} != {len(a2)}")

    for col, (x, y) in enumerate(zip(a1, a2)):
        if x == gap and y == gap:
            errors.append(f"Column {col} is a gap in both sequences")
            break

    if result.mode is AlignmentMode.REPEAT:
        expected1 = ''.join(str(s) for s in seq1)
        if a1 != expected1:
            errors.append(f"Sequence 1 is not reproduced ungapped: {a1!r} != {expected1!r}")
        return len(errors) == 0, errors

    (i0, j0), (i1, j1) = result.origin, result.terminal
    expected1 = ''.join(str(s) for s in list(seq1)[i0:i1])
    expected2 = ''.join(str(s) for s in list(seq2)[j0:j1])
    stripped1 = a1.replace(gap, '')
    stripped2 = a2.replace(gap, '')
    if stripped1 != expected1:
        errors.append(f"Sequence 1 does not round-trip: {stripped1!r} != {expected1!r}")
    if stripped2 != expected2:
        errors.append(f"Sequence 2 does not round-trip: {stripped2!r} != {expected2!r}")

    return len(errors) == 0, errors
