"""
Alignment statistics and CIGAR helpers.
"""

import re
from typing import Dict, Tuple

_CIGAR_RE = re.compile(r'(\d+)([MIDX=])')


def symbols_match(a: str, b: str, gap_char: str = '-') -> bool:
    """Exact, case-insensitive match; gaps never match."""
    if a == gap_char or b == gap_char:
        return False
    return a.upper() == b.upper()


def compute_alignment_stats(a1: str, a2: str, gap_char: str = '-') -> Dict:
    """
    Compute alignment statistics.

    Returns:
        Dictionary with alignment statistics including:
        - matches, mismatches, insertions (gap in seq1), deletions (gap in seq2)
        - identity and divergence (fractions of aligned columns)
        - total_aligned length
        - gap_openings, total_gaps, gap_percentage
    """
    if len(a1) != len(a2):
        raise ValueError(f"Alignment length mismatch: {len(a1)} != {len(a2)}")

    matches = mismatches = insertions = deletions = 0
    gap_openings = 0
    prev_op = None

    for x, y in zip(a1, a2):
        if x != gap_char and y != gap_char:
            op = 'M'
            if symbols_match(x, y, gap_char):
                matches += 1
            else:
                mismatches += 1
        elif x == gap_char and y != gap_char:
            op = 'I'
            insertions += 1
        elif x != gap_char and y == gap_char:
            op = 'D'
            deletions += 1
        else:
            raise ValueError("Alignment column is a gap in both sequences")
        if op != 'M' and op != prev_op:
            gap_openings += 1
        prev_op = op

    total_gaps = insertions + deletions
    total = matches + mismatches + total_gaps
    return {
        "matches": matches,
        "mismatches": mismatches,
        "insertions": insertions,
        "deletions": deletions,
        "identity": matches / total if total else 0.0,
        "divergence": (mismatches + total_gaps) / total if total else 0.0,
        "total_aligned": total,
        "gap_openings": gap_openings,
        "total_gaps": total_gaps,
        "gap_percentage": total_gaps / total * 100 if total else 0.0,
    }


def build_cigar(a1: str, a2: str, gap_char: str = '-') -> str:
    """
    Build an extended CIGAR string from an alignment.

    CIGAR operations:
    - =: sequence match
    - X: sequence mismatch
    - I: insertion relative to seq1 (gap in seq1)
    - D: deletion relative to seq1 (gap in seq2)
    """
    cigar = []
    last_op = None
    count = 0

    for x, y in zip(a1, a2):
        if x != gap_char and y != gap_char:
            op = '=' if symbols_match(x, y, gap_char) else 'X'
        elif x == gap_char:
            op = 'I'
        else:
            op = 'D'

        if op == last_op:
            count += 1
        else:
            if last_op is not None:
                cigar.append(f"{count}{last_op}")
            last_op = op
            count = 1

    if last_op:
        cigar.append(f"{count}{last_op}")

    return ''.join(cigar)


def cigar_to_alignment(cigar: str, seq1: str, seq2: str, gap_char: str = '-') -> Tuple[str, str]:
    """
    Expand a CIGAR string back into gapped sequences.

    Args:
        cigar: CIGAR string
        seq1: Sequence 1 without gaps
        seq2: Sequence 2 without gaps

    Returns:
        Tuple of (aligned_seq1, aligned_seq2)
    """
    a1_parts = []
    a2_parts = []
    i = j = 0

    for count_str, op in _CIGAR_RE.findall(cigar):
        count = int(count_str)
        if op in 'M=X':
            a1_parts.append(seq1[i:i + count])
            a2_parts.append(seq2[j:j + count])
            i += count
            j += count
        elif op == 'I':
            a1_parts.append(gap_char * count)
            a2_parts.append(seq2[j:j + count])
            j += count
        else:
            a1_parts.append(seq1[i:i + count])
            a2_parts.append(gap_char * count)
            i += count

    if i != len(seq1) or j != len(seq2):
        raise ValueError(f"CIGAR {cigar!r} consumes ({i}, {j}) symbols, "
                         f"sequences have ({len(seq1)}, {len(seq2)})")

    return ''.join(a1_parts), ''.join(a2_parts)
