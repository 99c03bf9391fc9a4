"""
Alignment modes and result containers.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

from .errors import ConfigurationError
from .utilities import build_cigar, compute_alignment_stats, symbols_match


class AlignmentMode(str, Enum):
    """Alignment semantics."""
    GLOBAL = 'global'
    LOCAL = 'local'
    REPEAT = 'repeat'

    @classmethod
    def coerce(cls, value) -> 'AlignmentMode':
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ConfigurationError(f"Unknown alignment mode {value!r}; use 'global', 'local' or 'repeat'") from None


class AlignmentStatus(str, Enum):
    COMPLETED = 'completed'
    CANCELLED = 'cancelled'


@dataclass(frozen=True)
class AlignmentResult:
    """
    An optimal alignment and where it sits in the DP matrix.

    ``terminal`` is the cell the traceback started from and ``origin`` the
    cell it stopped at. For global alignments they are ``(n, m)`` and
    ``(0, 0)``; for local alignments both are interior cells, and
    ``seq1[origin[0]:terminal[0]]`` is the aligned part of sequence 1.
    """
    score: Optional[float]
    aligned1: str
    aligned2: str
    terminal: Tuple[int, int]
    origin: Tuple[int, int]
    mode: AlignmentMode
    status: AlignmentStatus = AlignmentStatus.COMPLETED
    gap_char: str = '-'

    @classmethod
    def cancelled_result(cls, mode, gap_char: str = '-') -> 'AlignmentResult':
        return cls(score=None, aligned1='', aligned2='', terminal=(0, 0), origin=(0, 0),
                   mode=AlignmentMode.coerce(mode), status=AlignmentStatus.CANCELLED, gap_char=gap_char)

    @property
    def cancelled(self) -> bool:
        return self.status is AlignmentStatus.CANCELLED

    @property
    def length(self) -> int:
        return len(self.aligned1)

    @property
    def cigar(self) -> str:
        return build_cigar(self.aligned1, self.aligned2, self.gap_char)

    @property
    def stats(self) -> Dict:
        return compute_alignment_stats(self.aligned1, self.aligned2, self.gap_char)

    @property
    def identity(self) -> float:
        return self.stats['identity']

    def swapped(self) -> 'AlignmentResult':
        """The same alignment with the roles of the two sequences exchanged."""
        return AlignmentResult(
            score=self.score, aligned1=self.aligned2, aligned2=self.aligned1,
            terminal=self.terminal[::-1], origin=self.origin[::-1],
            mode=self.mode, status=self.status, gap_char=self.gap_char)

    def match_line(self) -> str:
        return ''.join(
            ' ' if self.gap_char in (x, y) else '|' if symbols_match(x, y, self.gap_char) else '.'
            for x, y in zip(self.aligned1, self.aligned2))

    def format(self, width: int = 60) -> str:
        """Block layout with a match line between the two sequences."""
        if self.cancelled:
            return "Alignment cancelled"
        lines = [f"Score: {self.score:g} ({self.mode.value}, "
                 f"seq1 {self.origin[0]}-{self.terminal[0]}, seq2 {self.origin[1]}-{self.terminal[1]})"]
        matches = self.match_line()
        for start in range(0, len(self.aligned1), width):
            end = start + width
            lines.append("")
            lines.append(self.aligned1[start:end])
            lines.append(matches[start:end])
            lines.append(self.aligned2[start:end])
        return '\n'.join(lines)

    def __str__(self):
        return self.format()


@dataclass(frozen=True)
class ScoreResult:
    """Score-only outcome; ``terminal`` is the cell holding the optimal score."""
    score: Optional[float]
    terminal: Tuple[int, int]
    mode: AlignmentMode
    status: AlignmentStatus = AlignmentStatus.COMPLETED

    @classmethod
    def cancelled_result(cls, mode) -> 'ScoreResult':
        return cls(score=None, terminal=(0, 0), mode=AlignmentMode.coerce(mode),
                   status=AlignmentStatus.CANCELLED)

    @property
    def cancelled(self) -> bool:
        return self.status is AlignmentStatus.CANCELLED
