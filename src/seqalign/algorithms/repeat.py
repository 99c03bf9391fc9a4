"""
Repeated matches of sequence 2 along sequence 1.

Durbin et al.'s repeat recurrence: column 0 of row ``i`` holds the best score
of ``seq1[:i]`` with the last symbol left unmatched, and a match run may be
closed at the end of any row, paying the threshold ``T``:

    F[i][0] = max(F[i-1][0], max_j F[i-1][j] - T)
    F[i][j] = max(F[i][0], F[i-1][j-1] + s, F[i-1][j] - d, F[i][j-1] - d)

Only matches scoring above ``T`` are worth reporting, so the result lists
every copy of (part of) sequence 2 inside sequence 1. Sequence 1 is never
gapped: ``aligned1`` is sequence 1 itself and ``aligned2`` annotates each of
its positions with the matched symbol, a gap, or ``unmatched_char``.
"""

import math
from typing import List, Optional

from ..core.errors import AlignmentError, ConfigurationError, TracebackConsistencyError
from ..core.result import AlignmentMode, AlignmentResult
from ..core.sequence import check_alignable, check_gap_char
from ..core.traceback import DIAG, LEFT, STOP, UP
from ..core.workspace import Workspace
from .base import Recurrence
from .linear import LinearGapAligner

# Codes past the four moves; only RepeatAligner walks them
RESTART = 4  # match run starts here, continue from column 0 of the same row
JUMP = 5     # column 0: continue from the best column of the previous row

DEFAULT_THRESHOLD = 20.0


class RepeatRecurrence(Recurrence):
    """
    Repeat recurrence over one plane.

    Ties go to the first of restart, diagonal, up, left. ``jumps[i]`` is the
    column of row ``i - 1`` that ``F[i][0]`` continues from (0 when no match
    run cleared the threshold).
    """
    planes = 1

    def __init__(self, gap_cost, threshold: float):
        super().__init__(gap_cost, local=False)
        self.threshold = threshold
        self.jumps: List[int] = [0]

    def best_column(self, row) -> int:
        """Column a row's match run is closed from, 0 if none beats staying unmatched."""
        best, value = 0, row[0] + self.threshold
        for j in range(1, len(row)):
            if row[j] > value:
                best, value = j, row[j]
        return best

    def closed_score(self, row, j: int) -> float:
        return float(row[0]) if j == 0 else float(row[j]) - self.threshold

    def first_row(self, m):
        return [[0.0] * (m + 1)], [[STOP] * (m + 1)]

    def next_row(self, i, prev, subst):
        d = self.gap_cost.cost
        above = prev[0]
        m = len(above) - 1

        jump = self.best_column(above)
        self.jumps.append(jump)
        unmatched = self.closed_score(above, jump)

        row = [unmatched] + [0.0] * m
        codes = [JUMP] + [STOP] * m
        left = unmatched
        for j in range(1, m + 1):
            diag = above[j - 1] + subst[j - 1]
            up = above[j] - d
            gap = left - d
            val = max(unmatched, diag, up, gap)

            if val == unmatched:
                code = RESTART
            elif val == diag:
                code = DIAG
            elif val == up:
                code = UP
            elif val == gap:
                code = LEFT
            else:
                raise TracebackConsistencyError("repeat recurrence", i, j)

            row[j] = val
            codes[j] = code
            left = val
        return [row], [codes]

    def terminal(self, scores, n, m):
        return n, self.best_column(scores[0, n].tolist()), 0


class RepeatAligner(LinearGapAligner):
    """
    Full-matrix aligner for repeated matches of sequence 2 in sequence 1.

    Args:
        threshold: Score a match run must exceed to be reported; charged once
            per run.
        workspace: Scratch matrices to fill.
        poll_every_rows: Rows between progress listener polls.
        gap_char: Marks positions of sequence 1 matched against a gap.
        unmatched_char: Marks positions of sequence 1 outside every match run.

    Examples:
        >>> aligner = RepeatAligner(threshold=3)
        >>> result = aligner.align("TTACGTTTACGTTT", "ACG", ScoreMatrix.identity("ACGT", 2, -2), 2)
        >>> result.aligned2
        '..ACG...ACG...'
    """
    modes = (AlignmentMode.REPEAT,)

    def __init__(self, threshold: float = DEFAULT_THRESHOLD, workspace: Optional[Workspace] = None,
                 poll_every_rows: int = 1, gap_char: str = '-', unmatched_char: str = '.'):
        super().__init__(workspace=workspace, poll_every_rows=poll_every_rows, gap_char=gap_char,
                         mode=AlignmentMode.REPEAT)
        try:
            threshold = float(threshold)
        except (TypeError, ValueError):
            raise ConfigurationError(f"repeat threshold must be a number, got {threshold!r}") from None
        if not math.isfinite(threshold) or threshold < 0:
            raise ConfigurationError(f"repeat threshold must be finite and not negative, got {threshold}")
        self.threshold = threshold
        self.unmatched_char = check_gap_char(unmatched_char)
        if self.unmatched_char == self.gap_char:
            raise ConfigurationError("unmatched_char and gap_char must differ")

    def __repr__(self):
        return f"RepeatAligner(threshold={self.threshold:g}, {self.workspace!r})"

    def make_recurrence(self, gap_cost, mode):
        return RepeatRecurrence(gap_cost, self.threshold)

    def check_symbols(self, s1, s2):
        super().check_symbols(s1, s2)
        check_alignable(s2, self.unmatched_char)

    def extract_score(self) -> float:
        self._require_filled()
        i, j, _ = self._terminal()
        return self._recurrence.closed_score(self._scores[0, i], j)

    def traceback_cursor(self):
        raise AlignmentError("Repeat tracebacks jump between rows; use extract_traceback()")

    def extract_traceback(self) -> AlignmentResult:
        self._require_filled()
        s1, s2 = self._seq1, self._seq2
        trace = self._trace[0]
        jumps = self._recurrence.jumps
        i, j, _ = self._terminal()
        terminal = (i, j)

        cols1, cols2 = [], []
        while i > 0:
            code = int(trace[i, j])
            if code == JUMP:
                cols1.append(str(s1[i - 1]))
                cols2.append(self.unmatched_char)
                i, j = i - 1, jumps[i]
            elif code == RESTART:
                j = 0
            elif code == DIAG:
                cols1.append(str(s1[i - 1]))
                cols2.append(str(s2[j - 1]))
                i, j = i - 1, j - 1
            elif code == UP:
                cols1.append(str(s1[i - 1]))
                cols2.append(self.gap_char)
                i -= 1
            elif code == LEFT:
                j -= 1
            else:
                raise TracebackConsistencyError("repeat traceback", i, j)
        cols1.reverse()
        cols2.reverse()

        return AlignmentResult(
            score=self.extract_score(),
            aligned1=''.join(cols1),
            aligned2=''.join(cols2),
            terminal=terminal,
            origin=(i, j),
            mode=AlignmentMode.REPEAT,
            gap_char=self.gap_char,
        )
