"""
Constant gap cost alignment: Needleman-Wunsch (global) and Smith-Waterman (local).
"""

from ..core.errors import ConfigurationError, TracebackConsistencyError
from ..core.gaps import AffineGapCost, as_gap_cost
from ..core.traceback import DIAG, LEFT, STOP, UP
from .base import Aligner, Recurrence


class LinearRecurrence(Recurrence):
    """
    ``F[i][j] = max(0?, F[i-1][j-1] + s, F[i-1][j] - d, F[i][j-1] - d)``

    Ties go to the first of zero floor (local only), diagonal, up, left.
    """
    planes = 1

    def first_row(self, m):
        if self.local:
            return [[0.0] * (m + 1)], [[STOP] * (m + 1)]
        d = self.gap_cost.cost
        return [[-j * d for j in range(m + 1)]], [[STOP] + [LEFT] * m]

    def next_row(self, i, prev, subst):
        d = self.gap_cost.cost
        local = self.local
        above = prev[0]
        m = len(above) - 1

        row = [0.0] * (m + 1)
        codes = [STOP] * (m + 1)
        if not local:
            row[0] = -i * d
            codes[0] = UP

        left = row[0]
        for j in range(1, m + 1):
            diag = above[j - 1] + subst[j - 1]
            up = above[j] - d
            gap = left - d
            if local:
                val = max(0.0, diag, up, gap)
            else:
                val = max(diag, up, gap)

            if local and val == 0:
                code = STOP
            elif val == diag:
                code = DIAG
            elif val == up:
                code = UP
            elif val == gap:
                code = LEFT
            else:
                raise TracebackConsistencyError("linear recurrence", i, j)

            row[j] = val
            codes[j] = code
            left = val
        return [row], [codes]

    def terminal(self, scores, n, m):
        if self.local:
            return self.local_terminal(scores, n, m)
        return n, m, 0


class LinearGapAligner(Aligner):
    """
    Full-matrix aligner for a constant per-column gap cost.

    Examples:
        >>> aligner = LinearGapAligner()
        >>> result = aligner.align("GATTACA", "GCATGCU", ScoreMatrix.identity("ACGTU"), 1.0)
        >>> result.score
        0.0
    """
    recurrence_class = LinearRecurrence

    def coerce_gap_cost(self, gap_cost):
        gap_cost = as_gap_cost(gap_cost)
        if isinstance(gap_cost, AffineGapCost):
            if gap_cost.open != gap_cost.extend:
                raise ConfigurationError(
                    "LinearGapAligner needs a constant gap cost; use AffineGapAligner for open/extend costs")
            return as_gap_cost(gap_cost.open)
        return gap_cost
