"""
Affine gap cost alignment (Gotoh).

Three planes are filled together:

- ``M``: the column pairs two symbols,
- ``Ix``: the column consumes a symbol of sequence 1 against a gap,
- ``Iy``: the column consumes a symbol of sequence 2 against a gap.

A gap plane may be entered from the opposite gap plane at the open cost, so
an insertion directly followed by a deletion is scored as two gaps. With
``open == extend`` this reproduces the constant gap cost aligner exactly,
tie-breaks included.
"""

from ..core.errors import TracebackConsistencyError
from ..core.gaps import AffineGapCost, LinearGapCost, as_gap_cost
from ..core.traceback import DIAG, GAP1_PLANE, GAP2_PLANE, LEFT, MATCH_PLANE, STOP, UP, encode
from .base import NEG_INF, Aligner, Recurrence

_DIAG_FROM = (encode(DIAG, MATCH_PLANE), encode(DIAG, GAP1_PLANE), encode(DIAG, GAP2_PLANE))
_UP_FROM = (encode(UP, MATCH_PLANE), encode(UP, GAP1_PLANE), encode(UP, GAP2_PLANE))
_LEFT_FROM = (encode(LEFT, MATCH_PLANE), encode(LEFT, GAP1_PLANE), encode(LEFT, GAP2_PLANE))


def _pick(where, i, j, val, a, b, c, codes):
    # Plane order M, Ix, Iy on ties
    if val == a:
        return codes[0]
    if val == b:
        return codes[1]
    if val == c:
        return codes[2]
    raise TracebackConsistencyError(where, i, j)


class AffineRecurrence(Recurrence):
    planes = 3

    def first_row(self, m):
        go, ge = self.gap_cost.open, self.gap_cost.extend
        match = [NEG_INF] * (m + 1)
        gap1 = [NEG_INF] * (m + 1)
        gap2 = [NEG_INF] * (m + 1)
        stops = [STOP] * (m + 1)
        codes2 = [STOP] * (m + 1)
        if self.local:
            match = [0.0] * (m + 1)
        else:
            match[0] = 0.0
            for j in range(1, m + 1):
                gap2[j] = -go - ge * (j - 1)
                codes2[j] = _LEFT_FROM[MATCH_PLANE if j == 1 else GAP2_PLANE]
        return [match, gap1, gap2], [stops, list(stops), codes2]

    def next_row(self, i, prev, subst):
        go, ge = self.gap_cost.open, self.gap_cost.extend
        local = self.local
        pm, px, py = prev
        m = len(pm) - 1

        cm = [NEG_INF] * (m + 1)
        cx = [NEG_INF] * (m + 1)
        cy = [NEG_INF] * (m + 1)
        tm = [STOP] * (m + 1)
        tx = [STOP] * (m + 1)
        ty = [STOP] * (m + 1)

        if local:
            cm[0] = 0.0
        else:
            cx[0] = -go - ge * (i - 1)
            tx[0] = _UP_FROM[MATCH_PLANE if i == 1 else GAP1_PLANE]

        for j in range(1, m + 1):
            # M: pair seq1[i-1] with seq2[j-1]
            a, b, c = pm[j - 1], px[j - 1], py[j - 1]
            best = max(a, b, c)
            val = best + subst[j - 1]
            if local and val <= 0:
                cm[j] = 0.0
            else:
                cm[j] = val
                tm[j] = _pick("affine match plane", i, j, best, a, b, c, _DIAG_FROM)

            # Ix: seq1[i-1] against a gap
            a, b, c = pm[j] - go, px[j] - ge, py[j] - go
            val = max(a, b, c)
            cx[j] = val
            tx[j] = _pick("affine gap plane 1", i, j, val, a, b, c, _UP_FROM)

            # Iy: seq2[j-1] against a gap
            a, b, c = cm[j - 1] - go, cx[j - 1] - go, cy[j - 1] - ge
            val = max(a, b, c)
            cy[j] = val
            ty[j] = _pick("affine gap plane 2", i, j, val, a, b, c, _LEFT_FROM)

        return [cm, cx, cy], [tm, tx, ty]

    def terminal(self, scores, n, m):
        if self.local:
            return self.local_terminal(scores, n, m)
        best_plane = MATCH_PLANE
        best = scores[MATCH_PLANE, n, m]
        for k in (GAP1_PLANE, GAP2_PLANE):
            if scores[k, n, m] > best:
                best = scores[k, n, m]
                best_plane = k
        return n, m, best_plane


class AffineGapAligner(Aligner):
    """
    Full-matrix Gotoh aligner.

    Accepts an ``AffineGapCost``; a constant cost ``d`` is treated as
    ``AffineGapCost(d, d)``.
    """
    recurrence_class = AffineRecurrence

    def coerce_gap_cost(self, gap_cost):
        gap_cost = as_gap_cost(gap_cost)
        if isinstance(gap_cost, LinearGapCost):
            return AffineGapCost(gap_cost.cost, gap_cost.cost)
        return gap_cost
