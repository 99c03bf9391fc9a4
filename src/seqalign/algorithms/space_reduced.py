"""
Linear-memory alignment.

Two separate capabilities live here:

- ``score``: the optimal score and its end cell from rolling rows, for
  constant or affine gap costs, in O(min(n, m)) memory.
- ``align``: the full alignment path by Hirschberg's divide and conquer,
  constant gap cost only. Each level bisects sequence 1, runs a forward and a
  reverse score pass to find where the optimal path crosses the middle row,
  and recurses on both halves until the pieces are small enough for the
  full-matrix aligner.

On tied optimal paths the path returned by ``align`` may differ from the one
``LinearGapAligner`` picks; the score is the same.
"""

import logging
from typing import Optional, Tuple

from ..core.errors import AlignmentCancelled, ConfigurationError
from ..core.gaps import AffineGapCost, as_gap_cost
from ..core.progress import as_progress_listener
from ..core.result import AlignmentMode, AlignmentResult, ScoreResult
from ..core.scoring import RowScorer
from ..core.sequence import as_symbols, check_alignable
from ..core.workspace import Workspace
from .affine import AffineRecurrence
from .base import NEG_INF
from .linear import LinearGapAligner, LinearRecurrence

logger = logging.getLogger('seqalign')

DEFAULT_BASE_CASE_CELLS = 4096


class _RowPoller:
    """Polls a listener every ``every`` rows with the share of cells already filled."""

    def __init__(self, listener, total_cells: int, every: int = 1):
        self.listener = listener
        self.total = max(total_cells, 1)
        self.every = every
        self.done = 0
        self.rows = 0

    def tick(self, width: int):
        if self.listener is not None and self.rows % self.every == 0:
            if self.listener.report(min(self.done / self.total, 1.0)):
                raise AlignmentCancelled()
        self.rows += 1
        self.done += width

    def skip(self, cells: int):
        self.done += cells

    def finish(self):
        if self.listener is not None:
            self.listener.report(1.0)


def _sweep(recurrence, s1, s2, score_model, poller: _RowPoller, track: bool = False):
    """
    Run ``recurrence`` over ``s1 x s2`` keeping one row per plane.

    Returns:
        Tuple of (last rows, (best_i, best_j, best_value)); the best cell is the
        first strictly maximal interior cell of plane 0 when ``track`` is set.
    """
    m = len(s2)
    scorer = RowScorer(score_model, s2)
    rows, _ = recurrence.first_row(m)
    best, best_i, best_j = NEG_INF, len(s1), m
    for i in range(1, len(s1) + 1):
        poller.tick(m)
        rows, _ = recurrence.next_row(i, rows, scorer.row(s1[i - 1]))
        if track and m:
            plane = rows[0]
            top = max(plane[1:])
            if top > best:
                best, best_i, best_j = top, i, plane.index(top, 1)
    return rows, (best_i, best_j, best)


def _global_last_row(s1, s2, score_model, cost: float, poller: _RowPoller):
    rows, _ = _sweep(LinearRecurrence(as_gap_cost(cost), local=False), s1, s2, score_model, poller)
    return rows[0]


class SpaceReducedAligner:
    """
    Rolling-row scores and Hirschberg alignments for long sequences.

    Args:
        workspace: Scratch matrices for the full-matrix base cases.
        poll_every_rows: Rows between progress listener polls.
        base_case_cells: Sub-problems with at most this many DP cells are
            solved with ``LinearGapAligner``.
        gap_char: Single character inserted into the aligned strings for gaps.
        mode: Alignment mode used when a call does not name one.
    """

    def __init__(self, workspace: Optional[Workspace] = None, poll_every_rows: int = 1,
                 base_case_cells: int = DEFAULT_BASE_CASE_CELLS, gap_char: str = '-',
                 mode=AlignmentMode.GLOBAL):
        if int(base_case_cells) < 1:
            raise ConfigurationError(f"base_case_cells must be at least 1, got {base_case_cells}")
        self.base_case_cells = int(base_case_cells)
        self._base = LinearGapAligner(workspace=workspace, poll_every_rows=poll_every_rows, gap_char=gap_char)
        self.gap_char = self._base.gap_char
        self.poll_every_rows = self._base.poll_every_rows
        self.mode = AlignmentMode.coerce(mode)
        self._resolve_mode(self.mode)

    def __repr__(self):
        return f"SpaceReducedAligner(base_case_cells={self.base_case_cells})"

    @property
    def workspace(self) -> Workspace:
        return self._base.workspace

    def _resolve_mode(self, mode) -> AlignmentMode:
        mode = AlignmentMode.coerce(self.mode if mode is None else mode)
        if mode is AlignmentMode.REPEAT:
            raise ConfigurationError("Repeat alignment needs the full matrix; use RepeatAligner")
        return mode

    def _inputs(self, seq1, seq2):
        s1, s2 = as_symbols(seq1), as_symbols(seq2)
        if not s1 and not s2:
            raise ConfigurationError("Cannot align two empty sequences")
        check_alignable(s1, self.gap_char)
        check_alignable(s2, self.gap_char)
        return s1, s2

    # Score only --------------------------------------------------------------------------------------------------

    def score(self, seq1, seq2, score_model, gap_cost, mode=None, progress=None) -> ScoreResult:
        """
        Optimal score without a traceback.

        Rows run over the shorter sequence. ``terminal`` is reported in the
        caller's orientation.
        """
        mode = self._resolve_mode(mode)
        gap_cost = as_gap_cost(gap_cost)
        s1, s2 = self._inputs(seq1, seq2)
        local = mode is AlignmentMode.LOCAL

        swapped = len(s2) > len(s1)
        if swapped:
            s1, s2 = s2, s1
        n, m = len(s1), len(s2)

        if isinstance(gap_cost, AffineGapCost):
            recurrence = AffineRecurrence(gap_cost, local)
        else:
            recurrence = LinearRecurrence(gap_cost, local)

        listener = as_progress_listener(progress)
        poller = _RowPoller(listener, n * m, self.poll_every_rows)
        try:
            rows, (bi, bj, best) = _sweep(recurrence, s1, s2, score_model, poller, track=local)
        except AlignmentCancelled:
            logger.info(f"Score-only pass cancelled after {poller.rows}/{n} rows")
            return ScoreResult.cancelled_result(mode)
        poller.finish()

        if local:
            if best == NEG_INF:
                value, terminal = 0.0, (n, m)
            else:
                value, terminal = float(best), (bi, bj)
        else:
            value = rows[0][m]
            for plane in rows[1:]:
                if plane[m] > value:
                    value = plane[m]
            value, terminal = float(value), (n, m)

        if swapped:
            terminal = terminal[::-1]
        return ScoreResult(score=value, terminal=terminal, mode=mode)

    # Path reconstruction -----------------------------------------------------------------------------------------

    def align(self, seq1, seq2, score_model, gap_cost, mode=None, progress=None) -> AlignmentResult:
        """Optimal alignment in linear memory (constant gap cost only)."""
        mode = self._resolve_mode(mode)
        gap_cost = as_gap_cost(gap_cost)
        if isinstance(gap_cost, AffineGapCost):
            if gap_cost.open != gap_cost.extend:
                raise ConfigurationError(
                    "Linear-space path reconstruction supports constant gap costs only; "
                    "use AffineGapAligner or the score-only pass for affine costs")
            gap_cost = as_gap_cost(gap_cost.open)
        s1, s2 = self._inputs(seq1, seq2)
        n, m = len(s1), len(s2)
        cost = gap_cost.cost

        listener = as_progress_listener(progress)
        if mode is AlignmentMode.LOCAL:
            # forward + anchored reverse + global Hirschberg over the enclosed region
            poller = _RowPoller(listener, 4 * n * m, self.poll_every_rows)
        else:
            poller = _RowPoller(listener, 2 * n * m, self.poll_every_rows)

        try:
            if mode is AlignmentMode.LOCAL:
                result = self._align_local(s1, s2, score_model, cost, poller)
            else:
                a1, a2, score = self._hirschberg(s1, s2, score_model, cost, poller)
                result = AlignmentResult(score=score, aligned1=a1, aligned2=a2, terminal=(n, m),
                                         origin=(0, 0), mode=mode, gap_char=self.gap_char)
        except AlignmentCancelled:
            logger.info("Linear-space alignment cancelled")
            return AlignmentResult.cancelled_result(mode, self.gap_char)
        poller.finish()
        return result

    def _align_local(self, s1, s2, score_model, cost, poller) -> AlignmentResult:
        n, m = len(s1), len(s2)
        _, (end_i, end_j, best) = _sweep(LinearRecurrence(as_gap_cost(cost), local=True),
                                         s1, s2, score_model, poller, track=True)
        if best == NEG_INF:
            end_i, end_j, best = n, m, 0.0
        if best <= 0:
            return AlignmentResult(score=float(max(best, 0.0)), aligned1='', aligned2='',
                                   terminal=(end_i, end_j), origin=(end_i, end_j),
                                   mode=AlignmentMode.LOCAL, gap_char=self.gap_char)

        # Alignments anchored at the end cell, read backwards; the best of them starts the local alignment
        r1 = s1[:end_i][::-1]
        r2 = s2[:end_j][::-1]
        _, (back_i, back_j, _) = _sweep(LinearRecurrence(as_gap_cost(cost), local=False),
                                        r1, r2, score_model, poller, track=True)
        start_i, start_j = end_i - back_i, end_j - back_j

        a1, a2, _ = self._hirschberg(s1[start_i:end_i], s2[start_j:end_j], score_model, cost, poller)
        return AlignmentResult(score=float(best), aligned1=a1, aligned2=a2,
                               terminal=(end_i, end_j), origin=(start_i, start_j),
                               mode=AlignmentMode.LOCAL, gap_char=self.gap_char)

    def _hirschberg(self, s1, s2, score_model, cost: float, poller: _RowPoller) -> Tuple[str, str, float]:
        """Global alignment of ``s1`` and ``s2`` as (aligned1, aligned2, score)."""
        gap = self.gap_char
        n, m = len(s1), len(s2)
        if n == 0:
            return gap * m, ''.join(str(s) for s in s2), -cost * m
        if m == 0:
            return ''.join(str(s) for s in s1), gap * n, -cost * n

        if n <= 1 or m <= 1 or (n + 1) * (m + 1) <= self.base_case_cells:
            logger.debug(f"Hirschberg base case {n} x {m}")
            result = self._base.align(s1, s2, score_model, cost, AlignmentMode.GLOBAL)
            poller.skip(n * m)
            return result.aligned1, result.aligned2, result.score

        u = n // 2
        forward = _global_last_row(s1[:u], s2, score_model, cost, poller)
        reverse = _global_last_row(s1[u:][::-1], s2[::-1], score_model, cost, poller)

        split, best = 0, NEG_INF
        for v in range(m + 1):
            total = forward[v] + reverse[m - v]
            if total > best:
                split, best = v, total

        top1, top2, _ = self._hirschberg(s1[:u], s2[:split], score_model, cost, poller)
        bottom1, bottom2, _ = self._hirschberg(s1[u:], s2[split:], score_model, cost, poller)
        return top1 + bottom1, top2 + bottom2, float(best)
