"""
Shared dynamic-programming skeleton for the full-matrix aligners.

An ``Aligner`` owns the lifecycle ``prepare -> compute -> extract_score ->
extract_traceback`` and the row-major fill loop. What differs between the
variants (number of planes, border values, the per-row recurrence and the
choice of terminal cell) lives in a ``Recurrence`` strategy object built for
each call.
"""

import logging
from typing import List, Optional, Tuple

from ..core.errors import AlignmentCancelled, AlignmentError, ConfigurationError
from ..core.progress import as_progress_listener
from ..core.result import AlignmentMode, AlignmentResult
from ..core.scoring import RowScorer
from ..core.sequence import as_symbols, check_alignable, check_gap_char
from ..core.traceback import TracebackCursor, reconstruct
from ..core.workspace import Workspace

logger = logging.getLogger('seqalign')

NEG_INF = float('-inf')

Rows = List[List[float]]
Codes = List[List[int]]


class Recurrence:
    """
    Cell-filling strategy for one gap model.

    Rows are plain lists, one per plane; the aligner copies them into the
    workspace once a row is complete.
    """
    planes = 1

    def __init__(self, gap_cost, local: bool):
        self.gap_cost = gap_cost
        self.local = local

    def first_row(self, m: int) -> Tuple[Rows, Codes]:
        raise NotImplementedError

    def next_row(self, i: int, prev: Rows, subst: List[float]) -> Tuple[Rows, Codes]:
        raise NotImplementedError

    def terminal(self, scores, n: int, m: int) -> Tuple[int, int, int]:
        """Cell ``(i, j, plane)`` the traceback starts from."""
        raise NotImplementedError

    def local_terminal(self, scores, n: int, m: int) -> Tuple[int, int, int]:
        # First maximal interior match-plane cell in row-major order
        if n == 0 or m == 0:
            return n, m, 0
        interior = scores[0, 1:, 1:]
        flat = int(interior.argmax())
        i, j = divmod(flat, m)
        return i + 1, j + 1, 0


class Aligner:
    """
    Base class for full-matrix pairwise aligners.

    Subclasses name their ``Recurrence`` and coerce the gap cost they accept.
    One instance may be reused for any number of sequential alignments; its
    workspace grows to the largest problem seen so far.

    Args:
        workspace: Scratch matrices to fill; a private one is created if omitted.
            A workspace may be shared by several aligners as long as they never
            run at the same time.
        poll_every_rows: Rows between progress listener polls.
        gap_char: Single character inserted into the aligned strings for gaps;
            it must not occur in the sequences.
        mode: Alignment mode used when a call does not name one.
    """
    recurrence_class = Recurrence
    modes = (AlignmentMode.GLOBAL, AlignmentMode.LOCAL)

    def __init__(self, workspace: Optional[Workspace] = None, poll_every_rows: int = 1, gap_char: str = '-',
                 mode=AlignmentMode.GLOBAL):
        if int(poll_every_rows) < 1:
            raise ConfigurationError(f"poll_every_rows must be at least 1, got {poll_every_rows}")
        self.workspace = workspace if workspace is not None else Workspace()
        self.poll_every_rows = int(poll_every_rows)
        self.gap_char = check_gap_char(gap_char)
        self.mode = AlignmentMode.coerce(mode)
        self._reset()

    def __repr__(self):
        return f"{type(self).__name__}({self.workspace!r})"

    def _reset(self):
        self._seq1 = self._seq2 = None
        self._recurrence = None
        self._scores = self._trace = None
        self._scorer = None
        self._prev = None
        self._mode = AlignmentMode.GLOBAL
        self._filled = False
        self._cancelled_row = 0

    def coerce_gap_cost(self, gap_cost):
        raise NotImplementedError

    def make_recurrence(self, gap_cost, mode: AlignmentMode) -> Recurrence:
        return self.recurrence_class(gap_cost, mode is AlignmentMode.LOCAL)

    def check_symbols(self, s1, s2):
        check_alignable(s1, self.gap_char)
        check_alignable(s2, self.gap_char)

    # Lifecycle ---------------------------------------------------------------------------------------------------

    def prepare(self, seq1, seq2, score_model, gap_cost, mode=None):
        """Validate the inputs, size the workspace and initialise the border row."""
        self._reset()
        mode = AlignmentMode.coerce(self.mode if mode is None else mode)
        if mode not in self.modes:
            raise ConfigurationError(f"{type(self).__name__} does not support {mode.value} alignment")
        gap_cost = self.coerce_gap_cost(gap_cost)
        s1, s2 = as_symbols(seq1), as_symbols(seq2)
        if not s1 and not s2:
            raise ConfigurationError("Cannot align two empty sequences")
        self.check_symbols(s1, s2)

        n, m = len(s1), len(s2)
        recurrence = self.make_recurrence(gap_cost, mode)
        scores, trace = self.workspace.reserve(recurrence.planes, n, m)
        scorer = RowScorer(score_model, s2)

        rows, codes = recurrence.first_row(m)
        for k in range(recurrence.planes):
            scores[k, 0, :] = rows[k]
            trace[k, 0, :] = codes[k]

        self._seq1, self._seq2 = s1, s2
        self._recurrence = recurrence
        self._scores, self._trace = scores, trace
        self._scorer = scorer
        self._mode = mode
        self._prev = rows

    def compute(self, progress=None) -> bool:
        """
        Fill the score and traceback planes row by row.

        Returns:
            True when the fill completed, False if the listener cancelled it.
        """
        if self._recurrence is None:
            raise AlignmentError("compute() called before prepare()")
        listener = as_progress_listener(progress)
        try:
            self._fill(listener)
        except AlignmentCancelled:
            logger.info(f"{type(self).__name__} cancelled at {self._cancelled_row}/{len(self._seq1)} rows")
            return False
        self._filled = True
        if listener is not None:
            listener.report(1.0)
        return True

    def _fill(self, listener):
        s1 = self._seq1
        n = len(s1)
        planes = self._recurrence.planes
        next_row = self._recurrence.next_row
        row_scores = self._scorer.row
        scores, trace = self._scores, self._trace
        every = self.poll_every_rows
        prev = self._prev

        for i in range(1, n + 1):
            if listener is not None and (i - 1) % every == 0:
                if listener.report((i - 1) / n):
                    self._cancelled_row = i - 1
                    raise AlignmentCancelled()
            rows, codes = next_row(i, prev, row_scores(s1[i - 1]))
            for k in range(planes):
                scores[k, i, :] = rows[k]
                trace[k, i, :] = codes[k]
            prev = rows
        self._prev = prev

    def _require_filled(self):
        if not self._filled:
            raise AlignmentError("No completed fill pass; call prepare() and compute() first")

    def _terminal(self) -> Tuple[int, int, int]:
        n, m = len(self._seq1), len(self._seq2)
        return self._recurrence.terminal(self._scores, n, m)

    def extract_score(self) -> float:
        self._require_filled()
        i, j, k = self._terminal()
        return float(self._scores[k, i, j])

    def traceback_cursor(self) -> TracebackCursor:
        self._require_filled()
        i, j, k = self._terminal()
        return TracebackCursor(self._trace, i, j, k)

    def extract_traceback(self) -> AlignmentResult:
        cursor = self.traceback_cursor()
        aligned1, aligned2, origin = reconstruct(cursor, self._seq1, self._seq2, self.gap_char)
        return AlignmentResult(
            score=float(self._scores[cursor.state, cursor.i, cursor.j]),
            aligned1=aligned1,
            aligned2=aligned2,
            terminal=cursor.position,
            origin=origin,
            mode=self._mode,
            gap_char=self.gap_char,
        )

    # Entry points ------------------------------------------------------------------------------------------------

    def align(self, seq1, seq2, score_model, gap_cost, mode=None, progress=None) -> AlignmentResult:
        """
        Optimal alignment of ``seq1`` against ``seq2``.

        Returns:
            An ``AlignmentResult``; its ``status`` is CANCELLED if the progress
            listener asked to stop, in which case no partial result is exposed.
        """
        with self.workspace.acquire():
            self.prepare(seq1, seq2, score_model, gap_cost, mode)
            if not self.compute(progress):
                return AlignmentResult.cancelled_result(self._mode, self.gap_char)
            return self.extract_traceback()

    def score(self, seq1, seq2, score_model, gap_cost, mode=None, progress=None) -> Optional[float]:
        """Optimal score from a full-matrix fill, or None if cancelled."""
        with self.workspace.acquire():
            self.prepare(seq1, seq2, score_model, gap_cost, mode)
            if not self.compute(progress):
                return None
            return self.extract_score()
