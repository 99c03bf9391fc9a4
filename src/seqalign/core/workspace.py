"""
Scratch matrices shared by consecutive alignments.

A ``Workspace`` owns two flat buffers: float64 DP scores and the uint8
traceback arena. Each alignment takes views of exactly
``planes x (n+1) x (m+1)`` cells from the front of those buffers, so the
shapes are never stale. The buffers only grow, which amortises allocation
over many same-or-smaller problems.

A workspace is single-user scratch space. ``acquire()`` enforces that at
runtime: a second concurrent acquisition raises ``WorkspaceBusyError``.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Optional, Tuple

import numpy as np

from .errors import WorkspaceBusyError
from ..diagnostics.validation import check_memory

logger = logging.getLogger('seqalign')

SCORE_DTYPE = np.float64
TRACE_DTYPE = np.uint8
BYTES_PER_CELL = np.dtype(SCORE_DTYPE).itemsize + np.dtype(TRACE_DTYPE).itemsize


class Workspace:
    """
    Grow-only DP score matrix and traceback arena.

    Examples:
        >>> ws = Workspace()
        >>> a = LinearGapAligner(workspace=ws)
        >>> b = AffineGapAligner(workspace=ws)  # reused, never concurrently
    """

    def __init__(self, max_memory_fraction: Optional[float] = None):
        self.max_memory_fraction = max_memory_fraction
        self._scores = np.empty(0, dtype=SCORE_DTYPE)
        self._trace = np.empty(0, dtype=TRACE_DTYPE)
        self._lock = threading.Lock()
        self.grow_count = 0

    def __repr__(self):
        return f"Workspace(capacity={self.capacity} cells, {self.nbytes / 1e6:.1f} MB)"

    @property
    def capacity(self) -> int:
        """Number of cells available without reallocating."""
        return int(self._trace.size)

    @property
    def nbytes(self) -> int:
        return int(self._scores.nbytes + self._trace.nbytes)

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    def reserve(self, planes: int, n: int, m: int) -> Tuple[np.ndarray, np.ndarray]:
        """
        Return ``(scores, trace)`` views shaped ``(planes, n + 1, m + 1)``.

        Contents are whatever the previous user left; callers initialise every
        cell they read.
        """
        cells = planes * (n + 1) * (m + 1)
        if cells > self._trace.size:
            check_memory(cells * BYTES_PER_CELL, self.max_memory_fraction, what="alignment workspace")
            logger.debug(f"Growing workspace from {self._trace.size} to {cells} cells "
                         f"({planes} x {n + 1} x {m + 1})")
            self._scores = np.empty(cells, dtype=SCORE_DTYPE)
            self._trace = np.empty(cells, dtype=TRACE_DTYPE)
            self.grow_count += 1
        shape = (planes, n + 1, m + 1)
        return self._scores[:cells].reshape(shape), self._trace[:cells].reshape(shape)

    @contextmanager
    def acquire(self):
        """Hold the workspace for the duration of one alignment."""
        if not self._lock.acquire(blocking=False):
            raise WorkspaceBusyError("Workspace is already in use by another alignment")
        try:
            yield self
        finally:
            self._lock.release()

    def clear(self):
        """Drop the buffers; the next ``reserve`` allocates afresh."""
        self._scores = np.empty(0, dtype=SCORE_DTYPE)
        self._trace = np.empty(0, dtype=TRACE_DTYPE)
