"""
Traceback arena codes and the cursor that walks them.

Every cell of the arena is one byte: bits 0-1 hold the move that produced
the cell and bits 2-3 the plane of its predecessor. Predecessor coordinates
follow from the move by index arithmetic, so no per-cell objects exist.
"""

from typing import Iterator, Optional, Tuple

import numpy as np

STOP = 0
DIAG = 1
UP = 2    # consumes a symbol of sequence 1; gap in sequence 2
LEFT = 3  # consumes a symbol of sequence 2; gap in sequence 1

MOVE_MASK = 0b11
PLANE_SHIFT = 2

MATCH_PLANE = 0
GAP1_PLANE = 1  # Ix: ends in an UP move
GAP2_PLANE = 2  # Iy: ends in a LEFT move

_OFFSETS = {
    DIAG: (1, 1),
    UP: (1, 0),
    LEFT: (0, 1),
}


def encode(move: int, plane: int = 0) -> int:
    return move | (plane << PLANE_SHIFT)


def decode(code: int) -> Tuple[int, int]:
    """Return ``(move, predecessor_plane)``."""
    return code & MOVE_MASK, code >> PLANE_SHIFT


class TracebackCursor:
    """
    Position ``(i, j)`` in plane ``state`` of a filled traceback arena.

    ``next()`` steps to the predecessor cell and returns a new cursor, or None
    once an origin (a STOP cell) is reached.

    Examples:
        >>> cursor = aligner.traceback_cursor()
        >>> while cursor is not None:
        ...     cursor = cursor.next()
    """
    __slots__ = ('_trace', 'i', 'j', 'state')

    def __init__(self, trace: np.ndarray, i: int, j: int, state: int = 0):
        self._trace = trace
        self.i = i
        self.j = j
        self.state = state

    def __repr__(self):
        return f"TracebackCursor(i={self.i}, j={self.j}, state={self.state})"

    def __eq__(self, other):
        if not isinstance(other, TracebackCursor):
            return NotImplemented
        return (self.i, self.j, self.state) == (other.i, other.j, other.state)

    def __hash__(self):
        return hash((self.i, self.j, self.state))

    @property
    def position(self) -> Tuple[int, int]:
        return self.i, self.j

    @property
    def move(self) -> int:
        return int(self._trace[self.state, self.i, self.j]) & MOVE_MASK

    def is_origin(self) -> bool:
        return self.move == STOP

    def next(self) -> Optional['TracebackCursor']:
        move, plane = decode(int(self._trace[self.state, self.i, self.j]))
        if move == STOP:
            return None
        di, dj = _OFFSETS[move]
        return TracebackCursor(self._trace, self.i - di, self.j - dj, plane)

    def walk(self) -> Iterator['TracebackCursor']:
        """Yield this cursor and every predecessor down to the origin."""
        cursor = self
        while cursor is not None:
            yield cursor
            cursor = cursor.next()

    def emit(self, seq1, seq2, gap_char: str = '-') -> Optional[Tuple[str, str]]:
        """
        Aligned column produced by the step from this cell to its predecessor,
        or None at an origin.
        """
        move = self.move
        if move == STOP:
            return None
        a = gap_char if move == LEFT else str(seq1[self.i - 1])
        b = gap_char if move == UP else str(seq2[self.j - 1])
        return a, b


def reconstruct(terminal: TracebackCursor, seq1, seq2, gap_char: str = '-') -> Tuple[str, str, Tuple[int, int]]:
    """
    Walk from ``terminal`` to its origin and build the gapped strings.

    Returns:
        Tuple of (aligned1, aligned2, origin)
    """
    cols1, cols2 = [], []
    cursor = terminal
    origin = terminal.position
    while cursor is not None:
        column = cursor.emit(seq1, seq2, gap_char)
        if column is None:
            origin = cursor.position
            break
        cols1.append(column[0])
        cols2.append(column[1])
        cursor = cursor.next()
    cols1.reverse()
    cols2.reverse()
    return ''.join(cols1), ''.join(cols2), origin
