"""
Sequence views consumed by the aligners.

Aligners only ever borrow a sequence for the duration of one call: they read
its length and symbols and never write to it. Anything that supports
``len()`` and integer indexing works, including plain strings.
"""

from typing import Any, Iterable, Optional, Protocol, Tuple, runtime_checkable

from .errors import ConfigurationError


@runtime_checkable
class SequenceView(Protocol):
    """Read-only view of an ordered, 0-indexed run of symbols."""

    def __len__(self) -> int: ...

    def __getitem__(self, index): ...


class Sequence:
    """
    Immutable symbol sequence with an optional name.

    Examples:
        >>> s = Sequence("GATTACA", name="seq1")
        >>> s.length(), s.symbol_at(1)
        (7, 'A')
    """
    __slots__ = ('_symbols', 'name')

    def __init__(self, symbols: Iterable[Any], name: Optional[str] = None):
        self._symbols: Tuple[Any, ...] = tuple(symbols)
        self.name = name

    def __len__(self) -> int:
        return len(self._symbols)

    def __getitem__(self, index):
        if isinstance(index, slice):
            return Sequence(self._symbols[index], name=self.name)
        return self._symbols[index]

    def __iter__(self):
        return iter(self._symbols)

    def __eq__(self, other):
        if isinstance(other, Sequence):
            return self._symbols == other._symbols
        return NotImplemented

    def __hash__(self):
        return hash(self._symbols)

    def __repr__(self):
        label = f"{self.name}: " if self.name else ""
        return f"Sequence({label}{self.to_string()!r})"

    def length(self) -> int:
        return len(self._symbols)

    def symbol_at(self, i: int):
        return self._symbols[i]

    @property
    def symbols(self) -> Tuple[Any, ...]:
        return self._symbols

    def to_string(self) -> str:
        return ''.join(str(s) for s in self._symbols)


def as_symbols(seq) -> Tuple[Any, ...]:
    """
    Snapshot a SequenceView into a tuple of symbols.

    Strings and ``Sequence`` objects are used as they are; anything else must
    provide ``__len__`` and ``__getitem__`` (or the ``length``/``symbol_at``
    pair).
    """
    if isinstance(seq, Sequence):
        return seq.symbols
    if isinstance(seq, str):
        return tuple(seq)
    if isinstance(seq, (list, tuple)):
        return tuple(seq)
    if hasattr(seq, 'length') and hasattr(seq, 'symbol_at'):
        return tuple(seq.symbol_at(i) for i in range(seq.length()))
    return tuple(seq[i] for i in range(len(seq)))


def sequence_name(seq, default: str) -> str:
    name = getattr(seq, 'name', None)
    return name if name else default


def check_alignable(symbols, gap_char: str = '-'):
    """
    Make sure every symbol renders as exactly one character other than
    ``gap_char``, so aligned strings keep one character per column.

    Raises:
        ConfigurationError: naming the first offending symbol.
    """
    for k, s in enumerate(symbols):
        text = s if isinstance(s, str) else str(s)
        if len(text) != 1:
            raise ConfigurationError(
                f"Symbol {s!r} at position {k} does not render as a single character")
        if text == gap_char:
            raise ConfigurationError(
                f"Symbol {s!r} at position {k} is the gap character {gap_char!r}; choose another gap_char")


def check_gap_char(gap_char) -> str:
    if not isinstance(gap_char, str) or len(gap_char) != 1:
        raise ConfigurationError(f"gap_char must be a single character, got {gap_char!r}")
    return gap_char
