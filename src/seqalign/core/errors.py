"""
Exception hierarchy for the alignment core.
"""


class AlignmentError(Exception):
    """Base class for all errors raised by seqalign."""


class ConfigurationError(AlignmentError, ValueError):
    """Invalid gap parameters, modes, score matrices or config values."""


class UnknownSymbolError(AlignmentError, KeyError):
    """A symbol is not covered by the score model's alphabet."""

    def __init__(self, symbol, alphabet: str = ""):
        self.symbol = symbol
        self.alphabet = alphabet
        super().__init__(symbol)

    def __str__(self):
        if self.alphabet:
            return f"Symbol {self.symbol!r} is not in alphabet {self.alphabet!r}"
        return f"Symbol {self.symbol!r} is not covered by the score model"


class TracebackConsistencyError(AlignmentError, AssertionError):
    """No predecessor candidate reproduces a computed cell value."""

    def __init__(self, where: str, i: int, j: int):
        self.where = where
        self.i = i
        self.j = j
        super().__init__(f"{where}: no predecessor matches cell ({i}, {j})")


class WorkspaceBusyError(AlignmentError, RuntimeError):
    """A workspace was acquired while another alignment still holds it."""


class InsufficientMemoryError(AlignmentError, MemoryError):
    """The requested matrices exceed the allowed share of available memory."""


class AlignmentCancelled(AlignmentError):
    """
    Raised at a poll point when a progress listener requests cancellation.

    Public entry points turn this into a CANCELLED outcome; it never
    reaches callers of ``align``.
    """
