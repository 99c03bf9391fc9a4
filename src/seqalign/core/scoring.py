"""
Substitution score models.

The aligners treat a score model as an opaque, symmetric lookup service:
``score(a, b) -> float``. ``ScoreMatrix`` is the concrete table shipped here;
any object with a ``score`` method can be used instead.
"""

import math
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Protocol, Sequence, Tuple, runtime_checkable

import numpy as np

from .errors import ConfigurationError, UnknownSymbolError


@runtime_checkable
class ScoreModel(Protocol):
    """Symmetric substitution score lookup."""

    def score(self, a: Any, b: Any) -> float: ...


class ScoreMatrix:
    """
    Symmetric substitution matrix over a fixed alphabet.

    Attributes:
        alphabet (str | tuple): The symbols covered, in row order.
        name (str): Display name.

    Examples:
        >>> m = ScoreMatrix.nucleotide(match=1, mismatch=-1)
        >>> m.score('A', 'a'), m.score('A', 'C')
        (1.0, -1.0)
    """
    _DTYPE = np.float64
    __slots__ = ('_alphabet', '_data', '_index', 'case_sensitive', 'name')

    def __init__(self, alphabet: Sequence, values, case_sensitive: bool = False, name: Optional[str] = None):
        data = np.array(values, dtype=self._DTYPE)
        k = len(alphabet)
        if k == 0:
            raise ConfigurationError("Score matrix alphabet is empty")
        if len(set(alphabet)) != k:
            raise ConfigurationError(f"Score matrix alphabet has repeated symbols: {alphabet!r}")
        if data.shape != (k, k):
            raise ConfigurationError(f"Score matrix shape {data.shape} does not match alphabet size {k}")
        if not np.all(np.isfinite(data)):
            raise ConfigurationError("Score matrix contains non-finite values")
        if not np.array_equal(data, data.T):
            raise ConfigurationError("Score matrix must be symmetric")
        data.flags.writeable = False

        self._alphabet = alphabet
        self._data = data
        self.case_sensitive = case_sensitive
        self.name = name or "custom"

        index: Dict[Any, int] = {}
        for i, symbol in enumerate(alphabet):
            index[symbol] = i
        if not case_sensitive:
            for i, symbol in enumerate(alphabet):
                if isinstance(symbol, str):
                    index.setdefault(symbol.upper(), i)
                    index.setdefault(symbol.lower(), i)
        self._index = index

    def __repr__(self):
        return f"ScoreMatrix({self.name}, {len(self._alphabet)}x{len(self._alphabet)})"

    @property
    def alphabet(self):
        return self._alphabet

    @property
    def values(self) -> np.ndarray:
        """Read-only view of the raw table."""
        return self._data

    def index_of(self, symbol) -> int:
        try:
            return self._index[symbol]
        except (KeyError, TypeError):
            raise UnknownSymbolError(symbol, ''.join(map(str, self._alphabet))) from None

    def score(self, a, b) -> float:
        return float(self._data[self.index_of(a), self.index_of(b)])

    def encode(self, symbols: Iterable) -> np.ndarray:
        """Map symbols to row indices, raising UnknownSymbolError on the first miss."""
        return np.fromiter((self.index_of(s) for s in symbols), dtype=np.intp)

    def row(self, symbol, encoded: np.ndarray) -> List[float]:
        """Scores of ``symbol`` against every already-encoded symbol."""
        return self._data[self.index_of(symbol)][encoded].tolist()

    # Factories ---------------------------------------------------------------------------------------------------

    @classmethod
    def identity(cls, alphabet: Sequence, match: float = 1.0, mismatch: float = -1.0, name: Optional[str] = None):
        """Builds a simple match/mismatch matrix."""
        k = len(alphabet)
        values = np.full((k, k), mismatch, dtype=cls._DTYPE)
        np.fill_diagonal(values, match)
        return cls(alphabet, values, name=name or f"{match:g}/{mismatch:g}")

    @classmethod
    def nucleotide(cls, match: float = 5.0, mismatch: float = -4.0):
        """Match/mismatch scores over ACGT."""
        return cls.identity("ACGT", match, mismatch, name=f"nucleotide {match:g}/{mismatch:g}")

    @classmethod
    def from_lower_triangle(cls, alphabet: Sequence, rows: Sequence[Sequence[float]], name: Optional[str] = None):
        """Builds a symmetric matrix from its lower triangle, row ``i`` holding ``i + 1`` entries."""
        k = len(alphabet)
        if len(rows) != k or any(len(r) != i + 1 for i, r in enumerate(rows)):
            raise ConfigurationError("Lower triangle does not match alphabet size")
        values = np.zeros((k, k), dtype=cls._DTYPE)
        for i, r in enumerate(rows):
            for j, v in enumerate(r):
                values[i, j] = values[j, i] = v
        return cls(alphabet, values, name=name)

    @classmethod
    def hamming(cls):
        """Zero for identical nucleotides (T and U are equivalent), -1 otherwise."""
        return cls.from_lower_triangle("ACGTU", [
            [0],
            [-1, 0],
            [-1, -1, 0],
            [-1, -1, -1, 0],
            [-1, -1, -1, 0, 0],
        ], name="hamming")

    @classmethod
    def jukes_cantor(cls, distance: float):
        """
        Log-odds nucleotide scores under the Jukes-Cantor model.

        Args:
            distance: Evolutionary distance the scores are tuned for; must be positive.
        """
        if not distance > 0 or not math.isfinite(distance):
            raise ConfigurationError(f"Jukes-Cantor distance must be positive, got {distance}")
        p = 0.25 + 0.75 * math.exp(-4.0 / 3.0 * distance)
        q = (1.0 - p) / 3.0
        match = math.log2(p / 0.25)
        mismatch = math.log2(q / 0.25)
        return cls.identity("ACGT", match, mismatch, name=f"jukes-cantor d={distance:g}")

    @classmethod
    def from_dict(cls, mapping: Mapping[Tuple[Any, Any], float], name: Optional[str] = None):
        """
        Builds a matrix from ``{(a, b): score}``. Each unordered pair needs at
        least one orientation; both orientations must agree when both are given.
        """
        alphabet: List[Any] = []
        for a, b in mapping:
            for s in (a, b):
                if s not in alphabet:
                    alphabet.append(s)
        k = len(alphabet)
        pos = {s: i for i, s in enumerate(alphabet)}
        values = np.full((k, k), np.nan, dtype=cls._DTYPE)
        for (a, b), v in mapping.items():
            i, j = pos[a], pos[b]
            for x, y in ((i, j), (j, i)):
                if not np.isnan(values[x, y]) and values[x, y] != v:
                    raise ConfigurationError(f"Conflicting scores for pair ({a!r}, {b!r})")
                values[x, y] = v
        if np.isnan(values).any():
            raise ConfigurationError("Score mapping does not cover every symbol pair")
        if all(isinstance(s, str) for s in alphabet):
            alphabet = ''.join(alphabet)
        return cls(alphabet, values, name=name)


_FACTORIES: Dict[str, Callable[..., ScoreMatrix]] = {
    'nucleotide': ScoreMatrix.nucleotide,
    'hamming': ScoreMatrix.hamming,
    'jukes_cantor': ScoreMatrix.jukes_cantor,
    'identity': ScoreMatrix.identity,
}


def scores_factory(name: str, **params) -> ScoreMatrix:
    """
    Build a named score matrix.

    Examples:
        >>> scores_factory('nucleotide', match=2, mismatch=-3)
        >>> scores_factory('jukes-cantor', distance=0.1)
    """
    key = name.strip().lower().replace('-', '_').replace(' ', '_')
    try:
        factory = _FACTORIES[key]
    except KeyError:
        raise ConfigurationError(f"No such substitution matrix: {name!r}. "
                                 f"Available: {', '.join(sorted(_FACTORIES))}") from None
    try:
        return factory(**params)
    except TypeError as e:
        raise ConfigurationError(f"Invalid parameters for {name!r}: {e}") from None


class RowScorer:
    """
    Substitution scores of one symbol of sequence 1 against all of sequence 2.

    Models exposing ``encode``/``row`` (like ``ScoreMatrix``) are scored a row
    at a time through numpy; any other model is queried cell by cell.
    """
    __slots__ = ('_model', '_seq2', '_encoded')

    def __init__(self, model: ScoreModel, seq2: Sequence):
        self._model = model
        self._seq2 = seq2
        if hasattr(model, 'encode') and hasattr(model, 'row'):
            self._encoded = model.encode(seq2)
        else:
            self._encoded = None

    def row(self, symbol) -> List[float]:
        if self._encoded is not None:
            return self._model.row(symbol, self._encoded)
        score = self._model.score
        return [float(score(symbol, b)) for b in self._seq2]
