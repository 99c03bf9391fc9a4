"""
Score significance by shuffling.

Both sequences are shuffled and re-scored many times; the observed score is
compared with the distribution of shuffled scores.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

from ..core.errors import ConfigurationError
from ..core.progress import CompoundProgressListener
from ..core.result import AlignmentMode
from ..core.sequence import as_symbols
from .space_reduced import SpaceReducedAligner

logger = logging.getLogger('seqalign')


@dataclass(frozen=True)
class SignificanceResult:
    score: float
    mean: float
    stdev: float
    trials: int
    scores: np.ndarray

    @property
    def z_score(self) -> float:
        """Standard deviations between the observed score and the shuffled mean; inf for a flat distribution."""
        if self.stdev == 0:
            if self.score == self.mean:
                return 0.0
            return float('inf') if self.score > self.mean else float('-inf')
        return (self.score - self.mean) / self.stdev


def shuffle_significance(seq1, seq2, score_model, gap_cost, mode=AlignmentMode.LOCAL, trials: int = 100,
                         seed=None, aligner: Optional[SpaceReducedAligner] = None,
                         progress=None) -> Optional[SignificanceResult]:
    """
    Compare an alignment score with the scores of shuffled sequences.

    Args:
        seq1, seq2: Sequences to align.
        score_model: Substitution scores.
        gap_cost: Constant or affine gap cost.
        mode: Alignment mode, local by default.
        trials: Number of shuffled re-alignments.
        seed: Seed or ``numpy.random.Generator`` for reproducible shuffles.
        aligner: Score-only aligner to reuse.
        progress: Listener for overall progress; may cancel.

    Returns:
        SignificanceResult, or None if cancelled.
    """
    if int(trials) < 1:
        raise ConfigurationError(f"trials must be at least 1, got {trials}")
    trials = int(trials)
    mode = AlignmentMode.coerce(mode)
    rng = np.random.default_rng(seed)
    aligner = aligner if aligner is not None else SpaceReducedAligner()

    s1 = list(as_symbols(seq1))
    s2 = list(as_symbols(seq2))

    compound = CompoundProgressListener(progress, trials + 1)
    observed = aligner.score(s1, s2, score_model, gap_cost, mode, progress=compound.minor)
    if observed.cancelled:
        return None
    if compound.increment_sections_completed(1):
        return None

    scores = np.empty(trials, dtype=np.float64)
    shuffled1, shuffled2 = list(s1), list(s2)
    for t in range(trials):
        rng.shuffle(shuffled1)
        rng.shuffle(shuffled2)
        result = aligner.score(shuffled1, shuffled2, score_model, gap_cost, mode, progress=compound.minor)
        if result.cancelled:
            logger.info(f"Shuffle test cancelled after {t} of {trials} trials")
            return None
        scores[t] = result.score
        if compound.increment_sections_completed(1):
            logger.info(f"Shuffle test cancelled after {t + 1} of {trials} trials")
            return None

    mean = float(scores.mean())
    stdev = float(scores.std())
    logger.debug(f"Shuffle test: observed {observed.score:g}, mean {mean:g}, stdev {stdev:g} over {trials} trials")
    return SignificanceResult(score=observed.score, mean=mean, stdev=stdev, trials=trials, scores=scores)
