import numpy as np
import pytest

from seqalign import ConfigurationError, ScoreMatrix, shuffle_significance
from seqalign.algorithms.significance import SignificanceResult

NUC = ScoreMatrix.nucleotide(5, -4)
SEQ1 = "ACGTTGCATGCAAGCTTACG"
SEQ2 = "ACGTTGCATGGAAGCTTACG"


def test_seeded_runs_are_reproducible():
    first = shuffle_significance(SEQ1, SEQ2, NUC, 8, trials=20, seed=42)
    second = shuffle_significance(SEQ1, SEQ2, NUC, 8, trials=20, seed=42)

    assert first.trials == 20
    assert np.array_equal(first.scores, second.scores)
    assert first.mean == second.mean
    assert first.stdev == second.stdev


def test_related_sequences_score_above_shuffles():
    result = shuffle_significance(SEQ1, SEQ2, NUC, 8, trials=30, seed=1)

    assert result.score == 19 * 5 - 4
    assert result.mean < result.score
    assert result.z_score > 2
    assert result.stdev == pytest.approx(float(np.std(result.scores)))


def test_affine_and_global_modes():
    result = shuffle_significance(SEQ1, SEQ2, NUC, (10, 1), mode='global', trials=5, seed=3)
    assert result.scores.shape == (5,)


def test_cancellation_returns_none():
    calls = []

    def cancel(fraction):
        calls.append(fraction)
        return True

    assert shuffle_significance(SEQ1, SEQ2, NUC, 8, trials=10, seed=0, progress=cancel) is None
    assert len(calls) == 1


def test_invalid_trials():
    with pytest.raises(ConfigurationError):
        shuffle_significance(SEQ1, SEQ2, NUC, 8, trials=0)


def test_z_score_of_flat_distribution():
    flat = SignificanceResult(score=5.0, mean=5.0, stdev=0.0, trials=3, scores=np.full(3, 5.0))
    assert flat.z_score == 0.0
    higher = SignificanceResult(score=6.0, mean=5.0, stdev=0.0, trials=3, scores=np.full(3, 5.0))
    assert higher.z_score == float('inf')
