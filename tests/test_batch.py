import numpy as np
import pytest

from seqalign import (
    AlignmentMode,
    AlignmentStatus,
    ConfigLoader,
    ConfigurationError,
    ScoreMatrix,
    Sequence,
    align,
    align_all_pairs,
)
from seqalign.pipeline import parse_num_workers

NUC = ScoreMatrix.nucleotide(5, -4)
SEQUENCES = ["GATTACA", "GATCA", "ACGTACGT", "TTGACA"]


@pytest.fixture
def config():
    loader = ConfigLoader()
    loader.config['batch']['num_workers'] = 1
    return loader.config


def test_parse_num_workers():
    assert parse_num_workers('auto') >= 1
    assert parse_num_workers('3') == 3
    assert parse_num_workers(4) == 4
    assert parse_num_workers(0) == 1
    assert parse_num_workers(None) == 1
    assert parse_num_workers('many') == 1


def test_sequential_all_pairs(config):
    """Scores match pairwise alignments; matrices are symmetric."""
    result = align_all_pairs(SEQUENCES, NUC, 8, config=config)

    assert result.status is AlignmentStatus.COMPLETED
    assert result.pairs_completed == 10
    assert result.names == ["seq1", "seq2", "seq3", "seq4"]
    assert np.array_equal(result.scores, result.scores.T)
    for i, a in enumerate(SEQUENCES):
        assert result.scores[i, i] == 5 * len(a)
        assert result.identities[i, i] == 1.0
        for j, b in enumerate(SEQUENCES):
            pairwise = align(a, b, NUC, 8)
            assert result.scores[i, j] == pairwise.score
            assert result.identities[i, j] == pytest.approx(pairwise.identity)


def test_names_come_from_sequences(config):
    seqs = [Sequence("ACGT", name="alpha"), Sequence("ACGA", name="beta")]
    result = align_all_pairs(seqs, NUC, 8, config=config)

    assert result.names == ["alpha", "beta"]
    assert result.score("alpha", "beta") == 5 + 5 + 5 - 4


def test_parallel_matches_sequential(config):
    sequential = align_all_pairs(SEQUENCES, NUC, (10, 1), mode='local', config=config)
    parallel = align_all_pairs(SEQUENCES, NUC, (10, 1), mode='local', num_workers=2, config=config)

    assert parallel.status is AlignmentStatus.COMPLETED
    assert parallel.metadata['num_workers'] == 2
    assert np.array_equal(parallel.scores, sequential.scores)
    assert np.allclose(parallel.identities, sequential.identities)


def test_batch_progress(config):
    fractions = []
    align_all_pairs(SEQUENCES, NUC, 8, progress=lambda f: fractions.append(f), config=config)

    assert fractions == sorted(fractions)
    assert fractions[-1] == pytest.approx(1.0)


def test_batch_cancellation(config):
    calls = []

    def cancel(fraction):
        calls.append(fraction)
        return True

    result = align_all_pairs(SEQUENCES, NUC, 8, progress=cancel, config=config)
    assert result.cancelled
    assert result.scores is None
    assert result.pairs_completed == 0
    assert len(calls) == 1


def test_parallel_cancellation(config):
    result = align_all_pairs(SEQUENCES, NUC, 8, num_workers=2, progress=lambda f: f > 0.3, config=config)
    assert result.cancelled
    assert 0 < result.pairs_completed < 10


def test_empty_batch(config):
    result = align_all_pairs([], NUC, 8, config=config)
    assert result.scores.shape == (0, 0)
    assert not result.cancelled


def test_mode_and_workers_from_config():
    loader = ConfigLoader.from_dict({'alignment': {'mode': 'local'}, 'batch': {'num_workers': 2}})
    result = align_all_pairs(["TTTTACGTACGTTTTT", "GGACGTACGGG", "ACGT"], NUC, 8, config=loader)

    assert result.mode is AlignmentMode.LOCAL
    assert result.metadata['num_workers'] == 2
    assert result.scores[0, 1] == 35
    assert result.scores[1, 2] == 20


def test_gap_symbols_need_another_gap_char(config):
    model = ScoreMatrix.identity("ACGT-", 1, -1)
    with pytest.raises(ConfigurationError, match="gap character"):
        align_all_pairs(["A-CG", "ACG"], model, 2, config=config)

    config['alignment']['gap_char'] = '.'
    result = align_all_pairs(["A-CG", "ACG"], model, 2, config=config)
    assert result.scores[0, 1] == 1
    assert result.identities[0, 1] == pytest.approx(0.75)


def test_repeat_mode_rejected(config):
    with pytest.raises(ConfigurationError):
        align_all_pairs(SEQUENCES, NUC, 8, mode='repeat', config=config)
