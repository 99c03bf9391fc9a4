import numpy as np
import pytest

from seqalign import (
    AffineGapAligner,
    AffineGapCost,
    ConfigurationError,
    LinearGapAligner,
    ScoreMatrix,
    SpaceReducedAligner,
    align,
    align_score_only,
    validate_alignment_result,
)

IDENTITY = ScoreMatrix.identity("ACGTU", 1, -1)
NUC = ScoreMatrix.nucleotide(5, -4)


def column_score(a1, a2, model, gap, gap_char='-'):
    total = 0.0
    for x, y in zip(a1, a2):
        if x == gap_char or y == gap_char:
            total -= gap
        else:
            total += model.score(x, y)
    return total


def random_pairs(seed, count, max_len=40):
    rng = np.random.default_rng(seed)
    for _ in range(count):
        a = ''.join(rng.choice(list("ACGT"), size=int(rng.integers(1, max_len))))
        b = ''.join(rng.choice(list("ACGT"), size=int(rng.integers(1, max_len))))
        yield a, b


def test_score_only_textbook_case():
    assert align_score_only("GATTACA", "GCATGCU", IDENTITY, 1) == 0


@pytest.mark.parametrize("mode", ["global", "local"])
def test_score_only_matches_full_matrix_linear(mode):
    aligner = SpaceReducedAligner()
    full = LinearGapAligner()
    for a, b in random_pairs(1, 25):
        expected = full.align(a, b, NUC, 6, mode=mode)
        result = aligner.score(a, b, NUC, 6, mode=mode)
        assert result.score == expected.score


@pytest.mark.parametrize("mode", ["global", "local"])
def test_score_only_matches_full_matrix_affine(mode):
    aligner = SpaceReducedAligner()
    full = AffineGapAligner()
    gaps = AffineGapCost(10, 1)
    for a, b in random_pairs(2, 25):
        expected = full.align(a, b, NUC, gaps, mode=mode)
        result = aligner.score(a, b, NUC, gaps, mode=mode)
        assert result.score == expected.score


def test_score_only_terminal_in_caller_orientation():
    """Rows run over the shorter sequence, but coordinates are reported unswapped."""
    aligner = SpaceReducedAligner()

    result = aligner.score("ACG", "ACGTACGTACGT", NUC, 4)
    assert result.terminal == (3, 12)

    local = aligner.score("TTTTACGTACGTTTTT", "GGACGTACGGG", NUC, 8, mode='local')
    assert local.score == 35
    assert local.terminal == (11, 9)


def test_score_only_empty_sequence():
    aligner = SpaceReducedAligner()

    assert aligner.score("ACGT", "", NUC, 2).score == -8
    assert aligner.score("", "ACG", NUC, AffineGapCost(5, 1)).score == -7
    assert aligner.score("ACGT", "", NUC, 2, mode='local').score == 0

    with pytest.raises(ConfigurationError):
        aligner.score("", "", NUC, 2)


@pytest.mark.parametrize("base_case_cells", [1, 16, 4096])
def test_hirschberg_global_is_optimal(base_case_cells):
    """Divide and conquer finds an alignment with the full-matrix score."""
    aligner = SpaceReducedAligner(base_case_cells=base_case_cells)
    full = LinearGapAligner()
    for a, b in random_pairs(3, 20):
        expected = full.align(a, b, NUC, 6)
        result = aligner.align(a, b, NUC, 6)
        assert result.score == expected.score
        assert column_score(result.aligned1, result.aligned2, NUC, 6) == expected.score
        valid, errors = validate_alignment_result(result, a, b)
        assert valid, errors


def test_hirschberg_textbook_case():
    result = SpaceReducedAligner(base_case_cells=1).align("GATTACA", "GCATGCU", IDENTITY, 1)

    assert result.score == 0
    assert result.aligned1.replace('-', '') == "GATTACA"
    assert result.aligned2.replace('-', '') == "GCATGCU"
    assert column_score(result.aligned1, result.aligned2, IDENTITY, 1) == 0


@pytest.mark.parametrize("base_case_cells", [1, 4096])
def test_hirschberg_local_is_optimal(base_case_cells):
    aligner = SpaceReducedAligner(base_case_cells=base_case_cells)
    full = LinearGapAligner()
    for a, b in random_pairs(4, 20):
        expected = full.align(a, b, NUC, 6, mode='local')
        result = aligner.align(a, b, NUC, 6, mode='local')
        assert result.score == expected.score
        assert result.terminal == expected.terminal
        assert column_score(result.aligned1, result.aligned2, NUC, 6) == expected.score
        valid, errors = validate_alignment_result(result, a, b)
        assert valid, errors


def test_hirschberg_local_embedded_match():
    result = SpaceReducedAligner(base_case_cells=1).align(
        "TTTTACGTACGTTTTT", "GGACGTACGGG", NUC, 8, mode='local')

    assert result.score == 35
    assert result.aligned1 == result.aligned2 == "ACGTACG"
    assert result.origin == (4, 2)
    assert result.terminal == (11, 9)


def test_hirschberg_local_without_positive_cell():
    result = SpaceReducedAligner().align("AAA", "CCC", IDENTITY, 1, mode='local')

    assert result.score == 0
    assert result.aligned1 == ""
    assert result.origin == result.terminal


def test_hirschberg_against_empty_sequence():
    result = SpaceReducedAligner().align("ACGT", "", NUC, 2)

    assert result.score == -8
    assert result.aligned2 == "----"


def test_hirschberg_rejects_affine_costs():
    with pytest.raises(ConfigurationError):
        SpaceReducedAligner().align("ACGT", "ACG", NUC, AffineGapCost(10, 1))
    with pytest.raises(ConfigurationError):
        align("ACGT", "ACG", NUC, (10, 1), space_reduced=True)


def test_hirschberg_accepts_flat_affine_cost():
    result = SpaceReducedAligner().align("ACGT", "ACT", NUC, AffineGapCost(8, 8))
    assert result.score == 7


def test_space_reduced_through_api():
    result = align("GATTACA", "GCATGCU", IDENTITY, 1, space_reduced=True)
    assert result.score == 0
    assert len(result.aligned1) == len(result.aligned2)


def test_invalid_base_case_cells():
    with pytest.raises(ConfigurationError):
        SpaceReducedAligner(base_case_cells=0)


def test_symbols_must_fill_one_column():
    states = ScoreMatrix.identity(tuple(range(12)), 1, -1)
    aligner = SpaceReducedAligner()
    with pytest.raises(ConfigurationError, match="single character"):
        aligner.score([1, 11, 2], [11, 2], states, 1)
    with pytest.raises(ConfigurationError, match="single character"):
        aligner.align([1, 11, 2], [11, 2], states, 1)

    dashed = ScoreMatrix.identity("ACGT-", 1, -1)
    with pytest.raises(ConfigurationError, match="gap character"):
        aligner.align("A-CG", "ACG", dashed, 2)
    result = SpaceReducedAligner(gap_char='.').align("A-CG", "ACG", dashed, 2)
    assert (result.aligned1, result.aligned2) == ("A-CG", "A.CG")


def test_repeat_mode_needs_full_matrix():
    with pytest.raises(ConfigurationError):
        SpaceReducedAligner().align("ACGT", "ACG", IDENTITY, 1, 'repeat')
    with pytest.raises(ConfigurationError):
        SpaceReducedAligner(mode='repeat')
