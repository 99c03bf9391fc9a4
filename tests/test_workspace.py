import pytest

from seqalign import (
    AffineGapAligner,
    InsufficientMemoryError,
    LinearGapAligner,
    ScoreMatrix,
    Workspace,
    WorkspaceBusyError,
)
from seqalign.diagnostics import validation

NUC = ScoreMatrix.nucleotide(5, -4)


def test_reserve_shapes_are_exact():
    """Views always have exactly planes x (n+1) x (m+1) cells."""
    ws = Workspace()
    scores, trace = ws.reserve(3, 4, 6)
    assert scores.shape == (3, 5, 7)
    assert trace.shape == (3, 5, 7)

    scores, trace = ws.reserve(1, 2, 2)
    assert scores.shape == trace.shape == (1, 3, 3)


def test_workspace_only_grows():
    ws = Workspace()
    ws.reserve(1, 10, 10)
    assert ws.grow_count == 1
    capacity = ws.capacity

    ws.reserve(1, 5, 5)
    ws.reserve(1, 10, 10)
    assert ws.grow_count == 1
    assert ws.capacity == capacity

    ws.reserve(3, 10, 10)
    assert ws.grow_count == 2
    assert ws.capacity == 3 * 11 * 11


def test_aligner_reuses_workspace():
    ws = Workspace()
    aligner = LinearGapAligner(workspace=ws)
    aligner.align("ACGTACGTACGT", "ACGTACGT", NUC, 4)
    grown = ws.grow_count

    small = aligner.align("ACG", "AG", NUC, 4)
    assert ws.grow_count == grown
    assert small == LinearGapAligner().align("ACG", "AG", NUC, 4)


def test_aligners_share_a_workspace_sequentially():
    ws = Workspace()
    linear = LinearGapAligner(workspace=ws)
    affine = AffineGapAligner(workspace=ws)

    first = linear.align("GATTACA", "GATCA", NUC, 4)
    affine.align("GATTACAGATTACA", "GATCA", NUC, (10, 1))
    again = linear.align("GATTACA", "GATCA", NUC, 4)
    assert first == again


def test_concurrent_use_is_rejected():
    ws = Workspace()
    with ws.acquire():
        assert ws.busy
        with pytest.raises(WorkspaceBusyError):
            with ws.acquire():
                pass
    assert not ws.busy


def test_nested_alignment_on_shared_workspace():
    """Starting a second alignment on a busy workspace fails and releases cleanly."""
    ws = Workspace()
    outer = LinearGapAligner(workspace=ws)
    inner = AffineGapAligner(workspace=ws)

    def listener(fraction):
        inner.align("ACGT", "ACG", NUC, (5, 1))
        return False

    with pytest.raises(WorkspaceBusyError):
        outer.align("ACGTACGT", "ACGT", NUC, 4, progress=listener)

    assert not ws.busy
    assert inner.align("ACGT", "ACG", NUC, (5, 1)).score == 10


def test_clear_drops_buffers():
    ws = Workspace()
    ws.reserve(1, 10, 10)
    assert ws.nbytes > 0
    ws.clear()
    assert ws.capacity == 0


def test_memory_limit(monkeypatch):
    """Allocations above the allowed share of available memory fail fast."""
    monkeypatch.setattr(validation, "available_memory_bytes", lambda: 10_000)
    ws = Workspace(max_memory_fraction=0.5)

    ws.reserve(1, 10, 10)
    with pytest.raises(InsufficientMemoryError):
        ws.reserve(1, 100, 100)
    with pytest.raises(MemoryError):
        LinearGapAligner(workspace=ws).align("A" * 100, "A" * 100, NUC, 4)
    assert not ws.busy
