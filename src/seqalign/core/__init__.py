"""
Core data model for pairwise alignment: sequences, score and gap models,
progress, workspaces, traceback and results.
"""

from .errors import (
    AlignmentError,
    ConfigurationError,
    UnknownSymbolError,
    TracebackConsistencyError,
    WorkspaceBusyError,
    InsufficientMemoryError,
    AlignmentCancelled,
)
from .sequence import Sequence, SequenceView, as_symbols, check_alignable
from .scoring import ScoreModel, ScoreMatrix, RowScorer, scores_factory
from .gaps import LinearGapCost, AffineGapCost, GapCost, as_gap_cost
from .progress import (
    ProgressListener,
    CallbackProgressListener,
    CompoundProgressListener,
    as_progress_listener,
)
from .workspace import Workspace
from .traceback import TracebackCursor, reconstruct
from .result import AlignmentMode, AlignmentStatus, AlignmentResult, ScoreResult
from .utilities import compute_alignment_stats, build_cigar, cigar_to_alignment

__all__ = [
    # Errors
    'AlignmentError',
    'ConfigurationError',
    'UnknownSymbolError',
    'TracebackConsistencyError',
    'WorkspaceBusyError',
    'InsufficientMemoryError',
    'AlignmentCancelled',

    # Sequences and models
    'Sequence',
    'SequenceView',
    'as_symbols',
    'check_alignable',
    'ScoreModel',
    'ScoreMatrix',
    'RowScorer',
    'scores_factory',
    'LinearGapCost',
    'AffineGapCost',
    'GapCost',
    'as_gap_cost',

    # Progress
    'ProgressListener',
    'CallbackProgressListener',
    'CompoundProgressListener',
    'as_progress_listener',

    # DP infrastructure
    'Workspace',
    'TracebackCursor',
    'reconstruct',

    # Results
    'AlignmentMode',
    'AlignmentStatus',
    'AlignmentResult',
    'ScoreResult',
    'compute_alignment_stats',
    'build_cigar',
    'cigar_to_alignment',
]
