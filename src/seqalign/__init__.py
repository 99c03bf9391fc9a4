"""
Optimal pairwise sequence alignment: global, local and repeat modes, constant
and affine gap costs, full-matrix and linear-memory variants.
"""

# Version info - keep at top
__version__ = "1.0.0"
__description__ = "Optimal pairwise sequence alignment with constant and affine gap costs"

from .core import (
    AlignmentError,
    ConfigurationError,
    UnknownSymbolError,
    TracebackConsistencyError,
    WorkspaceBusyError,
    InsufficientMemoryError,
    Sequence,
    ScoreMatrix,
    scores_factory,
    LinearGapCost,
    AffineGapCost,
    CallbackProgressListener,
    CompoundProgressListener,
    Workspace,
    TracebackCursor,
    AlignmentMode,
    AlignmentStatus,
    AlignmentResult,
    ScoreResult,
)
from .algorithms import (
    Aligner,
    LinearGapAligner,
    AffineGapAligner,
    RepeatAligner,
    SpaceReducedAligner,
    SignificanceResult,
    shuffle_significance,
)
from .api import align, align_score_only, make_aligner
from .config import ConfigLoader, get_config, reload_config
from .pipeline import AllPairsResult, align_all_pairs, setup_logging
from .diagnostics import validate_alignment_result

__all__ = [
    '__version__',
    '__description__',

    # Entry points
    'align',
    'align_score_only',
    'make_aligner',
    'align_all_pairs',
    'shuffle_significance',

    # Aligners
    'Aligner',
    'LinearGapAligner',
    'AffineGapAligner',
    'RepeatAligner',
    'SpaceReducedAligner',

    # Models and results
    'Sequence',
    'ScoreMatrix',
    'scores_factory',
    'LinearGapCost',
    'AffineGapCost',
    'CallbackProgressListener',
    'CompoundProgressListener',
    'Workspace',
    'TracebackCursor',
    'AlignmentMode',
    'AlignmentStatus',
    'AlignmentResult',
    'ScoreResult',
    'AllPairsResult',
    'SignificanceResult',

    # Errors
    'AlignmentError',
    'ConfigurationError',
    'UnknownSymbolError',
    'TracebackConsistencyError',
    'WorkspaceBusyError',
    'InsufficientMemoryError',

    # Configuration and diagnostics
    'ConfigLoader',
    'get_config',
    'reload_config',
    'setup_logging',
    'validate_alignment_result',
]
