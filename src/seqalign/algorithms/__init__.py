from .base import Aligner, Recurrence
from .linear import LinearGapAligner, LinearRecurrence
from .affine import AffineGapAligner, AffineRecurrence
from .repeat import RepeatAligner, RepeatRecurrence
from .space_reduced import SpaceReducedAligner
from .significance import SignificanceResult, shuffle_significance

__all__ = [
    # Full-matrix aligners
    'Aligner',
    'Recurrence',
    'LinearGapAligner',
    'LinearRecurrence',
    'AffineGapAligner',
    'AffineRecurrence',
    'RepeatAligner',
    'RepeatRecurrence',

    # Linear memory
    'SpaceReducedAligner',

    # Significance
    'SignificanceResult',
    'shuffle_significance',
]
