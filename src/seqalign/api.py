"""
Entry points: pick an aligner for the gap model and mode, run it, return the result.
"""

import logging
from typing import Optional, Union

from .algorithms.affine import AffineGapAligner
from .algorithms.linear import LinearGapAligner
from .algorithms.repeat import RepeatAligner
from .algorithms.space_reduced import SpaceReducedAligner
from .config.config_loader import ConfigLoader, as_config_dict, gap_cost_from_config
from .core.errors import ConfigurationError
from .core.gaps import AffineGapCost, as_gap_cost
from .core.result import AlignmentMode, AlignmentResult
from .core.workspace import Workspace

logger = logging.getLogger('seqalign')

AnyAligner = Union[LinearGapAligner, AffineGapAligner, RepeatAligner, SpaceReducedAligner]


def make_aligner(gap_cost=None, space_reduced: Optional[bool] = None, workspace: Optional[Workspace] = None,
                 config: Union[ConfigLoader, dict, None] = None, mode=None) -> AnyAligner:
    """
    Build the aligner suited to a gap model and mode; ``'repeat'`` mode
    selects ``RepeatAligner`` with ``alignment.repeat_threshold``.

    Unset arguments are taken from ``config`` (the global configuration if
    omitted).
    """
    cfg = as_config_dict(config)
    alignment = cfg.get('alignment', {})
    if space_reduced is None:
        space_reduced = bool(alignment.get('space_reduced', False))
    gap_cost = as_gap_cost(gap_cost_from_config(cfg) if gap_cost is None else gap_cost)
    gap_model = 'affine' if isinstance(gap_cost, AffineGapCost) else 'linear'

    if workspace is None:
        workspace = Workspace(cfg.get('workspace', {}).get('max_memory_fraction'))
    poll_every_rows = cfg.get('progress', {}).get('poll_every_rows', 1)
    gap_char = alignment.get('gap_char', '-')
    if mode is None:
        mode = alignment.get('mode', AlignmentMode.GLOBAL)
    mode = AlignmentMode.coerce(mode)

    if mode is AlignmentMode.REPEAT:
        if space_reduced:
            raise ConfigurationError("Repeat alignment needs the full matrix; it has no linear-space form")
        aligner = RepeatAligner(threshold=alignment.get('repeat_threshold', 20.0), workspace=workspace,
                                poll_every_rows=poll_every_rows, gap_char=gap_char)
    elif space_reduced:
        if gap_model == 'affine' and gap_cost.open != gap_cost.extend:
            raise ConfigurationError(
                "Linear-space path reconstruction supports constant gap costs only")
        aligner = SpaceReducedAligner(workspace=workspace, poll_every_rows=poll_every_rows,
                                      base_case_cells=cfg.get('hirschberg', {}).get('base_case_cells', 4096),
                                      gap_char=gap_char, mode=mode)
    elif gap_model == 'affine':
        aligner = AffineGapAligner(workspace=workspace, poll_every_rows=poll_every_rows, gap_char=gap_char,
                                   mode=mode)
    else:
        aligner = LinearGapAligner(workspace=workspace, poll_every_rows=poll_every_rows, gap_char=gap_char,
                                   mode=mode)
    logger.debug(f"Selected {aligner!r} for {gap_model} gaps, {aligner.mode.value} mode")
    return aligner


def align(seq1, seq2, score_model, gap_cost, mode=None, progress=None,
          space_reduced: bool = False, workspace: Optional[Workspace] = None,
          config: Union[ConfigLoader, dict, None] = None) -> AlignmentResult:
    """
    Optimal pairwise alignment.

    Args:
        seq1, seq2: Strings, ``Sequence`` objects or any indexable symbol sequences.
        score_model: Object with ``score(a, b) -> float``, e.g. a ``ScoreMatrix``.
        gap_cost: A number (constant cost), an ``(open, extend)`` pair, or a gap cost object.
        mode: ``'global'``, ``'local'`` or ``'repeat'``; ``alignment.mode`` from ``config`` if omitted.
        progress: ``ProgressListener`` or ``fraction -> bool`` callable; returning
            True cancels the alignment.
        space_reduced: Reconstruct the path in linear memory (constant gap cost only).
        workspace: Scratch matrices to reuse across calls.
        config: Configuration for the unset arguments, polling and gap character;
            the global configuration if omitted.

    Returns:
        AlignmentResult, with status CANCELLED if the listener stopped it.

    Examples:
        >>> result = align("GATTACA", "GCATGCU", ScoreMatrix.identity("ACGTU"), 1)
        >>> print(result.format())
    """
    gap_cost = as_gap_cost(gap_cost)
    aligner = make_aligner(gap_cost, space_reduced=space_reduced, workspace=workspace, config=config, mode=mode)
    return aligner.align(seq1, seq2, score_model, gap_cost, progress=progress)


def align_score_only(seq1, seq2, score_model, gap_cost, mode=None, progress=None,
                     config: Union[ConfigLoader, dict, None] = None) -> Optional[float]:
    """
    Optimal score in O(min(n, m)) memory, in ``alignment.mode`` of ``config``
    unless ``mode`` is given.

    Returns:
        The score, or None if the listener cancelled the computation.
    """
    if mode is None:
        mode = as_config_dict(config).get('alignment', {}).get('mode', AlignmentMode.GLOBAL)
    result = SpaceReducedAligner().score(seq1, seq2, score_model, gap_cost, mode, progress=progress)
    return None if result.cancelled else result.score
