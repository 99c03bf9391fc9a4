"""
All-pairs alignment of a set of sequences.

Each pair is an independent alignment, so pairs are spread over worker
processes with one aligner (and workspace) per process. The sequential path
reuses a single aligner and reports progress row by row.
"""

import logging
import time
from dataclasses import dataclass, field
from multiprocessing import Pool, cpu_count
from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from ..api import make_aligner
from ..config.config_loader import as_config_dict, as_config_loader
from ..core.errors import ConfigurationError
from ..core.gaps import as_gap_cost
from ..core.progress import CompoundProgressListener
from ..core.result import AlignmentMode, AlignmentStatus
from ..core.sequence import as_symbols, check_alignable, sequence_name
from ..diagnostics.validation import check_memory

logger = logging.getLogger('seqalign')

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def parse_num_workers(num_workers_spec):
    """Parse num_workers specification."""
    if num_workers_spec == 'auto':
        return max(1, cpu_count() - 1)
    elif isinstance(num_workers_spec, str) and num_workers_spec.isdigit():
        return max(1, int(num_workers_spec))
    elif isinstance(num_workers_spec, int) and not isinstance(num_workers_spec, bool):
        return max(1, num_workers_spec)
    else:
        return 1


def setup_logging(config: Optional[Dict[str, Any]] = None) -> logging.Logger:
    """Setup logging configuration from the ``logging`` section."""
    params = as_config_loader(config).get_logging_params()

    log_level_str = str(params.get('level', 'INFO'))
    log_level = getattr(logging, log_level_str.upper(), logging.INFO)

    logger = logging.getLogger('seqalign')
    logger.setLevel(log_level)

    # Remove existing handlers
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()

    formatter = logging.Formatter(params.get('format') or LOG_FORMAT)

    # Console handler
    ch = logging.StreamHandler()
    ch.setLevel(log_level)
    ch.setFormatter(formatter)
    logger.addHandler(ch)

    # File handler
    log_file = params.get('log_file')
    if log_file:
        fh = logging.FileHandler(log_file)
        fh.setLevel(log_level)
        fh.setFormatter(formatter)
        logger.addHandler(fh)

    return logger


@dataclass
class AllPairsResult:
    """
    Pairwise scores and identities, symmetric, indexed like the input sequences.

    The diagonal holds self-alignment scores. A cancelled batch has no matrices.
    """
    names: List[str]
    scores: Optional[np.ndarray] = None
    identities: Optional[np.ndarray] = None
    status: AlignmentStatus = AlignmentStatus.COMPLETED
    pairs_completed: int = 0
    elapsed_seconds: float = 0.0
    mode: AlignmentMode = AlignmentMode.GLOBAL
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def cancelled(self) -> bool:
        return self.status is AlignmentStatus.CANCELLED

    def score(self, a: str, b: str) -> float:
        return float(self.scores[self.names.index(a), self.names.index(b)])


# Per-process state for pool workers
_worker_state: Dict[str, Any] = {}


def _init_worker(score_model, gap_cost, mode, config):
    _worker_state['aligner'] = make_aligner(gap_cost, space_reduced=False, config=config)
    _worker_state['score_model'] = score_model
    _worker_state['gap_cost'] = gap_cost
    _worker_state['mode'] = mode
    logger.debug(f"Batch worker ready with {_worker_state['aligner']!r}")


def _align_pair(task) -> Tuple[int, int, float, float]:
    i, j, s1, s2 = task
    result = _worker_state['aligner'].align(
        s1, s2, _worker_state['score_model'], _worker_state['gap_cost'], _worker_state['mode'])
    return i, j, result.score, result.identity


def _pairs(count: int):
    for i in range(count):
        for j in range(i, count):
            yield i, j


def align_all_pairs(sequences, score_model, gap_cost, mode=None, num_workers=None,
                    progress=None, config=None) -> AllPairsResult:
    """
    Align every pair of ``sequences``, including each sequence with itself.

    Args:
        sequences: Iterable of sequences (strings, ``Sequence`` objects, ...).
        score_model: Substitution scores; must be picklable when ``num_workers > 1``.
        gap_cost: Constant or affine gap cost.
        mode: Alignment mode for every pair; ``alignment.mode`` if omitted.
        num_workers: Worker processes, an integer or ``'auto'``; ``batch.num_workers`` if omitted.
        progress: Listener for overall progress; returning True cancels the batch.
        config: Configuration supplying the defaults above plus workspace and polling settings.

    Returns:
        AllPairsResult with CANCELLED status if the listener stopped the batch.
    """
    cfg = as_config_dict(config)
    if mode is None:
        mode = cfg.get('alignment', {}).get('mode', AlignmentMode.GLOBAL)
    if num_workers is None:
        num_workers = cfg.get('batch', {}).get('num_workers', 1)
    mode = AlignmentMode.coerce(mode)
    if mode is AlignmentMode.REPEAT:
        raise ConfigurationError("All-pairs matrices are symmetric; repeat alignment is not")
    gap_cost = as_gap_cost(gap_cost)
    sequences = list(sequences)
    names = [sequence_name(s, f"seq{k + 1}") for k, s in enumerate(sequences)]
    symbols = [as_symbols(s) for s in sequences]
    gap_char = cfg.get('alignment', {}).get('gap_char', '-')
    for s in symbols:
        check_alignable(s, gap_char)
    count = len(symbols)

    max_fraction = cfg.get('workspace', {}).get('max_memory_fraction')
    check_memory(2 * count * count * np.dtype(np.float64).itemsize, max_fraction, what="all-pairs matrices")
    scores = np.zeros((count, count), dtype=np.float64)
    identities = np.zeros((count, count), dtype=np.float64)

    workers = parse_num_workers(num_workers)
    pair_count = count * (count + 1) // 2
    workers = min(workers, max(pair_count, 1))
    cells = {(i, j): max(len(symbols[i]) * len(symbols[j]), 1) for i, j in _pairs(count)}
    compound = CompoundProgressListener(progress, sum(cells.values()))

    logger.info(f"Aligning {pair_count} pairs of {count} sequences ({mode.value}) with {workers} worker(s)")
    start = time.time()
    done = 0

    def finish(status):
        elapsed = time.time() - start
        if status is AlignmentStatus.CANCELLED:
            logger.info(f"All-pairs batch cancelled after {done}/{pair_count} pairs")
            return AllPairsResult(names=names, status=status, pairs_completed=done,
                                  elapsed_seconds=elapsed, mode=mode)
        logger.info(f"All-pairs batch finished in {elapsed:.2f}s")
        return AllPairsResult(names=names, scores=scores, identities=identities, status=status,
                              pairs_completed=done, elapsed_seconds=elapsed, mode=mode,
                              metadata={'num_workers': workers, 'gap_cost': gap_cost})

    if workers > 1:
        tasks = [(i, j, symbols[i], symbols[j]) for i, j in _pairs(count)]
        with Pool(processes=workers, initializer=_init_worker,
                  initargs=(score_model, gap_cost, mode, cfg)) as pool:
            for i, j, score, identity in pool.imap(_align_pair, tasks):
                scores[i, j] = scores[j, i] = score
                identities[i, j] = identities[j, i] = identity
                done += 1
                if compound.increment_sections_completed(cells[i, j]):
                    pool.terminate()
                    return finish(AlignmentStatus.CANCELLED)
        return finish(AlignmentStatus.COMPLETED)

    aligner = make_aligner(gap_cost, space_reduced=False, config=cfg)
    for i, j in _pairs(count):
        compound.set_section_size(cells[i, j])
        result = aligner.align(symbols[i], symbols[j], score_model, gap_cost, mode, progress=compound.minor)
        if result.cancelled:
            return finish(AlignmentStatus.CANCELLED)
        scores[i, j] = scores[j, i] = result.score
        identities[i, j] = identities[j, i] = result.identity
        done += 1
        if compound.increment_sections_completed(cells[i, j]):
            return finish(AlignmentStatus.CANCELLED)
    return finish(AlignmentStatus.COMPLETED)
