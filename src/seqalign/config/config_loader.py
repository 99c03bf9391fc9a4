"""
Configuration loader for seqalign.
"""

import copy
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from ..core.errors import ConfigurationError
from ..core.gaps import AffineGapCost, GapCost, LinearGapCost
from ..core.result import AlignmentMode
from ..core.scoring import ScoreMatrix, scores_factory
from ..core.sequence import check_gap_char

logger = logging.getLogger('seqalign')

DEFAULT_CONFIG_PATH = Path(__file__).parent / "default_config.yaml"


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class ConfigLoader:
    """Loads and manages configuration from YAML files."""

    def __init__(self, config_path: Optional[str] = None):
        self.config_path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH
        self.config: Dict[str, Any] = {}
        self.load_config()

    def load_config(self):
        """Load configuration from YAML file, merged over the built-in defaults."""
        defaults = self._get_default_config()
        try:
            with open(self.config_path, 'r') as f:
                document = yaml.safe_load(f)
        except FileNotFoundError:
            logger.warning(f"Config file {self.config_path} not found. Using defaults.")
            self.config = defaults
            return
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Error loading config file {self.config_path}: {e}") from e

        if document is None:
            document = {}
        if not isinstance(document, dict):
            raise ConfigurationError(f"Invalid YAML format in {self.config_path}: expected a mapping")
        self.config = _deep_merge(defaults, document)
        self.validate()

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> 'ConfigLoader':
        """Build a loader from an in-memory mapping, merged over the built-in defaults."""
        loader = cls.__new__(cls)
        loader.config_path = None
        loader.config = _deep_merge(loader._get_default_config(), config)
        loader.validate()
        return loader

    def validate(self):
        """Check the values the aligners rely on; raise ConfigurationError on the first bad one."""
        alignment = self.get_alignment_params()
        AlignmentMode.coerce(alignment.get('mode'))
        if alignment.get('gap_model') not in ('linear', 'affine'):
            raise ConfigurationError(f"alignment.gap_model must be 'linear' or 'affine', "
                                     f"got {alignment.get('gap_model')!r}")
        gap_cost_from_config(self.config)
        check_gap_char(alignment.get('gap_char'))
        threshold = alignment.get('repeat_threshold')
        if isinstance(threshold, bool) or not isinstance(threshold, (int, float)) \
                or not 0 <= threshold < float('inf'):
            raise ConfigurationError(f"alignment.repeat_threshold must be a non-negative number, got {threshold!r}")

        poll = self.get_progress_params().get('poll_every_rows')
        if not isinstance(poll, int) or isinstance(poll, bool) or poll < 1:
            raise ConfigurationError(f"progress.poll_every_rows must be a positive integer, got {poll!r}")

        fraction = self.get_workspace_params().get('max_memory_fraction')
        if not isinstance(fraction, (int, float)) or not 0 < fraction <= 1:
            raise ConfigurationError(f"workspace.max_memory_fraction must be in (0, 1], got {fraction!r}")

        cells = self.get_hirschberg_params().get('base_case_cells')
        if not isinstance(cells, int) or isinstance(cells, bool) or cells < 1:
            raise ConfigurationError(f"hirschberg.base_case_cells must be a positive integer, got {cells!r}")

        workers = self.get_batch_params().get('num_workers')
        if workers != 'auto' and not (str(workers).isdigit() and int(workers) >= 1):
            raise ConfigurationError(f"batch.num_workers must be 'auto' or a positive integer, got {workers!r}")

    def _get_default_config(self) -> Dict[str, Any]:
        """Return default configuration if YAML file is not found."""
        return {
            'alignment': {
                'mode': 'global',
                'gap_model': 'linear',
                'gap_cost': 8.0,
                'gap_open': 10.0,
                'gap_extend': 1.0,
                'space_reduced': False,
                'gap_char': '-',
                'repeat_threshold': 20.0,
            },
            'scoring': {
                'type': 'nucleotide',
                'match': 5.0,
                'mismatch': -4.0,
                'distance': 0.1,
                'alphabet': 'ACGT',
            },
            'progress': {
                'poll_every_rows': 1,
            },
            'workspace': {
                'max_memory_fraction': 0.8,
            },
            'hirschberg': {
                'base_case_cells': 4096,
            },
            'batch': {
                'num_workers': 'auto',
            },
            'logging': {
                'level': 'INFO',
                'log_file': None,
                'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            },
        }

    def get_alignment_params(self) -> Dict[str, Any]:
        """Get alignment parameters."""
        return self.config.get('alignment', {})

    def get_scoring_params(self) -> Dict[str, Any]:
        """Get substitution score parameters."""
        return self.config.get('scoring', {})

    def get_progress_params(self) -> Dict[str, Any]:
        return self.config.get('progress', {})

    def get_workspace_params(self) -> Dict[str, Any]:
        return self.config.get('workspace', {})

    def get_hirschberg_params(self) -> Dict[str, Any]:
        return self.config.get('hirschberg', {})

    def get_batch_params(self) -> Dict[str, Any]:
        """Get all-pairs batch parameters."""
        return self.config.get('batch', {})

    def get_logging_params(self) -> Dict[str, Any]:
        return self.config.get('logging', {})


def as_config_loader(config) -> ConfigLoader:
    """The loader for ``config``: a loader, a plain mapping, or None for the global one."""
    if config is None:
        return get_config()
    if isinstance(config, ConfigLoader):
        return config
    return ConfigLoader.from_dict(config)


def as_config_dict(config) -> Dict[str, Any]:
    if config is None:
        return get_config().config
    if isinstance(config, ConfigLoader):
        return config.config
    return config


def gap_cost_from_config(config=None) -> GapCost:
    """Build the gap cost model named by ``alignment.gap_model``."""
    alignment = as_config_dict(config).get('alignment', {})
    if alignment.get('gap_model', 'linear') == 'affine':
        return AffineGapCost(alignment.get('gap_open'), alignment.get('gap_extend'))
    return LinearGapCost(alignment.get('gap_cost'))


def score_model_from_config(config=None) -> ScoreMatrix:
    """Build the substitution matrix named by ``scoring.type``."""
    scoring = as_config_dict(config).get('scoring', {})
    kind = str(scoring.get('type', 'nucleotide')).strip().lower().replace('-', '_')
    if kind == 'nucleotide':
        return scores_factory(kind, match=scoring.get('match', 5.0), mismatch=scoring.get('mismatch', -4.0))
    if kind == 'identity':
        return scores_factory(kind, alphabet=scoring.get('alphabet', 'ACGT'),
                              match=scoring.get('match', 1.0), mismatch=scoring.get('mismatch', -1.0))
    if kind == 'jukes_cantor':
        return scores_factory(kind, distance=scoring.get('distance', 0.1))
    return scores_factory(kind)


# Global config instance, created on first use
config_loader: Optional[ConfigLoader] = None


def get_config() -> ConfigLoader:
    """Get the global config loader instance."""
    global config_loader
    if config_loader is None:
        config_loader = ConfigLoader()
    return config_loader


def reload_config(config_path: Optional[str] = None) -> ConfigLoader:
    """Reload configuration from file."""
    global config_loader
    if config_path or config_loader is None:
        config_loader = ConfigLoader(config_path)
    else:
        config_loader.load_config()
    return config_loader
