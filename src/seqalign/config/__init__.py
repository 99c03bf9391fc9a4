from .config_loader import (
    ConfigLoader,
    DEFAULT_CONFIG_PATH,
    as_config_loader,
    get_config,
    reload_config,
    gap_cost_from_config,
    score_model_from_config,
)

__all__ = [
    'ConfigLoader',
    'DEFAULT_CONFIG_PATH',
    'as_config_loader',
    'get_config',
    'reload_config',
    'gap_cost_from_config',
    'score_model_from_config',
]
