from .all_pairs import AllPairsResult, align_all_pairs, parse_num_workers, setup_logging

__all__ = [
    'AllPairsResult',
    'align_all_pairs',
    'parse_num_workers',
    'setup_logging',
]
