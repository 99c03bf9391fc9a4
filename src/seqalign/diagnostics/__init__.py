from .validation import (
    DEFAULT_MAX_MEMORY_FRACTION,
    available_memory_bytes,
    check_memory,
    validate_alignment_result,
)

__all__ = [
    'DEFAULT_MAX_MEMORY_FRACTION',
    'available_memory_bytes',
    'check_memory',
    'validate_alignment_result',
]
