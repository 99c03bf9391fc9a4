"""
Gap cost models.

Costs are positive numbers subtracted from the running score.
"""

import math
from dataclasses import dataclass
from typing import Union

from .errors import ConfigurationError


def _check_cost(name: str, value: float) -> float:
    try:
        value = float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{name} must be a number, got {value!r}") from None
    if not math.isfinite(value):
        raise ConfigurationError(f"{name} must be finite, got {value}")
    if value < 0:
        raise ConfigurationError(f"{name} must not be negative, got {value}")
    return value


@dataclass(frozen=True)
class LinearGapCost:
    """Constant cost per gap column."""
    cost: float

    def __post_init__(self):
        object.__setattr__(self, 'cost', _check_cost('gap cost', self.cost))


@dataclass(frozen=True)
class AffineGapCost:
    """First gap column costs ``open``, each further contiguous column ``extend``."""
    open: float
    extend: float

    def __post_init__(self):
        object.__setattr__(self, 'open', _check_cost('gap open cost', self.open))
        object.__setattr__(self, 'extend', _check_cost('gap extend cost', self.extend))
        if self.extend > self.open:
            raise ConfigurationError(
                f"gap extend cost ({self.extend}) exceeds gap open cost ({self.open})")

    def run_cost(self, length: int) -> float:
        """Cost of one contiguous gap of ``length`` columns."""
        if length <= 0:
            return 0.0
        return self.open + self.extend * (length - 1)


GapCost = Union[LinearGapCost, AffineGapCost]


def as_gap_cost(value) -> GapCost:
    """
    Coerce a number, an ``(open, extend)`` pair, a mapping, or a gap cost
    object into a gap cost model.
    """
    if isinstance(value, (LinearGapCost, AffineGapCost)):
        return value
    if isinstance(value, dict):
        if 'cost' in value:
            return LinearGapCost(value['cost'])
        if 'open' in value and 'extend' in value:
            return AffineGapCost(value['open'], value['extend'])
        raise ConfigurationError(f"Unrecognised gap cost mapping: {value!r}")
    if isinstance(value, (tuple, list)):
        if len(value) != 2:
            raise ConfigurationError(f"Affine gap cost needs (open, extend), got {value!r}")
        return AffineGapCost(value[0], value[1])
    return LinearGapCost(value)
