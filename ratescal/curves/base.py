"""
Curve value types and parameter metadata.
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional


class ValueType(Enum):
    """What the curve parameters represent at each node.

    ZERO_RATE: continuously compounded zero rates, ``DF = exp(-z t)``
    DISCOUNT_FACTOR: discount factors, interpolated directly
    LOG_DISCOUNT_FACTOR: logarithms of discount factors, ``DF = exp(L)``
    """

    ZERO_RATE = "ZERO_RATE"
    DISCOUNT_FACTOR = "DISCOUNT_FACTOR"
    LOG_DISCOUNT_FACTOR = "LOG_DISCOUNT_FACTOR"

    @property
    def anchor(self) -> Optional[float]:
        """Fixed node value at ``t = 0``, ``None`` when there is no anchor."""
        if self == ValueType.DISCOUNT_FACTOR:
            return 1.0
        if self == ValueType.LOG_DISCOUNT_FACTOR:
            return 0.0
        return None

    @property
    def default_interpolator(self) -> str:
        """Interpolation method used when a curve does not name one."""
        return "LOG_LINEAR" if self == ValueType.DISCOUNT_FACTOR else "LINEAR"

    @property
    def accepts_log_interpolation(self) -> bool:
        # zero rates may be negative and log discount factors are already logs
        return self == ValueType.DISCOUNT_FACTOR


@dataclass(frozen=True)
class DatedParameterMetadata:
    """Date and label describing one curve parameter."""

    date: date
    label: str

    def __str__(self) -> str:
        return self.label or self.date.isoformat()
