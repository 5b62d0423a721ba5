"""
Core data structures for schedule generation.
"""

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class SchedulePeriod:
    """A single accrual period of a payment schedule."""

    unadjusted_start: date
    unadjusted_end: date
    accrual_start: date
    accrual_end: date
    payment_date: date
    year_fraction: float
    is_stub: bool = False
