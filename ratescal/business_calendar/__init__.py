"""Spot date and tenor arithmetic."""

from .date_calculator import (
    add_tenor,
    get_spot_date,
    parse_tenor,
    tenor_to_months,
    unadjusted_tenor_end,
)

__all__ = [
    "add_tenor",
    "get_spot_date",
    "parse_tenor",
    "tenor_to_months",
    "unadjusted_tenor_end",
]
