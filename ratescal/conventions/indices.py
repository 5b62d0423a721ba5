"""
Rate index definitions used by forward curves and calibration trades.
"""

from dataclasses import dataclass
from typing import Dict

from .daycount import ACT_360, ACT_365F, DayCountConvention
from .types import BusinessDayAdjustment, CalendarType


@dataclass(frozen=True)
class RateIndex:
    """An overnight or term (IBOR) interest rate index.

    Attributes:
        name: Index name, e.g. "EUR-EURIBOR-3M"
        currency: ISO currency code
        day_count: Accrual day count of the index
        calendar: Fixing calendar
        fixing_lag_days: Business days between fixing and effective date
        tenor_months: Tenor of a term index, ``0`` for overnight indices
        business_day_adjustment: Adjustment applied to the index maturity
    """

    name: str
    currency: str
    day_count: DayCountConvention
    calendar: CalendarType
    fixing_lag_days: int
    tenor_months: int = 0
    business_day_adjustment: BusinessDayAdjustment = BusinessDayAdjustment.MODIFIED_FOLLOWING

    @property
    def is_overnight(self) -> bool:
        return self.tenor_months == 0

    def __str__(self) -> str:
        return self.name


EUR_ESTR = RateIndex("EUR-ESTR", "EUR", ACT_360, CalendarType.TARGET, 0)
EUR_EURIBOR_3M = RateIndex("EUR-EURIBOR-3M", "EUR", ACT_360, CalendarType.TARGET, 2, 3)
EUR_EURIBOR_6M = RateIndex("EUR-EURIBOR-6M", "EUR", ACT_360, CalendarType.TARGET, 2, 6)
USD_SOFR = RateIndex("USD-SOFR", "USD", ACT_360, CalendarType.USNY, 0)
GBP_SONIA = RateIndex("GBP-SONIA", "GBP", ACT_365F, CalendarType.UK, 0)

RATE_INDICES: Dict[str, RateIndex] = {
    index.name: index
    for index in (EUR_ESTR, EUR_EURIBOR_3M, EUR_EURIBOR_6M, USD_SOFR, GBP_SONIA)
}


def get_rate_index(name: str) -> RateIndex:
    """Look up a standard rate index by name."""
    key = name.upper().strip()
    if key not in RATE_INDICES:
        raise ValueError(
            f"Unknown rate index: {name}. Available: {list(RATE_INDICES.keys())}"
        )
    return RATE_INDICES[key]
