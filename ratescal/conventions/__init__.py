"""Market conventions: day counts, calendars, indices and reference data."""

from .calendars import Calendar, ReferenceData
from .daycount import (
    ACT_360,
    ACT_365F,
    ACT_ACT,
    THIRTY_360E,
    THIRTY_360U,
    DayCountConvention,
    get_day_count_convention,
)
from .indices import (
    EUR_ESTR,
    EUR_EURIBOR_3M,
    EUR_EURIBOR_6M,
    GBP_SONIA,
    USD_SOFR,
    RateIndex,
    get_rate_index,
)
from .types import (
    BusinessDayAdjustment,
    CalendarType,
    Frequency,
    RollConvention,
    StubType,
)

__all__ = [
    "Calendar",
    "ReferenceData",
    "DayCountConvention",
    "get_day_count_convention",
    "ACT_360",
    "ACT_365F",
    "ACT_ACT",
    "THIRTY_360E",
    "THIRTY_360U",
    "RateIndex",
    "get_rate_index",
    "EUR_ESTR",
    "EUR_EURIBOR_3M",
    "EUR_EURIBOR_6M",
    "USD_SOFR",
    "GBP_SONIA",
    "BusinessDayAdjustment",
    "CalendarType",
    "Frequency",
    "RollConvention",
    "StubType",
]
