# Re-export schedule components
from ratescal.conventions.types import BusinessDayAdjustment, Frequency, StubType

from .adjustments import add_months, adjust_date, get_month_end, is_end_of_month
from .core import SchedulePeriod
from .generator import ScheduleGenerator

__all__ = [
    "BusinessDayAdjustment",
    "Frequency",
    "StubType",
    "add_months",
    "adjust_date",
    "get_month_end",
    "is_end_of_month",
    "SchedulePeriod",
    "ScheduleGenerator",
]
