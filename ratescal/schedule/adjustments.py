"""
Date adjustment functions for schedule generation.
"""

from datetime import date, datetime, timedelta
from typing import Union

from dateutil.relativedelta import relativedelta

from ratescal.conventions.calendars import Calendar
from ratescal.conventions.types import BusinessDayAdjustment


def adjust_date(
    dt: Union[date, datetime], adjustment: BusinessDayAdjustment, calendar: Calendar
) -> date:
    """Apply business day adjustment to a date."""
    if isinstance(dt, datetime):
        dt = dt.date()

    if adjustment == BusinessDayAdjustment.NO_ADJUSTMENT:
        return dt

    if adjustment in (BusinessDayAdjustment.FOLLOWING, BusinessDayAdjustment.PRECEDING):
        step = timedelta(days=1 if adjustment == BusinessDayAdjustment.FOLLOWING else -1)
        while not calendar.is_business_day(dt):
            dt += step
        return dt

    if adjustment in (
        BusinessDayAdjustment.MODIFIED_FOLLOWING,
        BusinessDayAdjustment.MODIFIED_PRECEDING,
    ):
        forward = adjustment == BusinessDayAdjustment.MODIFIED_FOLLOWING
        step = timedelta(days=1 if forward else -1)
        adjusted = dt
        while not calendar.is_business_day(adjusted):
            adjusted += step

        # If month changed, roll the other way
        if adjusted.month != dt.month:
            adjusted = dt
            while not calendar.is_business_day(adjusted):
                adjusted -= step
        return adjusted

    raise ValueError(f"Unknown business day adjustment: {adjustment}")


def is_end_of_month(dt: Union[date, datetime]) -> bool:
    """Check if date is the last calendar day of its month."""
    if isinstance(dt, datetime):
        dt = dt.date()
    return (dt + timedelta(days=1)).month != dt.month


def get_month_end(year: int, month: int) -> date:
    """Get the last calendar day of a given month."""
    return date(year, month, 1) + relativedelta(months=1, days=-1)


def add_months(dt: Union[date, datetime], months: int, end_of_month_rule: bool = True) -> date:
    """Add months to a date, keeping month-end dates on month-end if requested."""
    if isinstance(dt, datetime):
        dt = dt.date()

    # relativedelta clips to the last valid day of the target month
    result = dt + relativedelta(months=months)
    if end_of_month_rule and is_end_of_month(dt):
        return get_month_end(result.year, result.month)
    return result
