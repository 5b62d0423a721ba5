"""
Spot lag handling and tenor arithmetic.
"""

from datetime import date, datetime, timedelta
from typing import Tuple, Union

from ratescal.conventions.calendars import Calendar
from ratescal.conventions.types import BusinessDayAdjustment
from ratescal.schedule import add_months, adjust_date


def get_spot_date(trade_date: Union[date, datetime], calendar: Calendar, spot_lag: int = 2) -> date:
    """Get spot date from trade date (default: 2 business days)."""
    if isinstance(trade_date, datetime):
        trade_date = trade_date.date()
    return calendar.add_business_days(trade_date, spot_lag)


def parse_tenor(tenor: str) -> Tuple[int, str]:
    """Split a tenor string such as '3M' or '10Y' into (amount, unit)."""
    t = tenor.upper().strip()
    if len(t) < 2 or t[-1] not in "DWMY" or not t[:-1].isdigit():
        raise ValueError(f"Unsupported tenor: {tenor}")
    amount = int(t[:-1])
    if amount <= 0:
        raise ValueError(f"Tenor must be positive: {tenor}")
    return amount, t[-1]


def tenor_to_months(tenor: str) -> int:
    """Convert tenor string (e.g., '3M', '2Y') to number of months."""
    amount, unit = parse_tenor(tenor)
    if unit == "M":
        return amount
    if unit == "Y":
        return amount * 12
    raise ValueError(f"Tenor {tenor} is not expressed in months or years")


def add_tenor(
    start_date: date,
    tenor: str,
    calendar: Calendar,
    business_day_adjustment: BusinessDayAdjustment = BusinessDayAdjustment.MODIFIED_FOLLOWING,
    end_of_month_rule: bool = True,
) -> date:
    """Add a tenor to a date and adjust the result.

    Day and week tenors use calendar-day arithmetic followed by the
    business day adjustment, month and year tenors use month arithmetic.
    """
    amount, unit = parse_tenor(tenor)
    if unit == "D":
        unadjusted = start_date + timedelta(days=amount)
    elif unit == "W":
        unadjusted = start_date + timedelta(days=7 * amount)
    else:
        unadjusted = add_months(start_date, tenor_to_months(tenor), end_of_month_rule)
    return adjust_date(unadjusted, business_day_adjustment, calendar)


def unadjusted_tenor_end(start_date: date, tenor: str, end_of_month_rule: bool = True) -> date:
    """Unadjusted end date of a tenor, used as the schedule anchor for swaps."""
    amount, unit = parse_tenor(tenor)
    if unit in "DW":
        return start_date + timedelta(days=amount * (7 if unit == "W" else 1))
    return add_months(start_date, tenor_to_months(tenor), end_of_month_rule)
