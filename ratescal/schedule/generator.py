"""
Schedule generation for calibration trades.
"""

from datetime import date, timedelta
from typing import List

from ratescal.conventions.calendars import Calendar
from ratescal.conventions.daycount import DayCountConvention
from ratescal.conventions.types import (
    BusinessDayAdjustment,
    Frequency,
    RollConvention,
    StubType,
)

from .adjustments import add_months, adjust_date
from .core import SchedulePeriod


class ScheduleGenerator:
    """Generates adjusted accrual schedules with short stubs."""

    def __init__(
        self,
        calendar: Calendar,
        business_day_adjustment: BusinessDayAdjustment = BusinessDayAdjustment.MODIFIED_FOLLOWING,
        roll_convention: RollConvention = RollConvention.BACKWARD_EOM,
        payment_delay_days: int = 0,
    ):
        self.calendar = calendar
        self.business_day_adjustment = business_day_adjustment
        self.roll_convention = roll_convention
        self.payment_delay_days = payment_delay_days

    def _adjust(self, dt: date) -> date:
        return adjust_date(dt, self.business_day_adjustment, self.calendar)

    def _end_of_month_rule(self) -> bool:
        return self.roll_convention == RollConvention.BACKWARD_EOM

    def generate_schedule(
        self,
        effective_date: date,
        maturity_date: date,
        frequency: Frequency,
        day_count: DayCountConvention,
        stub_type: StubType = StubType.SHORT_INITIAL,
    ) -> List[SchedulePeriod]:
        """
        Generate an adjusted accrual schedule.

        Args:
            effective_date: Unadjusted start date
            maturity_date: Unadjusted end date
            frequency: Accrual frequency
            day_count: Day count convention for year fractions
            stub_type: Which end carries the stub when dates do not align

        Returns:
            Accrual periods in date order
        """
        if self._adjust(effective_date) >= self._adjust(maturity_date):
            raise ValueError(
                f"Effective date {effective_date} must be before maturity date {maturity_date}"
            )

        unadjusted = self._unadjusted_dates(effective_date, maturity_date, frequency, stub_type)
        adjusted = [self._adjust(d) for d in unadjusted]

        periods = []
        for i in range(len(unadjusted) - 1):
            accrual_start, accrual_end = adjusted[i], adjusted[i + 1]
            payment_date = accrual_end
            if self.payment_delay_days:
                payment_date = self.calendar.add_business_days(accrual_end, self.payment_delay_days)
            regular_end = add_months(unadjusted[i], frequency.months(), self._end_of_month_rule())
            periods.append(
                SchedulePeriod(
                    unadjusted_start=unadjusted[i],
                    unadjusted_end=unadjusted[i + 1],
                    accrual_start=accrual_start,
                    accrual_end=accrual_end,
                    payment_date=payment_date,
                    year_fraction=day_count.year_fraction(accrual_start, accrual_end),
                    is_stub=abs((regular_end - unadjusted[i + 1]).days) > 3,
                )
            )
        return periods

    def _unadjusted_dates(
        self,
        effective_date: date,
        maturity_date: date,
        frequency: Frequency,
        stub_type: StubType,
    ) -> List[date]:
        months = frequency.months()
        eom = self._end_of_month_rule()

        if stub_type == StubType.SHORT_FINAL:
            dates = [effective_date]
            k = 1
            while True:
                next_date = add_months(effective_date, k * months, eom)
                # Tiny stubs collapse into the final period
                if next_date >= maturity_date - timedelta(days=7):
                    dates.append(maturity_date)
                    return dates
                dates.append(next_date)
                k += 1

        if stub_type == StubType.SHORT_INITIAL:
            dates = [maturity_date]
            k = 1
            while True:
                prev_date = add_months(maturity_date, -k * months, eom)
                if prev_date <= effective_date + timedelta(days=7):
                    dates.append(effective_date)
                    return list(reversed(dates))
                dates.append(prev_date)
                k += 1

        raise ValueError(f"Unsupported stub type: {stub_type}")
