"""
QuantLib-backed holiday calendars and the reference data that carries them.

Calendars are looked up through :class:`ReferenceData`, which is passed
explicitly into calibration rather than read from a process-wide registry.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from types import MappingProxyType
from typing import Mapping, Union

import QuantLib as ql

from .daycount import to_ql_date
from .types import CalendarType


def _to_py_date(ql_date: ql.Date) -> date:
    """Convert QuantLib Date to Python date."""
    return date(ql_date.year(), ql_date.month(), ql_date.dayOfMonth())


class Calendar:
    """Business day calendar backed by a QuantLib calendar."""

    def __init__(self, name: str, ql_calendar: ql.Calendar):
        self.name = name
        self._ql_calendar = ql_calendar

    def is_business_day(self, dt: Union[date, datetime]) -> bool:
        """Check if date is a business day (not weekend or holiday)."""
        return self._ql_calendar.isBusinessDay(to_ql_date(dt))

    def add_business_days(self, start_date: Union[date, datetime], days: int) -> date:
        """Move a date by a number of business days (negative moves backwards)."""
        ql_result = self._ql_calendar.advance(to_ql_date(start_date), days, ql.Days)
        return _to_py_date(ql_result)

    def __repr__(self) -> str:
        return f"Calendar({self.name!r})"


TARGET = Calendar("TARGET", ql.TARGET())
USNY = Calendar("USNY", ql.UnitedStates(ql.UnitedStates.GovernmentBond))
UK = Calendar("UK", ql.UnitedKingdom())
WEEKEND_ONLY = Calendar("WEEKEND", ql.WeekendsOnly())


@dataclass(frozen=True)
class ReferenceData:
    """Immutable lookup of holiday calendars by calendar type."""

    calendars: Mapping[CalendarType, Calendar] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "calendars", MappingProxyType(dict(self.calendars)))

    @classmethod
    def standard(cls) -> "ReferenceData":
        """Reference data with the QuantLib TARGET, USNY, UK and weekend calendars."""
        return cls(
            {
                CalendarType.TARGET: TARGET,
                CalendarType.USNY: USNY,
                CalendarType.UK: UK,
                CalendarType.WEEKEND: WEEKEND_ONLY,
            }
        )

    def calendar(self, calendar_type: CalendarType) -> Calendar:
        """Resolve a calendar, raising ``ValueError`` if it is not available."""
        try:
            return self.calendars[calendar_type]
        except KeyError:
            raise ValueError(
                f"Unknown calendar: {calendar_type}. "
                f"Available: {[c.value for c in self.calendars]}"
            ) from None
