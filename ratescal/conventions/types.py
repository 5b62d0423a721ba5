"""
Basic enums shared by conventions, schedules and curve definitions.
"""

from enum import Enum


class Frequency(Enum):
    """Payment and reset frequencies, valued in months."""

    ANNUAL = 12
    SEMIANNUAL = 6
    QUARTERLY = 3
    MONTHLY = 1

    def months(self) -> int:
        return self.value


class BusinessDayAdjustment(Enum):
    """Business day adjustment rules."""

    NO_ADJUSTMENT = "NO_ADJUSTMENT"
    FOLLOWING = "FOLLOWING"
    MODIFIED_FOLLOWING = "MODIFIED_FOLLOWING"
    PRECEDING = "PRECEDING"
    MODIFIED_PRECEDING = "MODIFIED_PRECEDING"


class StubType(Enum):
    """Stub period types for schedule generation."""

    SHORT_INITIAL = "SHORT_INITIAL"
    SHORT_FINAL = "SHORT_FINAL"


class RollConvention(Enum):
    """Roll convention for month arithmetic."""

    NONE = "NONE"
    BACKWARD_EOM = "BACKWARD_EOM"


class CalendarType(Enum):
    """Predefined holiday calendars."""

    TARGET = "TARGET"
    USNY = "USNY"
    UK = "UK"
    WEEKEND = "WEEKEND"
