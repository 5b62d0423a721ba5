"""
Short-term interest rate futures and IMM date sequences.

IMM dates come from QuantLib, the same way calendars do.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum

import QuantLib as ql

from ratescal.conventions.daycount import to_ql_date
from ratescal.conventions.indices import EUR_EURIBOR_3M, RateIndex


class DateSequence(Enum):
    """IMM date sequence used to roll futures contracts."""

    QUARTERLY_IMM = 3
    MONTHLY_IMM = 1

    @property
    def main_cycle(self) -> bool:
        # QuantLib's main cycle is March, June, September, December
        return self == DateSequence.QUARTERLY_IMM


def _from_ql_date(ql_date: ql.Date) -> date:
    return date(ql_date.year(), ql_date.month(), ql_date.dayOfMonth())


def third_wednesday(year: int, month: int) -> date:
    """IMM date: the third Wednesday of the month."""
    return _from_ql_date(ql.Date.nthWeekday(3, ql.Wednesday, month, year))


def next_imm_date(on_or_after: date, sequence: DateSequence = DateSequence.QUARTERLY_IMM) -> date:
    """First IMM date in the sequence on or after the given date."""
    # QuantLib returns the first IMM date strictly after its argument
    previous_day = to_ql_date(on_or_after - timedelta(days=1))
    return _from_ql_date(ql.IMM.nextDate(previous_day, sequence.main_cycle))


def nth_imm_date(
    on_or_after: date,
    sequence_number: int,
    sequence: DateSequence = DateSequence.QUARTERLY_IMM,
) -> date:
    """The ``sequence_number``-th IMM date on or after the given date (1-based)."""
    if sequence_number < 1:
        raise ValueError(f"Sequence number must be at least 1, got {sequence_number}")
    imm = next_imm_date(on_or_after, sequence)
    for _ in range(sequence_number - 1):
        imm = _from_ql_date(ql.IMM.nextDate(to_ql_date(imm), sequence.main_cycle))
    return imm


def imm_date_in_month(year: int, month: int, sequence: DateSequence = DateSequence.QUARTERLY_IMM) -> date:
    """IMM date of a contract month; the month must belong to the sequence."""
    imm = third_wednesday(year, month)
    if not ql.IMM.isIMMdate(to_ql_date(imm), sequence.main_cycle):
        raise ValueError(f"{year}-{month:02d} is not a {sequence.name} contract month")
    return imm


@dataclass(frozen=True)
class IborFutureConvention:
    """Futures contract on a term index, quoted as price in percent."""

    name: str
    index: RateIndex
    date_sequence: DateSequence = DateSequence.QUARTERLY_IMM

    @property
    def currency(self) -> str:
        return self.index.currency


EUR_EURIBOR_3M_IMM_FUTURE = IborFutureConvention(
    name="EUR-EURIBOR-3M-IMM",
    index=EUR_EURIBOR_3M,
    date_sequence=DateSequence.QUARTERLY_IMM,
)
