"""
Swap leg and swap conventions for calibration swaps.

Fixed-vs-overnight, fixed-vs-IBOR and IBOR-vs-IBOR basis conventions share the
same leg specification. A floating leg names its index; a fixed leg does not.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ratescal.conventions.daycount import ACT_360, ACT_365F, THIRTY_360E, DayCountConvention
from ratescal.conventions.indices import (
    EUR_ESTR,
    EUR_EURIBOR_3M,
    EUR_EURIBOR_6M,
    GBP_SONIA,
    USD_SOFR,
    RateIndex,
)
from ratescal.conventions.types import (
    BusinessDayAdjustment,
    CalendarType,
    Frequency,
    RollConvention,
    StubType,
)


class LegType(Enum):
    FLOATING = "FLOATING"
    FIXED = "FIXED"


@dataclass(frozen=True)
class SwapLegConvention:
    """Specification for a swap leg convention."""

    leg_type: LegType
    day_count: DayCountConvention
    pay_frequency: Frequency
    calendar: CalendarType
    business_day_adjustment: BusinessDayAdjustment = BusinessDayAdjustment.MODIFIED_FOLLOWING
    roll_convention: RollConvention = RollConvention.BACKWARD_EOM
    pay_delay_days: int = 0
    stub_type: StubType = StubType.SHORT_INITIAL
    index: Optional[RateIndex] = None

    def __post_init__(self):
        if self.leg_type == LegType.FLOATING and self.index is None:
            raise ValueError("Floating leg convention requires an index")
        if self.leg_type == LegType.FIXED and self.index is not None:
            raise ValueError("Fixed leg convention must not reference an index")


@dataclass(frozen=True)
class SwapConvention:
    """Fixed-vs-floating swap convention.

    The floating leg index decides whether the swap is an overnight indexed
    swap or a fixed-vs-IBOR swap.
    """

    name: str
    fixed_leg: SwapLegConvention
    floating_leg: SwapLegConvention
    spot_lag_days: int = 2

    def __post_init__(self):
        if self.fixed_leg.leg_type != LegType.FIXED:
            raise ValueError(f"{self.name}: first leg must be fixed")
        if self.floating_leg.leg_type != LegType.FLOATING:
            raise ValueError(f"{self.name}: second leg must be floating")

    @property
    def index(self) -> RateIndex:
        return self.floating_leg.index

    @property
    def currency(self) -> str:
        return self.floating_leg.index.currency

    @property
    def calendar(self) -> CalendarType:
        return self.floating_leg.calendar


@dataclass(frozen=True)
class IborIborSwapConvention:
    """Basis swap: the spread leg pays index 1 plus the quoted spread, the flat leg pays index 2."""

    name: str
    spread_leg: SwapLegConvention
    flat_leg: SwapLegConvention
    spot_lag_days: int = 2

    def __post_init__(self):
        if LegType.FIXED in (self.spread_leg.leg_type, self.flat_leg.leg_type):
            raise ValueError(f"{self.name}: both legs of a basis swap must be floating")
        if self.spread_leg.index.currency != self.flat_leg.index.currency:
            raise ValueError(f"{self.name}: legs must share a currency")

    @property
    def currency(self) -> str:
        return self.spread_leg.index.currency

    @property
    def calendar(self) -> CalendarType:
        return self.spread_leg.calendar


def _overnight_leg(index: RateIndex, pay_delay_days: int) -> SwapLegConvention:
    return SwapLegConvention(
        leg_type=LegType.FLOATING,
        day_count=index.day_count,
        pay_frequency=Frequency.ANNUAL,
        calendar=index.calendar,
        pay_delay_days=pay_delay_days,
        index=index,
    )


def _ois_fixed_leg(index: RateIndex, pay_delay_days: int) -> SwapLegConvention:
    return SwapLegConvention(
        leg_type=LegType.FIXED,
        day_count=index.day_count,
        pay_frequency=Frequency.ANNUAL,
        calendar=index.calendar,
        pay_delay_days=pay_delay_days,
    )


# Predefined floating leg specs
EURIBOR_3M_FLOATING = SwapLegConvention(
    leg_type=LegType.FLOATING,
    day_count=ACT_360,
    pay_frequency=Frequency.QUARTERLY,
    calendar=CalendarType.TARGET,
    index=EUR_EURIBOR_3M,
)

EURIBOR_6M_FLOATING = SwapLegConvention(
    leg_type=LegType.FLOATING,
    day_count=ACT_360,
    pay_frequency=Frequency.SEMIANNUAL,
    calendar=CalendarType.TARGET,
    index=EUR_EURIBOR_6M,
)

EUR_IRS_FIXED = SwapLegConvention(
    leg_type=LegType.FIXED,
    day_count=THIRTY_360E,
    pay_frequency=Frequency.ANNUAL,
    calendar=CalendarType.TARGET,
)

# Swap conventions
EUR_FIXED_1Y_ESTR_OIS = SwapConvention(
    name="EUR-FIXED-1Y-ESTR-OIS",
    fixed_leg=_ois_fixed_leg(EUR_ESTR, pay_delay_days=1),
    floating_leg=_overnight_leg(EUR_ESTR, pay_delay_days=1),
    spot_lag_days=2,
)

USD_FIXED_1Y_SOFR_OIS = SwapConvention(
    name="USD-FIXED-1Y-SOFR-OIS",
    fixed_leg=_ois_fixed_leg(USD_SOFR, pay_delay_days=2),
    floating_leg=_overnight_leg(USD_SOFR, pay_delay_days=2),
    spot_lag_days=2,
)

GBP_FIXED_1Y_SONIA_OIS = SwapConvention(
    name="GBP-FIXED-1Y-SONIA-OIS",
    fixed_leg=_ois_fixed_leg(GBP_SONIA, pay_delay_days=0),
    floating_leg=_overnight_leg(GBP_SONIA, pay_delay_days=0),
    spot_lag_days=0,
)

EUR_FIXED_1Y_EURIBOR_3M = SwapConvention(
    name="EUR-FIXED-1Y-EURIBOR-3M",
    fixed_leg=EUR_IRS_FIXED,
    floating_leg=EURIBOR_3M_FLOATING,
)

EUR_FIXED_1Y_EURIBOR_6M = SwapConvention(
    name="EUR-FIXED-1Y-EURIBOR-6M",
    fixed_leg=EUR_IRS_FIXED,
    floating_leg=EURIBOR_6M_FLOATING,
)

EUR_EURIBOR_3M_EURIBOR_6M = IborIborSwapConvention(
    name="EUR-EURIBOR-3M-EURIBOR-6M",
    spread_leg=EURIBOR_3M_FLOATING,
    flat_leg=EURIBOR_6M_FLOATING,
)
