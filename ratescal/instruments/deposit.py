"""
Deposit instrument specifications and conventions.
"""

from dataclasses import dataclass

from ratescal.conventions.daycount import ACT_360, ACT_365F, DayCountConvention
from ratescal.conventions.indices import EUR_EURIBOR_3M, EUR_EURIBOR_6M, RateIndex
from ratescal.conventions.types import BusinessDayAdjustment, CalendarType


@dataclass(frozen=True)
class TermDepositConvention:
    """Specification for a term deposit/cash instrument convention."""

    name: str
    currency: str
    day_count: DayCountConvention
    spot_lag_days: int
    business_day_adjustment: BusinessDayAdjustment
    calendar: CalendarType


@dataclass(frozen=True)
class IborFixingDepositConvention:
    """Deposit whose rate is the fixing of a term index.

    Start date, maturity and accrual all follow the index.
    """

    index: RateIndex

    @property
    def name(self) -> str:
        return f"{self.index.name}-FIXING-DEPOSIT"

    @property
    def currency(self) -> str:
        return self.index.currency

    @property
    def spot_lag_days(self) -> int:
        return self.index.fixing_lag_days


EUR_DEPOSIT_T0 = TermDepositConvention(
    name="EUR-DEPOSIT-T0",
    currency="EUR",
    day_count=ACT_360,
    spot_lag_days=0,  # overnight deposits start today
    business_day_adjustment=BusinessDayAdjustment.MODIFIED_FOLLOWING,
    calendar=CalendarType.TARGET,
)

EUR_DEPOSIT_T2 = TermDepositConvention(
    name="EUR-DEPOSIT-T2",
    currency="EUR",
    day_count=ACT_360,
    spot_lag_days=2,
    business_day_adjustment=BusinessDayAdjustment.MODIFIED_FOLLOWING,
    calendar=CalendarType.TARGET,
)

USD_DEPOSIT_T0 = TermDepositConvention(
    name="USD-DEPOSIT-T0",
    currency="USD",
    day_count=ACT_360,
    spot_lag_days=0,
    business_day_adjustment=BusinessDayAdjustment.MODIFIED_FOLLOWING,
    calendar=CalendarType.USNY,
)

GBP_DEPOSIT_T0 = TermDepositConvention(
    name="GBP-DEPOSIT-T0",
    currency="GBP",
    day_count=ACT_365F,
    spot_lag_days=0,
    business_day_adjustment=BusinessDayAdjustment.MODIFIED_FOLLOWING,
    calendar=CalendarType.UK,
)

EURIBOR_3M_FIXING_DEPOSIT = IborFixingDepositConvention(EUR_EURIBOR_3M)
EURIBOR_6M_FIXING_DEPOSIT = IborFixingDepositConvention(EUR_EURIBOR_6M)
