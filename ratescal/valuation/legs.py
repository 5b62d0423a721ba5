"""
Resolved swap legs: accrual periods with payment dates and index periods.
"""

from dataclasses import dataclass
from datetime import date
from typing import TYPE_CHECKING, Optional, Tuple

from ratescal.conventions.indices import RateIndex

from .discounting import annuity, discount_factor
from .forwards import forward_rate
from .sensitivity import PointSensitivities

if TYPE_CHECKING:
    from ratescal.curves.provider import RatesProvider


@dataclass(frozen=True)
class RatePeriod:
    """One accrual period of a leg.

    Floating periods also carry the index period whose forward sets the rate.
    """

    accrual_start: date
    accrual_end: date
    payment_date: date
    year_fraction: float
    fixing_start: Optional[date] = None
    fixing_end: Optional[date] = None
    fixing_year_fraction: Optional[float] = None


@dataclass(frozen=True)
class ResolvedLeg:
    """Leg with unit notional; ``index`` is ``None`` for a fixed leg."""

    currency: str
    periods: Tuple[RatePeriod, ...]
    index: Optional[RateIndex] = None

    def __post_init__(self):
        if not self.periods:
            raise ValueError("Leg must have at least one period")
        if self.index is not None:
            for period in self.periods:
                if period.fixing_start is None or period.fixing_end is None:
                    raise ValueError("Floating leg periods need an index period")

    @property
    def is_fixed(self) -> bool:
        return self.index is None

    @property
    def start_date(self) -> date:
        return self.periods[0].accrual_start

    @property
    def end_date(self) -> date:
        return self.periods[-1].accrual_end

    @property
    def last_fixing_end(self) -> Optional[date]:
        if self.is_fixed:
            return None
        return self.periods[-1].fixing_end

    def annuity(self, provider: "RatesProvider") -> Tuple[float, PointSensitivities]:
        """PV of one unit of rate paid on every period."""
        return annuity(
            provider, self.currency, [(p.payment_date, p.year_fraction) for p in self.periods]
        )

    def forward_value(self, provider: "RatesProvider") -> Tuple[float, PointSensitivities]:
        """PV of the projected floating coupons, without spread."""
        if self.is_fixed:
            raise ValueError("Forward value is not defined for a fixed leg")
        total = 0.0
        sensitivities = PointSensitivities.empty()
        for p in self.periods:
            rate, rate_sens = forward_rate(
                provider, self.index, self.currency,
                p.fixing_start, p.fixing_end, p.fixing_year_fraction,
            )
            df, df_sens = discount_factor(provider, self.currency, p.payment_date)
            total += p.year_fraction * rate * df
            sensitivities = (
                sensitivities
                + rate_sens.multiplied_by(p.year_fraction * df)
                + df_sens.multiplied_by(p.year_fraction * rate)
            )
        return total, sensitivities
