"""
Resolved calibration trades with analytic pricing and point sensitivities.

All trades have unit notional. ``par_spread`` is the model rate (or price)
minus the traded rate (or price), so it is zero when the trade is at market.
The present value is zero at the same point.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from typing import TYPE_CHECKING, Optional, Tuple

from ratescal.conventions.indices import RateIndex

from .discounting import discount_factor
from .forwards import forward_rate, simple_forward_rate
from .legs import ResolvedLeg
from .sensitivity import PointSensitivities, PointSensitivity

if TYPE_CHECKING:
    from ratescal.curves.provider import RatesProvider


class ResolvedTrade(ABC):
    """Pricing contract of a calibration trade.

    Every trade exposes ``currency`` and ``end_date``.
    """

    @abstractmethod
    def par_spread(self, provider: "RatesProvider") -> float:
        """Model par rate minus the traded rate."""

    @abstractmethod
    def par_spread_sensitivity(self, provider: "RatesProvider") -> PointSensitivities:
        """Point sensitivities of the par spread."""

    @abstractmethod
    def present_value(self, provider: "RatesProvider") -> float:
        """Present value of the unit-notional trade."""

    @abstractmethod
    def present_value_sensitivity(self, provider: "RatesProvider") -> PointSensitivities:
        """Point sensitivities of the present value."""

    @property
    def last_fixing_end(self) -> Optional[date]:
        """End of the last index period the trade observes, ``None`` without fixings."""
        return None

    @property
    def last_fixing_node_date(self) -> Optional[date]:
        """Date of a LAST_FIXING curve node on this trade."""
        return self.last_fixing_end


@dataclass(frozen=True)
class ResolvedTermDeposit(ResolvedTrade):
    """Deposit lent at ``start_date`` and repaid with interest at ``end_date``.

    PV = -DF(start) + DF(end) * (1 + alpha * rate)
    """

    currency: str
    start_date: date
    end_date: date
    year_fraction: float
    rate: float

    def _par_rate(self, provider: "RatesProvider") -> Tuple[float, PointSensitivities]:
        curve_name = provider.discount_curve_name(self.currency)
        return simple_forward_rate(
            provider, curve_name, self.currency, self.start_date, self.end_date, self.year_fraction
        )

    def par_spread(self, provider: "RatesProvider") -> float:
        return self._par_rate(provider)[0] - self.rate

    def par_spread_sensitivity(self, provider: "RatesProvider") -> PointSensitivities:
        return self._par_rate(provider)[1].normalized()

    def present_value(self, provider: "RatesProvider") -> float:
        df_start, _ = discount_factor(provider, self.currency, self.start_date)
        df_end, _ = discount_factor(provider, self.currency, self.end_date)
        return -df_start + df_end * (1.0 + self.year_fraction * self.rate)

    def present_value_sensitivity(self, provider: "RatesProvider") -> PointSensitivities:
        curve_name = provider.discount_curve_name(self.currency)
        return PointSensitivities.of(
            PointSensitivity(curve_name, self.currency, self.start_date, -1.0),
            PointSensitivity(
                curve_name, self.currency, self.end_date, 1.0 + self.year_fraction * self.rate
            ),
        ).normalized()


@dataclass(frozen=True)
class ResolvedIborFixingDeposit(ResolvedTrade):
    """Deposit paying the fixing of a term index over the index period.

    PV = alpha * (F - rate) * DF(end)
    """

    currency: str
    index: RateIndex
    fixing_date: date
    start_date: date
    end_date: date
    year_fraction: float
    rate: float

    @property
    def last_fixing_end(self) -> Optional[date]:
        return self.end_date

    def _forward(self, provider: "RatesProvider") -> Tuple[float, PointSensitivities]:
        return forward_rate(
            provider, self.index, self.currency, self.start_date, self.end_date, self.year_fraction
        )

    def par_spread(self, provider: "RatesProvider") -> float:
        return self._forward(provider)[0] - self.rate

    def par_spread_sensitivity(self, provider: "RatesProvider") -> PointSensitivities:
        return self._forward(provider)[1].normalized()

    def present_value(self, provider: "RatesProvider") -> float:
        forward, _ = self._forward(provider)
        df, _ = discount_factor(provider, self.currency, self.end_date)
        return self.year_fraction * (forward - self.rate) * df

    def present_value_sensitivity(self, provider: "RatesProvider") -> PointSensitivities:
        forward, forward_sens = self._forward(provider)
        df, df_sens = discount_factor(provider, self.currency, self.end_date)
        return (
            forward_sens.multiplied_by(self.year_fraction * df)
            + df_sens.multiplied_by(self.year_fraction * (forward - self.rate))
        ).normalized()


@dataclass(frozen=True)
class ResolvedFra(ResolvedTrade):
    """Forward rate agreement settled at the start of the index period (ISDA discounting).

    PV = alpha * (F - rate) / (1 + alpha * F) * DF(start)
    """

    currency: str
    index: RateIndex
    fixing_date: date
    start_date: date
    end_date: date
    year_fraction: float
    rate: float

    @property
    def last_fixing_end(self) -> Optional[date]:
        return self.end_date

    def _forward(self, provider: "RatesProvider") -> Tuple[float, PointSensitivities]:
        return forward_rate(
            provider, self.index, self.currency, self.start_date, self.end_date, self.year_fraction
        )

    def par_spread(self, provider: "RatesProvider") -> float:
        return self._forward(provider)[0] - self.rate

    def par_spread_sensitivity(self, provider: "RatesProvider") -> PointSensitivities:
        return self._forward(provider)[1].normalized()

    def present_value(self, provider: "RatesProvider") -> float:
        forward, _ = self._forward(provider)
        df, _ = discount_factor(provider, self.currency, self.start_date)
        alpha = self.year_fraction
        return alpha * (forward - self.rate) / (1.0 + alpha * forward) * df

    def present_value_sensitivity(self, provider: "RatesProvider") -> PointSensitivities:
        forward, forward_sens = self._forward(provider)
        df, df_sens = discount_factor(provider, self.currency, self.start_date)
        alpha = self.year_fraction
        denominator = 1.0 + alpha * forward
        settlement = alpha * (forward - self.rate) / denominator
        d_settlement = alpha * (1.0 + alpha * self.rate) / (denominator * denominator)
        return (
            forward_sens.multiplied_by(d_settlement * df) + df_sens.multiplied_by(settlement)
        ).normalized()


@dataclass(frozen=True)
class ResolvedIborFuture(ResolvedTrade):
    """Margined futures contract on a term index.

    Model price = 1 - F; prices are decimals, not percent. The trade is margined
    daily so its value is not discounted.
    """

    currency: str
    index: RateIndex
    last_trade_date: date
    start_date: date
    end_date: date
    year_fraction: float
    reference_price: float

    @property
    def last_fixing_end(self) -> Optional[date]:
        return self.end_date

    @property
    def last_fixing_node_date(self) -> Optional[date]:
        return self.last_trade_date

    def _forward(self, provider: "RatesProvider") -> Tuple[float, PointSensitivities]:
        return forward_rate(
            provider, self.index, self.currency, self.start_date, self.end_date, self.year_fraction
        )

    def price(self, provider: "RatesProvider") -> float:
        return 1.0 - self._forward(provider)[0]

    def par_spread(self, provider: "RatesProvider") -> float:
        return self.price(provider) - self.reference_price

    def par_spread_sensitivity(self, provider: "RatesProvider") -> PointSensitivities:
        return self._forward(provider)[1].multiplied_by(-1.0).normalized()

    def present_value(self, provider: "RatesProvider") -> float:
        return self.par_spread(provider)

    def present_value_sensitivity(self, provider: "RatesProvider") -> PointSensitivities:
        return self.par_spread_sensitivity(provider)


@dataclass(frozen=True)
class ResolvedFixedFloatSwap(ResolvedTrade):
    """Pay fixed, receive floating. The floating index may be overnight or IBOR.

    Par rate R = sum(beta * F * DF) / sum(alpha * DF); PV = annuity * (R - fixed_rate).
    """

    currency: str
    fixed_leg: ResolvedLeg
    floating_leg: ResolvedLeg
    fixed_rate: float

    def __post_init__(self):
        if not self.fixed_leg.is_fixed or self.floating_leg.is_fixed:
            raise ValueError("Fixed-float swap needs one fixed and one floating leg")

    @property
    def end_date(self) -> date:
        return max(self.fixed_leg.end_date, self.floating_leg.end_date)

    @property
    def last_fixing_end(self) -> Optional[date]:
        return self.floating_leg.last_fixing_end

    def par_rate(self, provider: "RatesProvider") -> float:
        floating, _ = self.floating_leg.forward_value(provider)
        fixed_annuity, _ = self.fixed_leg.annuity(provider)
        return floating / fixed_annuity

    def par_spread(self, provider: "RatesProvider") -> float:
        return self.par_rate(provider) - self.fixed_rate

    def par_spread_sensitivity(self, provider: "RatesProvider") -> PointSensitivities:
        floating, floating_sens = self.floating_leg.forward_value(provider)
        fixed_annuity, annuity_sens = self.fixed_leg.annuity(provider)
        par_rate = floating / fixed_annuity
        return (
            floating_sens.multiplied_by(1.0 / fixed_annuity)
            + annuity_sens.multiplied_by(-par_rate / fixed_annuity)
        ).normalized()

    def present_value(self, provider: "RatesProvider") -> float:
        floating, _ = self.floating_leg.forward_value(provider)
        fixed_annuity, _ = self.fixed_leg.annuity(provider)
        return floating - self.fixed_rate * fixed_annuity

    def present_value_sensitivity(self, provider: "RatesProvider") -> PointSensitivities:
        _, floating_sens = self.floating_leg.forward_value(provider)
        _, annuity_sens = self.fixed_leg.annuity(provider)
        return (floating_sens + annuity_sens.multiplied_by(-self.fixed_rate)).normalized()


@dataclass(frozen=True)
class ResolvedIborIborSwap(ResolvedTrade):
    """Basis swap: pay the spread leg index plus ``spread``, receive the flat leg index.

    Par spread K* = (flat leg value - spread leg value) / spread leg annuity.
    """

    currency: str
    spread_leg: ResolvedLeg
    flat_leg: ResolvedLeg
    spread: float

    def __post_init__(self):
        if self.spread_leg.is_fixed or self.flat_leg.is_fixed:
            raise ValueError("Both legs of a basis swap must be floating")

    @property
    def end_date(self) -> date:
        return max(self.spread_leg.end_date, self.flat_leg.end_date)

    @property
    def last_fixing_end(self) -> Optional[date]:
        return max(self.spread_leg.last_fixing_end, self.flat_leg.last_fixing_end)

    def market_spread(self, provider: "RatesProvider") -> float:
        spread_value, _ = self.spread_leg.forward_value(provider)
        flat_value, _ = self.flat_leg.forward_value(provider)
        spread_annuity, _ = self.spread_leg.annuity(provider)
        return (flat_value - spread_value) / spread_annuity

    def par_spread(self, provider: "RatesProvider") -> float:
        return self.market_spread(provider) - self.spread

    def par_spread_sensitivity(self, provider: "RatesProvider") -> PointSensitivities:
        spread_value, spread_sens = self.spread_leg.forward_value(provider)
        flat_value, flat_sens = self.flat_leg.forward_value(provider)
        spread_annuity, annuity_sens = self.spread_leg.annuity(provider)
        market_spread = (flat_value - spread_value) / spread_annuity
        return (
            flat_sens.multiplied_by(1.0 / spread_annuity)
            + spread_sens.multiplied_by(-1.0 / spread_annuity)
            + annuity_sens.multiplied_by(-market_spread / spread_annuity)
        ).normalized()

    def present_value(self, provider: "RatesProvider") -> float:
        spread_value, _ = self.spread_leg.forward_value(provider)
        flat_value, _ = self.flat_leg.forward_value(provider)
        spread_annuity, _ = self.spread_leg.annuity(provider)
        return flat_value - spread_value - self.spread * spread_annuity

    def present_value_sensitivity(self, provider: "RatesProvider") -> PointSensitivities:
        _, spread_sens = self.spread_leg.forward_value(provider)
        _, flat_sens = self.flat_leg.forward_value(provider)
        _, annuity_sens = self.spread_leg.annuity(provider)
        return (
            flat_sens + spread_sens.multiplied_by(-1.0) + annuity_sens.multiplied_by(-self.spread)
        ).normalized()
