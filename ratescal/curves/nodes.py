"""
Curve nodes: the market instruments a curve is calibrated to.

Each node names one quote and a convention. From those it resolves a trade
with unit notional, reports the curves it needs, and dates its parameter.
The set of node types is closed; see ``CURVE_NODE_TYPES``.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Optional, Tuple

from ratescal.business_calendar import add_tenor, parse_tenor, unadjusted_tenor_end
from ratescal.conventions.calendars import ReferenceData
from ratescal.conventions.indices import RateIndex
from ratescal.errors import InvalidCurveNodeError
from ratescal.instruments.deposit import IborFixingDepositConvention, TermDepositConvention
from ratescal.instruments.fra import FraConvention
from ratescal.instruments.future import IborFutureConvention, imm_date_in_month, nth_imm_date
from ratescal.instruments.swap import (
    IborIborSwapConvention,
    LegType,
    SwapConvention,
    SwapLegConvention,
)
from ratescal.schedule import ScheduleGenerator, adjust_date
from ratescal.schema.quotes import MarketData, QuoteId
from ratescal.valuation.legs import RatePeriod, ResolvedLeg
from ratescal.valuation.trades import (
    ResolvedFixedFloatSwap,
    ResolvedFra,
    ResolvedIborFixingDeposit,
    ResolvedIborFuture,
    ResolvedIborIborSwap,
    ResolvedTermDeposit,
    ResolvedTrade,
)

from .base import DatedParameterMetadata


class CurveNodeDateType(Enum):
    END = "END"
    LAST_FIXING = "LAST_FIXING"
    FIXED = "FIXED"


@dataclass(frozen=True)
class CurveNodeDate:
    """Rule that dates a node's parameter.

    END uses the trade end date, FIXED an explicit date. LAST_FIXING uses the
    end of the last index period the trade observes, except for futures, which
    are dated at their last trade date.
    """

    type: CurveNodeDateType
    fixed_date: Optional[date] = None

    @classmethod
    def of(cls, fixed_date: date) -> "CurveNodeDate":
        return cls(CurveNodeDateType.FIXED, fixed_date)

    def calculate(self, trade: ResolvedTrade) -> date:
        if self.type == CurveNodeDateType.END:
            return trade.end_date
        if self.type == CurveNodeDateType.LAST_FIXING:
            last_fixing = trade.last_fixing_node_date
            if last_fixing is None:
                raise InvalidCurveNodeError(
                    f"LAST_FIXING node date requires a trade with fixings, got {type(trade).__name__}"
                )
            return last_fixing
        if self.fixed_date is None:
            raise InvalidCurveNodeError("FIXED node date requires an explicit date")
        return self.fixed_date


CurveNodeDate.END = CurveNodeDate(CurveNodeDateType.END)
CurveNodeDate.LAST_FIXING = CurveNodeDate(CurveNodeDateType.LAST_FIXING)


@dataclass(frozen=True)
class NodeRequirements:
    """Quotes and curves a node needs to be priced."""

    quote_ids: Tuple[QuoteId, ...]
    discount_currencies: Tuple[str, ...] = ()
    forward_indices: Tuple[RateIndex, ...] = ()


def _check_tenor(tenor: str, what: str) -> None:
    try:
        parse_tenor(tenor)
    except ValueError as err:
        raise InvalidCurveNodeError(f"Invalid {what}: {err}") from err


def _tenor_label(tenor: str) -> str:
    amount, unit = parse_tenor(tenor)
    return f"{amount}{unit}"


def _index_tenor(index: RateIndex) -> str:
    return f"{index.tenor_months}M"


def _check_term_index(index: RateIndex) -> None:
    if index.is_overnight:
        raise InvalidCurveNodeError(f"{index.name} is an overnight index, a term index is required")


class CurveNode(ABC):
    """Base behaviour shared by the node types.

    Subclasses are frozen dataclasses with ``quote_id``, ``convention``,
    ``additional_spread``, ``label`` and ``date`` fields.
    """

    # d residual / d raw quote of the par spread residual
    quote_derivative = -1.0

    @abstractmethod
    def resolve(self, valuation_date: date, ref_data: ReferenceData, rate: float) -> ResolvedTrade:
        """Trade for a given traded rate, spread included."""

    @abstractmethod
    def requirements(self) -> NodeRequirements:
        """Quote ids and curves needed to price the node's trade."""

    @abstractmethod
    def _default_label(self) -> str:
        ...

    @property
    def currency(self) -> str:
        return self.convention.currency

    def market_rate(self, market_data: MarketData) -> float:
        """Traded rate (or decimal price for futures) including the additional spread."""
        return market_data.get_value(self.quote_id) + self.additional_spread

    def approximate_rate(self, market_data: MarketData) -> float:
        """Order of magnitude of the zero rate at the node, used for initial guesses."""
        return self.market_rate(market_data)

    def trade(
        self, valuation_date: date, market_data: MarketData, ref_data: ReferenceData
    ) -> ResolvedTrade:
        return self.resolve(valuation_date, ref_data, self.market_rate(market_data))

    def node_date(self, valuation_date: date, ref_data: ReferenceData) -> date:
        node_date = self.date.calculate(self.resolve(valuation_date, ref_data, 0.0))
        if node_date <= valuation_date:
            raise InvalidCurveNodeError(
                f"Node {self.quote_id} date {node_date} is not after valuation date {valuation_date}"
            )
        return node_date

    def metadata(self, valuation_date: date, ref_data: ReferenceData) -> DatedParameterMetadata:
        return DatedParameterMetadata(
            self.node_date(valuation_date, ref_data), self.label or self._default_label()
        )


def _post_init_common(node) -> None:
    object.__setattr__(node, "quote_id", QuoteId.of(node.quote_id))
    if node.date is None:
        object.__setattr__(node, "date", CurveNodeDate.END)
    if node.date.type == CurveNodeDateType.FIXED and node.date.fixed_date is None:
        raise InvalidCurveNodeError(f"Node {node.quote_id}: FIXED date rule requires a date")


# ----------------------------------------------------------------------
# Deposits and FRAs
# ----------------------------------------------------------------------
@dataclass(frozen=True)
class TermDepositCurveNode(CurveNode):
    """Term deposit starting at spot and maturing after ``tenor``."""

    quote_id: QuoteId
    convention: TermDepositConvention
    tenor: str
    additional_spread: float = 0.0
    label: str = ""
    date: CurveNodeDate = None

    def __post_init__(self):
        _post_init_common(self)
        _check_tenor(self.tenor, "deposit tenor")

    def _default_label(self) -> str:
        return _tenor_label(self.tenor)

    def requirements(self) -> NodeRequirements:
        return NodeRequirements((self.quote_id,), (self.currency,))

    def resolve(self, valuation_date, ref_data, rate):
        conv = self.convention
        calendar = ref_data.calendar(conv.calendar)
        start = calendar.add_business_days(valuation_date, conv.spot_lag_days)
        end = add_tenor(start, self.tenor, calendar, conv.business_day_adjustment)
        return ResolvedTermDeposit(
            currency=conv.currency,
            start_date=start,
            end_date=end,
            year_fraction=conv.day_count.year_fraction(start, end),
            rate=rate,
        )


def _index_period(index: RateIndex, start: date, ref_data: ReferenceData) -> Tuple[date, float]:
    calendar = ref_data.calendar(index.calendar)
    end = add_tenor(start, _index_tenor(index), calendar, index.business_day_adjustment)
    return end, index.day_count.year_fraction(start, end)


@dataclass(frozen=True)
class IborFixingDepositCurveNode(CurveNode):
    """Deposit over the next index period, priced off the forward curve of the index."""

    quote_id: QuoteId
    convention: IborFixingDepositConvention
    additional_spread: float = 0.0
    label: str = ""
    date: CurveNodeDate = None

    def __post_init__(self):
        _post_init_common(self)
        _check_term_index(self.convention.index)

    def _default_label(self) -> str:
        return _index_tenor(self.convention.index)

    def requirements(self) -> NodeRequirements:
        return NodeRequirements((self.quote_id,), (self.currency,), (self.convention.index,))

    def resolve(self, valuation_date, ref_data, rate):
        index = self.convention.index
        calendar = ref_data.calendar(index.calendar)
        fixing = calendar.add_business_days(valuation_date, 0)
        start = calendar.add_business_days(fixing, index.fixing_lag_days)
        end, year_fraction = _index_period(index, start, ref_data)
        return ResolvedIborFixingDeposit(
            currency=index.currency,
            index=index,
            fixing_date=fixing,
            start_date=start,
            end_date=end,
            year_fraction=year_fraction,
            rate=rate,
        )


@dataclass(frozen=True)
class FraCurveNode(CurveNode):
    """FRA starting ``period_to_start`` after spot, e.g. 3M for a 3x6 on a 3M index.

    ``period_to_end`` defaults to one index tenor after the start.
    """

    quote_id: QuoteId
    convention: FraConvention
    period_to_start: str
    period_to_end: Optional[str] = None
    additional_spread: float = 0.0
    label: str = ""
    date: CurveNodeDate = None

    def __post_init__(self):
        _post_init_common(self)
        _check_term_index(self.convention.index)
        _check_tenor(self.period_to_start, "FRA period to start")
        if self.period_to_end is not None:
            _check_tenor(self.period_to_end, "FRA period to end")

    def _default_label(self) -> str:
        amount, _ = parse_tenor(self.period_to_start)
        if self.period_to_end is not None:
            end_amount, _ = parse_tenor(self.period_to_end)
        else:
            end_amount = amount + self.convention.index.tenor_months
        return f"{amount}x{end_amount}"

    def requirements(self) -> NodeRequirements:
        return NodeRequirements((self.quote_id,), (self.currency,), (self.convention.index,))

    def resolve(self, valuation_date, ref_data, rate):
        index = self.convention.index
        calendar = ref_data.calendar(index.calendar)
        spot = calendar.add_business_days(valuation_date, index.fixing_lag_days)
        start = add_tenor(spot, self.period_to_start, calendar, index.business_day_adjustment)
        if self.period_to_end is not None:
            end = add_tenor(spot, self.period_to_end, calendar, index.business_day_adjustment)
            if end <= start:
                raise InvalidCurveNodeError(
                    f"FRA {self.quote_id}: end {end} must be after start {start}"
                )
            year_fraction = index.day_count.year_fraction(start, end)
        else:
            end, year_fraction = _index_period(index, start, ref_data)
        return ResolvedFra(
            currency=index.currency,
            index=index,
            fixing_date=calendar.add_business_days(start, -index.fixing_lag_days),
            start_date=start,
            end_date=end,
            year_fraction=year_fraction,
            rate=rate,
        )


# ----------------------------------------------------------------------
# Futures
# ----------------------------------------------------------------------
def _parse_year_month(value: str) -> Tuple[int, int]:
    try:
        parsed = datetime.strptime(value.strip(), "%Y-%m")
    except ValueError as err:
        raise InvalidCurveNodeError(
            f"Invalid futures contract month {value!r}, expected YYYY-MM"
        ) from err
    return parsed.year, parsed.month


class _IborFutureCurveNode(CurveNode):
    """Futures pricing shared by the relative and absolute contract nodes.

    Quotes are prices in percent (99.5 means a price of 0.995); the additional
    spread is a decimal price amount.
    """

    quote_derivative = -0.01

    @abstractmethod
    def _contract_date(self, valuation_date: date) -> date:
        """Unadjusted IMM date starting the contract's index period."""

    def requirements(self) -> NodeRequirements:
        return NodeRequirements((self.quote_id,), (), (self.convention.index,))

    def market_rate(self, market_data: MarketData) -> float:
        return market_data.get_value(self.quote_id) / 100.0 + self.additional_spread

    def approximate_rate(self, market_data: MarketData) -> float:
        return 1.0 - self.market_rate(market_data)

    def resolve(self, valuation_date, ref_data, rate):
        index = self.convention.index
        calendar = ref_data.calendar(index.calendar)
        start = adjust_date(
            self._contract_date(valuation_date), index.business_day_adjustment, calendar
        )
        last_trade_date = calendar.add_business_days(start, -index.fixing_lag_days)
        if last_trade_date < valuation_date:
            raise InvalidCurveNodeError(
                f"Futures {self.quote_id} stopped trading on {last_trade_date}, "
                f"before valuation date {valuation_date}"
            )
        end, year_fraction = _index_period(index, start, ref_data)
        return ResolvedIborFuture(
            currency=index.currency,
            index=index,
            last_trade_date=last_trade_date,
            start_date=start,
            end_date=end,
            year_fraction=year_fraction,
            reference_price=rate,
        )


@dataclass(frozen=True)
class IborFutureCurveNode(_IborFutureCurveNode):
    """Futures contract: the ``sequence_number``-th IMM date after ``minimum_period``."""

    quote_id: QuoteId
    convention: IborFutureConvention
    minimum_period: str
    sequence_number: int
    additional_spread: float = 0.0
    label: str = ""
    date: CurveNodeDate = None

    def __post_init__(self):
        _post_init_common(self)
        _check_term_index(self.convention.index)
        _check_tenor(self.minimum_period, "futures minimum period")
        if self.sequence_number < 1:
            raise InvalidCurveNodeError(
                f"Futures sequence number must be at least 1, got {self.sequence_number}"
            )

    def _default_label(self) -> str:
        return f"{self.minimum_period}+{self.sequence_number}"

    def _contract_date(self, valuation_date):
        earliest = unadjusted_tenor_end(valuation_date, self.minimum_period)
        return nth_imm_date(earliest, self.sequence_number, self.convention.date_sequence)


@dataclass(frozen=True)
class AbsoluteIborFutureCurveNode(_IborFutureCurveNode):
    """Futures contract for a fixed contract month, e.g. ``year_month="2025-03"``.

    The default label is the contract month.
    """

    quote_id: QuoteId
    convention: IborFutureConvention
    year_month: str
    additional_spread: float = 0.0
    label: str = ""
    date: CurveNodeDate = None

    def __post_init__(self):
        _post_init_common(self)
        _check_term_index(self.convention.index)
        year, month = _parse_year_month(self.year_month)
        try:
            imm_date_in_month(year, month, self.convention.date_sequence)
        except ValueError as err:
            raise InvalidCurveNodeError(f"Futures {self.quote_id}: {err}") from err
        object.__setattr__(self, "year_month", f"{year}-{month:02d}")

    def _default_label(self) -> str:
        return self.year_month

    def _contract_date(self, valuation_date):
        year, month = _parse_year_month(self.year_month)
        return imm_date_in_month(year, month, self.convention.date_sequence)


# ----------------------------------------------------------------------
# Swaps
# ----------------------------------------------------------------------
def _resolve_leg(
    convention: SwapLegConvention,
    currency: str,
    start: date,
    end: date,
    ref_data: ReferenceData,
) -> ResolvedLeg:
    calendar = ref_data.calendar(convention.calendar)
    generator = ScheduleGenerator(
        calendar,
        convention.business_day_adjustment,
        convention.roll_convention,
        convention.pay_delay_days,
    )
    schedule = generator.generate_schedule(
        start, end, convention.pay_frequency, convention.day_count, convention.stub_type
    )
    index = convention.index
    periods = []
    for period in schedule:
        if convention.leg_type == LegType.FIXED:
            periods.append(
                RatePeriod(
                    period.accrual_start, period.accrual_end,
                    period.payment_date, period.year_fraction,
                )
            )
        elif index.is_overnight:
            # Compounded overnight rate telescopes over the accrual period
            periods.append(
                RatePeriod(
                    period.accrual_start, period.accrual_end,
                    period.payment_date, period.year_fraction,
                    period.accrual_start, period.accrual_end, period.year_fraction,
                )
            )
        else:
            fixing_end, fixing_year_fraction = _index_period(index, period.accrual_start, ref_data)
            periods.append(
                RatePeriod(
                    period.accrual_start, period.accrual_end,
                    period.payment_date, period.year_fraction,
                    period.accrual_start, fixing_end, fixing_year_fraction,
                )
            )
    return ResolvedLeg(currency, tuple(periods), index)


def _swap_dates(
    valuation_date: date,
    spot_lag_days: int,
    calendar_type,
    period_to_start: Optional[str],
    tenor: str,
    ref_data: ReferenceData,
) -> Tuple[date, date]:
    calendar = ref_data.calendar(calendar_type)
    start = calendar.add_business_days(valuation_date, spot_lag_days)
    if period_to_start is not None:
        start = add_tenor(start, period_to_start, calendar)
    return start, unadjusted_tenor_end(start, tenor)


@dataclass(frozen=True)
class _FixedFloatSwapCurveNode(CurveNode):
    quote_id: QuoteId
    convention: SwapConvention
    tenor: str
    period_to_start: Optional[str] = None
    additional_spread: float = 0.0
    label: str = ""
    date: CurveNodeDate = None

    def __post_init__(self):
        _post_init_common(self)
        _check_tenor(self.tenor, "swap tenor")
        if self.period_to_start is not None:
            _check_tenor(self.period_to_start, "swap period to start")
        self._check_index(self.convention.index)

    def _check_index(self, index: RateIndex) -> None:
        ...

    def _default_label(self) -> str:
        if self.period_to_start is not None:
            return f"{_tenor_label(self.period_to_start)}x{_tenor_label(self.tenor)}"
        return _tenor_label(self.tenor)

    def requirements(self) -> NodeRequirements:
        return NodeRequirements((self.quote_id,), (self.currency,), (self.convention.index,))

    def resolve(self, valuation_date, ref_data, rate):
        conv = self.convention
        start, end = _swap_dates(
            valuation_date, conv.spot_lag_days, conv.calendar,
            self.period_to_start, self.tenor, ref_data,
        )
        return ResolvedFixedFloatSwap(
            currency=conv.currency,
            fixed_leg=_resolve_leg(conv.fixed_leg, conv.currency, start, end, ref_data),
            floating_leg=_resolve_leg(conv.floating_leg, conv.currency, start, end, ref_data),
            fixed_rate=rate,
        )


@dataclass(frozen=True)
class FixedOvernightSwapCurveNode(_FixedFloatSwapCurveNode):
    """Fixed vs compounded overnight swap (OIS)."""

    def _check_index(self, index: RateIndex) -> None:
        if not index.is_overnight:
            raise InvalidCurveNodeError(
                f"{index.name} is a term index, an overnight index is required"
            )


@dataclass(frozen=True)
class FixedIborSwapCurveNode(_FixedFloatSwapCurveNode):
    """Fixed vs IBOR swap."""

    def _check_index(self, index: RateIndex) -> None:
        _check_term_index(index)


@dataclass(frozen=True)
class IborIborSwapCurveNode(CurveNode):
    """IBOR vs IBOR basis swap quoted as a spread on the spread leg."""

    quote_id: QuoteId
    convention: IborIborSwapConvention
    tenor: str
    additional_spread: float = 0.0
    label: str = ""
    date: CurveNodeDate = None

    def __post_init__(self):
        _post_init_common(self)
        _check_tenor(self.tenor, "swap tenor")
        _check_term_index(self.convention.spread_leg.index)
        _check_term_index(self.convention.flat_leg.index)

    def _default_label(self) -> str:
        return _tenor_label(self.tenor)

    def requirements(self) -> NodeRequirements:
        conv = self.convention
        return NodeRequirements(
            (self.quote_id,), (self.currency,), (conv.spread_leg.index, conv.flat_leg.index)
        )

    def resolve(self, valuation_date, ref_data, rate):
        conv = self.convention
        start, end = _swap_dates(
            valuation_date, conv.spot_lag_days, conv.calendar, None, self.tenor, ref_data
        )
        return ResolvedIborIborSwap(
            currency=conv.currency,
            spread_leg=_resolve_leg(conv.spread_leg, conv.currency, start, end, ref_data),
            flat_leg=_resolve_leg(conv.flat_leg, conv.currency, start, end, ref_data),
            spread=rate,
        )


CURVE_NODE_TYPES = (
    TermDepositCurveNode,
    IborFixingDepositCurveNode,
    FraCurveNode,
    IborFutureCurveNode,
    AbsoluteIborFutureCurveNode,
    FixedOvernightSwapCurveNode,
    FixedIborSwapCurveNode,
    IborIborSwapCurveNode,
)
