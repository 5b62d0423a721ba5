"""
Calibration instrument builder.

Turns a curve node and the market data into the trade whose residual the
solver drives to zero, plus an initial guess for the node's parameter.
"""

import math
from dataclasses import dataclass
from datetime import date
from typing import Callable

from ratescal.conventions.calendars import ReferenceData
from ratescal.curves.base import DatedParameterMetadata, ValueType
from ratescal.curves.nodes import CurveNode
from ratescal.schema.quotes import MarketData, QuoteId
from ratescal.valuation.trades import ResolvedTrade


@dataclass(frozen=True)
class CalibrationInstrument:
    """A priceable calibration trade and what the solver needs to know about it.

    Attributes:
        trade: Resolved trade at the market quote
        initial_guess: Starting value of the node parameter
        quote_id: Quote the trade is struck at
        quote_derivative: d par spread / d raw quote
        metadata: Date and label of the node parameter
        node: Node the instrument was built from
    """

    trade: ResolvedTrade
    initial_guess: float
    quote_id: QuoteId
    quote_derivative: float
    metadata: DatedParameterMetadata
    node: CurveNode


def initial_guess(value_type: ValueType, rate: float, time: float) -> float:
    """Parameter value implied by a flat zero rate ``rate`` up to ``time``."""
    if value_type == ValueType.ZERO_RATE:
        return rate
    if value_type == ValueType.DISCOUNT_FACTOR:
        return math.exp(-rate * time)
    if value_type == ValueType.LOG_DISCOUNT_FACTOR:
        return -rate * time
    raise ValueError(f"Unsupported value type: {value_type}")


def build(
    node: CurveNode,
    valuation_date: date,
    market_data: MarketData,
    ref_data: ReferenceData,
    value_type: ValueType,
    time_axis: Callable[[date], float],
) -> CalibrationInstrument:
    """
    Build the calibration instrument for one node.

    Args:
        node: Curve node
        valuation_date: Valuation date
        market_data: Quotes observed on the valuation date
        ref_data: Holiday calendars
        value_type: Value type of the curve the node belongs to
        time_axis: Curve time of a date

    Returns:
        Calibration instrument

    Raises:
        MissingMarketDataError: If the node's quote is not in the market data
        InvalidCurveNodeError: If the node cannot be dated or resolved
    """
    trade = node.trade(valuation_date, market_data, ref_data)
    metadata = node.metadata(valuation_date, ref_data)
    guess = initial_guess(
        value_type, node.approximate_rate(market_data), time_axis(metadata.date)
    )
    return CalibrationInstrument(
        trade=trade,
        initial_guess=guess,
        quote_id=node.quote_id,
        quote_derivative=node.quote_derivative,
        metadata=metadata,
        node=node,
    )
