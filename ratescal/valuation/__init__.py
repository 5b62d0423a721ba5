"""Calibration trade valuation.

This package provides the pricing side of calibration:
- Point sensitivities to curve discount factors
- Parameter and market quote sensitivity containers
- Discounting and forward projection helpers returning value and sensitivity
- Resolved calibration trades with par spread and present value
"""

from .discounting import annuity, discount_factor
from .forwards import forward_rate, simple_forward_rate
from .legs import RatePeriod, ResolvedLeg
from .sensitivity import (
    CurrencyParameterSensitivities,
    CurrencyParameterSensitivity,
    MarketQuoteSensitivities,
    PointSensitivities,
    PointSensitivity,
)
from .trades import (
    ResolvedFixedFloatSwap,
    ResolvedFra,
    ResolvedIborFixingDeposit,
    ResolvedIborFuture,
    ResolvedIborIborSwap,
    ResolvedTermDeposit,
    ResolvedTrade,
)

__all__ = [
    # Sensitivities
    "PointSensitivity",
    "PointSensitivities",
    "CurrencyParameterSensitivity",
    "CurrencyParameterSensitivities",
    "MarketQuoteSensitivities",
    # Helpers
    "discount_factor",
    "annuity",
    "forward_rate",
    "simple_forward_rate",
    # Legs and trades
    "RatePeriod",
    "ResolvedLeg",
    "ResolvedTrade",
    "ResolvedTermDeposit",
    "ResolvedIborFixingDeposit",
    "ResolvedFra",
    "ResolvedIborFuture",
    "ResolvedFixedFloatSwap",
    "ResolvedIborIborSwap",
]
