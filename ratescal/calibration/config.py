"""Calibration configuration."""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from ratescal.valuation.sensitivity import PointSensitivities

if TYPE_CHECKING:
    from ratescal.curves.provider import RatesProvider
    from ratescal.valuation.trades import ResolvedTrade


class CalibrationMeasure(Enum):
    """Quantity driven to zero for each calibration trade."""

    PAR_SPREAD = "PAR_SPREAD"
    PRESENT_VALUE = "PRESENT_VALUE"

    def value(self, trade: "ResolvedTrade", provider: "RatesProvider") -> float:
        if self == CalibrationMeasure.PAR_SPREAD:
            return trade.par_spread(provider)
        return trade.present_value(provider)

    def sensitivity(self, trade: "ResolvedTrade", provider: "RatesProvider") -> PointSensitivities:
        if self == CalibrationMeasure.PAR_SPREAD:
            return trade.par_spread_sensitivity(provider)
        return trade.present_value_sensitivity(provider)


@dataclass(frozen=True)
class CalibrationConfig:
    """Configuration for the calibration process."""

    tolerance_absolute: float = 1e-12
    max_iterations: int = 100
    max_step_halvings: int = 20
    condition_threshold: float = 1e14
    measure: CalibrationMeasure = CalibrationMeasure.PAR_SPREAD
    verbose: bool = False

    def __post_init__(self):
        if self.tolerance_absolute <= 0:
            raise ValueError("tolerance_absolute must be positive")
        if self.max_iterations < 1:
            raise ValueError("max_iterations must be at least 1")
        if self.max_step_halvings < 0:
            raise ValueError("max_step_halvings must be non-negative")
        if self.condition_threshold <= 1:
            raise ValueError("condition_threshold must be greater than 1")
