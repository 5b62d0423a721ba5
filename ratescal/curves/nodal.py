"""
Interpolated nodal curve: the calibrated artifact.

The curve maps an ordered parameter vector to a discount factor function.
Its value at a date is always the discount factor; the value type only
decides what the parameters represent. Sensitivities of the value to each
parameter are exact, derived from the interpolator's node sensitivities.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional, Sequence, Tuple, Union

import numpy as np

from ratescal.conventions.daycount import ACT_365F, DayCountConvention
from ratescal.interpolation import Extrapolator, Interpolator, create_interpolator

from .base import DatedParameterMetadata, ValueType

DateOrTime = Union[date, datetime, float]


def _read_only(values) -> np.ndarray:
    array = np.array(values, dtype=float)
    array.setflags(write=False)
    return array


@dataclass(frozen=True, eq=False)
class InterpolatedNodalCurve:
    """Immutable curve defined by node times, parameters and an interpolator.

    Attributes:
        name: Curve name, unique within a rates provider
        valuation_date: Date at which curve time is zero
        value_type: Meaning of the parameters
        x_values: Node times in years from the valuation date
        parameters: Node values, one per node
        interpolator: Interpolation method name, the value type default if omitted
        left_extrapolator: Boundary rule before the first node
        right_extrapolator: Boundary rule after the last node
        day_count: Day count of the curve time axis
        metadata: Optional dated metadata per parameter
    """

    name: str
    valuation_date: date
    value_type: ValueType
    x_values: np.ndarray
    parameters: np.ndarray
    interpolator: Optional[str] = None
    left_extrapolator: Extrapolator = Extrapolator.FLAT
    right_extrapolator: Extrapolator = Extrapolator.FLAT
    day_count: DayCountConvention = ACT_365F
    metadata: Tuple[DatedParameterMetadata, ...] = field(default=())

    def __post_init__(self):
        x_values = _read_only(self.x_values)
        parameters = _read_only(self.parameters)
        if x_values.shape != parameters.shape or x_values.ndim != 1:
            raise ValueError("Node times and parameters must be 1-d with the same length")
        if len(parameters) == 0:
            raise ValueError(f"Curve {self.name} needs at least one node")
        if self.metadata and len(self.metadata) != len(parameters):
            raise ValueError("Parameter metadata must match the number of parameters")

        anchor = self.value_type.anchor
        if anchor is not None and x_values[0] <= 0.0:
            raise ValueError(
                f"Curve {self.name}: first node time must be positive, got {x_values[0]}"
            )

        object.__setattr__(self, "x_values", x_values)
        object.__setattr__(self, "parameters", parameters)
        object.__setattr__(self, "metadata", tuple(self.metadata))
        if self.interpolator is None:
            object.__setattr__(self, "interpolator", self.value_type.default_interpolator)

        if anchor is not None:
            pillars = np.concatenate(([0.0], x_values))
            values = np.concatenate(([anchor], parameters))
        else:
            pillars, values = x_values, parameters
        bound: Interpolator = create_interpolator(
            self.interpolator, pillars, values, self.left_extrapolator, self.right_extrapolator
        )
        object.__setattr__(self, "_bound", bound)

    # ------------------------------------------------------------------
    # Time axis
    # ------------------------------------------------------------------
    def year_fraction(self, t: DateOrTime) -> float:
        """Convert a date or datetime to the curve's time axis."""
        if isinstance(t, (int, float)):
            return float(t)
        return self.day_count.year_fraction(self.valuation_date, t)

    @property
    def parameter_count(self) -> int:
        return len(self.parameters)

    @property
    def node_dates(self) -> Tuple[date, ...]:
        return tuple(m.date for m in self.metadata)

    # ------------------------------------------------------------------
    # Values
    # ------------------------------------------------------------------
    def _node_sensitivity(self, t: float) -> np.ndarray:
        sensitivity = self._bound.node_sensitivity(t)
        if self.value_type.anchor is not None:
            return sensitivity[1:]
        return sensitivity

    def discount_factor(self, t: DateOrTime) -> float:
        """Discount factor from the valuation date to ``t``."""
        time = self.year_fraction(t)
        if time <= 0.0:
            return 1.0
        y = self._bound.interpolate(time)
        if self.value_type == ValueType.ZERO_RATE:
            return math.exp(-y * time)
        if self.value_type == ValueType.LOG_DISCOUNT_FACTOR:
            return math.exp(y)
        return y

    def value(self, t: DateOrTime) -> float:
        """Curve value at ``t``, the discount factor."""
        return self.discount_factor(t)

    def zero_rate(self, t: DateOrTime) -> float:
        """Continuously compounded zero rate to ``t``."""
        time = self.year_fraction(t)
        if time <= 0.0:
            if self.value_type == ValueType.ZERO_RATE:
                return self._bound.interpolate(0.0)
            return 0.0
        df = self.discount_factor(time)
        if df <= 0:
            raise ValueError(f"Non-positive discount factor: {df}")
        return -math.log(df) / time

    def forward_rate(self, start: DateOrTime, end: DateOrTime, accrual: float) -> float:
        """Simply compounded forward rate between two dates for a given accrual factor."""
        if accrual <= 0:
            raise ValueError("Forward period must be positive")
        return (self.discount_factor(start) / self.discount_factor(end) - 1.0) / accrual

    # ------------------------------------------------------------------
    # Parameter sensitivities
    # ------------------------------------------------------------------
    def parameter_sensitivity(self, t: DateOrTime) -> np.ndarray:
        """Exact derivative of the discount factor at ``t`` with respect to each parameter."""
        time = self.year_fraction(t)
        if time <= 0.0:
            return np.zeros(self.parameter_count)
        node_sensitivity = self._node_sensitivity(time)
        if self.value_type == ValueType.DISCOUNT_FACTOR:
            return node_sensitivity
        df = self.discount_factor(time)
        if self.value_type == ValueType.ZERO_RATE:
            return -time * df * node_sensitivity
        return df * node_sensitivity

    def derivative(self, t: DateOrTime, parameter_index: int) -> float:
        """Derivative of the discount factor at ``t`` with respect to one parameter."""
        if not 0 <= parameter_index < self.parameter_count:
            raise IndexError(
                f"Parameter index {parameter_index} out of range for curve {self.name}"
            )
        return float(self.parameter_sensitivity(t)[parameter_index])

    # ------------------------------------------------------------------
    # Functional updates
    # ------------------------------------------------------------------
    def with_parameters(self, parameters: Sequence[float]) -> "InterpolatedNodalCurve":
        """New curve with all parameters replaced."""
        if len(parameters) != self.parameter_count:
            raise ValueError(
                f"Curve {self.name} expects {self.parameter_count} parameters, got {len(parameters)}"
            )
        return InterpolatedNodalCurve(
            name=self.name,
            valuation_date=self.valuation_date,
            value_type=self.value_type,
            x_values=self.x_values,
            parameters=parameters,
            interpolator=self.interpolator,
            left_extrapolator=self.left_extrapolator,
            right_extrapolator=self.right_extrapolator,
            day_count=self.day_count,
            metadata=self.metadata,
        )

    def with_parameter(self, parameter_index: int, new_value: float) -> "InterpolatedNodalCurve":
        """New curve with one parameter replaced."""
        if not 0 <= parameter_index < self.parameter_count:
            raise IndexError(
                f"Parameter index {parameter_index} out of range for curve {self.name}"
            )
        parameters = np.array(self.parameters)
        parameters[parameter_index] = new_value
        return self.with_parameters(parameters)

    def __repr__(self) -> str:
        return (
            f"InterpolatedNodalCurve(name={self.name!r}, valuation_date={self.valuation_date}, "
            f"value_type={self.value_type.value}, interpolator={self.interpolator!r}, "
            f"parameters={list(self.parameters)})"
        )
