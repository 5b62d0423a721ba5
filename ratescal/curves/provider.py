"""
Rates provider: curves by name, looked up by currency or rate index.
"""

from dataclasses import dataclass, field
from datetime import date
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple, Union

import numpy as np

from ratescal.conventions.indices import RateIndex
from ratescal.valuation.sensitivity import (
    CurrencyParameterSensitivities,
    CurrencyParameterSensitivity,
    PointSensitivities,
)

from .jacobian import JacobianCalibrationMatrix
from .nodal import InterpolatedNodalCurve


def _index_name(index: Union[RateIndex, str]) -> str:
    return index.name if isinstance(index, RateIndex) else index


@dataclass(frozen=True, eq=False)
class RatesProvider:
    """Immutable set of curves and the currency/index mappings that select them.

    Attributes:
        valuation_date: Valuation date shared by all curves
        curves: Curves by name
        discount_curves: Currency -> curve name used for discounting
        forward_curves: Index name -> curve name used for forward projection
        quote_jacobians: Curve name -> d parameter / d quote matrix, for
            curves that were calibrated
    """

    valuation_date: date
    curves: Mapping[str, InterpolatedNodalCurve] = field(default_factory=dict)
    discount_curves: Mapping[str, str] = field(default_factory=dict)
    forward_curves: Mapping[str, str] = field(default_factory=dict)
    quote_jacobians: Mapping[str, JacobianCalibrationMatrix] = field(default_factory=dict)

    def __post_init__(self):
        forward_curves = {_index_name(k): v for k, v in self.forward_curves.items()}
        for mapping in (self.discount_curves, forward_curves):
            for key, curve_name in mapping.items():
                if curve_name not in self.curves:
                    raise ValueError(f"{key} is mapped to unknown curve {curve_name}")
        for name, curve in self.curves.items():
            if curve.name != name:
                raise ValueError(f"Curve {curve.name} registered under name {name}")
        object.__setattr__(self, "curves", MappingProxyType(dict(self.curves)))
        object.__setattr__(self, "discount_curves", MappingProxyType(dict(self.discount_curves)))
        object.__setattr__(self, "forward_curves", MappingProxyType(forward_curves))
        object.__setattr__(self, "quote_jacobians", MappingProxyType(dict(self.quote_jacobians)))

    @classmethod
    def empty(cls, valuation_date: date) -> "RatesProvider":
        return cls(valuation_date)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------
    @property
    def curve_names(self) -> Tuple[str, ...]:
        return tuple(self.curves)

    def find_curve(self, name: str) -> Optional[InterpolatedNodalCurve]:
        return self.curves.get(name)

    def curve(self, name: str) -> InterpolatedNodalCurve:
        curve = self.find_curve(name)
        if curve is None:
            raise ValueError(f"Unknown curve: {name}. Available: {list(self.curves)}")
        return curve

    def find_discount_curve_name(self, currency: str) -> Optional[str]:
        return self.discount_curves.get(currency)

    def find_forward_curve_name(self, index: Union[RateIndex, str]) -> Optional[str]:
        return self.forward_curves.get(_index_name(index))

    def discount_curve_name(self, currency: str) -> str:
        name = self.find_discount_curve_name(currency)
        if name is None:
            raise ValueError(f"No discount curve for currency {currency}")
        return name

    def forward_curve_name(self, index: Union[RateIndex, str]) -> str:
        name = self.find_forward_curve_name(index)
        if name is None:
            raise ValueError(f"No forward curve for index {_index_name(index)}")
        return name

    def discount_curve(self, currency: str) -> InterpolatedNodalCurve:
        return self.curves[self.discount_curve_name(currency)]

    def forward_curve(self, index: Union[RateIndex, str]) -> InterpolatedNodalCurve:
        return self.curves[self.forward_curve_name(index)]

    def discount_factor(self, currency: str, dt: date) -> float:
        return self.discount_curve(currency).discount_factor(dt)

    def find_quote_jacobian(self, curve_name: str) -> Optional[JacobianCalibrationMatrix]:
        return self.quote_jacobians.get(curve_name)

    # ------------------------------------------------------------------
    # Sensitivities
    # ------------------------------------------------------------------
    def parameter_sensitivity(
        self, point_sensitivities: PointSensitivities
    ) -> CurrencyParameterSensitivities:
        """Chain point sensitivities through each curve's parameter sensitivity."""
        accumulated: Dict[Tuple[str, str], np.ndarray] = {}
        for point in point_sensitivities.normalized():
            curve = self.curve(point.curve_name)
            vector = point.sensitivity * curve.parameter_sensitivity(point.date)
            key = (point.curve_name, point.currency)
            if key in accumulated:
                accumulated[key] = accumulated[key] + vector
            else:
                accumulated[key] = vector
        return CurrencyParameterSensitivities(
            CurrencyParameterSensitivity(name, ccy, vector, self.curves[name].metadata)
            for (name, ccy), vector in accumulated.items()
        )

    # ------------------------------------------------------------------
    # Combination
    # ------------------------------------------------------------------
    def with_curves(
        self,
        curves: Mapping[str, InterpolatedNodalCurve],
        discount_curves: Mapping[str, str] = None,
        forward_curves: Mapping[str, str] = None,
        quote_jacobians: Mapping[str, JacobianCalibrationMatrix] = None,
    ) -> "RatesProvider":
        """New provider with curves, mappings and Jacobians added or replaced."""
        return RatesProvider(
            valuation_date=self.valuation_date,
            curves={**self.curves, **curves},
            discount_curves={**self.discount_curves, **(discount_curves or {})},
            forward_curves={**self.forward_curves, **(forward_curves or {})},
            quote_jacobians={**self.quote_jacobians, **(quote_jacobians or {})},
        )

    def combined_with(self, other: "RatesProvider") -> "RatesProvider":
        if other.valuation_date != self.valuation_date:
            raise ValueError(
                f"Cannot combine providers for {self.valuation_date} and {other.valuation_date}"
            )
        return self.with_curves(
            other.curves, other.discount_curves, other.forward_curves, other.quote_jacobians
        )

    def __repr__(self) -> str:
        return (
            f"RatesProvider(valuation_date={self.valuation_date}, curves={list(self.curves)}, "
            f"discount_curves={dict(self.discount_curves)}, "
            f"forward_curves={dict(self.forward_curves)})"
        )
