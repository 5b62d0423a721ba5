"""
Curve and curve group definitions.

Definitions are configuration: immutable, created once per calibration date
and shared across scenarios.
"""

from dataclasses import dataclass, field
from datetime import date
from types import MappingProxyType
from typing import Mapping, Optional, Sequence, Tuple, Union

import numpy as np

from ratescal.conventions.calendars import ReferenceData
from ratescal.conventions.daycount import ACT_365F, DayCountConvention, get_day_count_convention
from ratescal.conventions.indices import RateIndex
from ratescal.errors import InvalidCurveGroupError, InvalidCurveNodeError, SingularJacobianError
from ratescal.interpolation import Extrapolator, create_extrapolator, get_interpolator_type

from .base import DatedParameterMetadata, ValueType
from .nodal import InterpolatedNodalCurve
from .nodes import CURVE_NODE_TYPES, CurveNode


@dataclass(frozen=True)
class CurveDefinition:
    """Definition of one curve to calibrate.

    Attributes:
        name: Curve name
        value_type: What the parameters represent
        nodes: Ordered nodes, one parameter each
        interpolator: Interpolation method name, by default log-linear for
            discount factors and linear otherwise
        left_extrapolator: Extrapolator before the first node
        right_extrapolator: Extrapolator after the last node
        day_count: Day count of the curve time axis
    """

    name: str
    value_type: ValueType
    nodes: Sequence[CurveNode]
    interpolator: Optional[str] = None
    left_extrapolator: Union[str, Extrapolator] = Extrapolator.FLAT
    right_extrapolator: Union[str, Extrapolator] = Extrapolator.FLAT
    day_count: Union[str, DayCountConvention] = ACT_365F

    def __post_init__(self):
        nodes = tuple(self.nodes)
        if not nodes:
            raise ValueError(f"Curve {self.name} must have at least one node")
        for node in nodes:
            if not isinstance(node, CURVE_NODE_TYPES):
                raise TypeError(f"Unsupported curve node type: {type(node).__name__}")
        interpolator = self.interpolator or self.value_type.default_interpolator
        interpolator_type = get_interpolator_type(interpolator)
        if interpolator_type.name.startswith("LOG") and not self.value_type.accepts_log_interpolation:
            kind = self.value_type.value.lower().replace("_", " ")
            raise ValueError(f"Curve {self.name}: {interpolator} cannot interpolate {kind}s")
        object.__setattr__(self, "nodes", nodes)
        object.__setattr__(self, "interpolator", interpolator_type.name)
        object.__setattr__(self, "left_extrapolator", create_extrapolator(self.left_extrapolator))
        object.__setattr__(self, "right_extrapolator", create_extrapolator(self.right_extrapolator))
        object.__setattr__(self, "day_count", get_day_count_convention(self.day_count))

    @property
    def parameter_count(self) -> int:
        return len(self.nodes)

    def metadata(
        self, valuation_date: date, ref_data: ReferenceData
    ) -> Tuple[DatedParameterMetadata, ...]:
        """One dated metadata entry per node; node dates must be strictly increasing.

        Raises:
            SingularJacobianError: If two nodes share a date
            InvalidCurveNodeError: If node dates are out of order or not after
                the valuation date
        """
        metadata = tuple(node.metadata(valuation_date, ref_data) for node in self.nodes)
        for previous, current in zip(metadata, metadata[1:]):
            if current.date == previous.date:
                raise SingularJacobianError(
                    f"Curve {self.name}: nodes {previous.label} and {current.label} "
                    f"share the date {current.date}"
                )
            if current.date < previous.date:
                raise InvalidCurveNodeError(
                    f"Curve {self.name}: node {current.label} ({current.date}) is before "
                    f"node {previous.label} ({previous.date})"
                )
        return metadata

    def time(self, valuation_date: date, dt: date) -> float:
        return self.day_count.year_fraction(valuation_date, dt)

    def curve(
        self,
        valuation_date: date,
        metadata: Sequence[DatedParameterMetadata],
        parameters: Sequence[float],
    ) -> InterpolatedNodalCurve:
        """Curve with the given parameters on the node dates in ``metadata``."""
        times = np.array([self.time(valuation_date, m.date) for m in metadata])
        return InterpolatedNodalCurve(
            name=self.name,
            valuation_date=valuation_date,
            value_type=self.value_type,
            x_values=times,
            parameters=parameters,
            interpolator=self.interpolator,
            left_extrapolator=self.left_extrapolator,
            right_extrapolator=self.right_extrapolator,
            day_count=self.day_count,
            metadata=tuple(metadata),
        )


def _index_name(index: Union[RateIndex, str]) -> str:
    return index.name if isinstance(index, RateIndex) else index


@dataclass(frozen=True)
class CurveGroupDefinition:
    """Named set of curves calibrated together, with the currency and index each serves.

    Attributes:
        name: Group name
        curves: Curve definitions in configuration order
        discount_curves: Currency -> curve name used for discounting
        forward_curves: Index (or index name) -> curve name used for projection
    """

    name: str
    curves: Sequence[CurveDefinition]
    discount_curves: Mapping[str, str] = field(default_factory=dict)
    forward_curves: Mapping[Union[RateIndex, str], str] = field(default_factory=dict)

    def __post_init__(self):
        curves = tuple(self.curves)
        names = [c.name for c in curves]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise InvalidCurveGroupError(f"Group {self.name}: duplicate curve names {duplicates}")
        forward_curves = {_index_name(k): v for k, v in self.forward_curves.items()}
        for key, curve_name in list(self.discount_curves.items()) + list(forward_curves.items()):
            if curve_name not in names:
                raise InvalidCurveGroupError(
                    f"Group {self.name}: {key} is mapped to {curve_name}, which is not in the group"
                )
        object.__setattr__(self, "curves", curves)
        object.__setattr__(self, "discount_curves", MappingProxyType(dict(self.discount_curves)))
        object.__setattr__(self, "forward_curves", MappingProxyType(forward_curves))

    @property
    def curve_names(self) -> Tuple[str, ...]:
        return tuple(c.name for c in self.curves)

    def find_curve_definition(self, name: str) -> Optional[CurveDefinition]:
        for curve in self.curves:
            if curve.name == name:
                return curve
        return None

    def find_discount_curve_name(self, currency: str) -> Optional[str]:
        return self.discount_curves.get(currency)

    def find_forward_curve_name(self, index: Union[RateIndex, str]) -> Optional[str]:
        return self.forward_curves.get(_index_name(index))

    def discount_curves_for(self, curve_name: str) -> Mapping[str, str]:
        return {k: v for k, v in self.discount_curves.items() if v == curve_name}

    def forward_curves_for(self, curve_name: str) -> Mapping[str, str]:
        return {k: v for k, v in self.forward_curves.items() if v == curve_name}
