"""
Residual and Jacobian assembly for one jointly solved layer of curves.

Columns are ordered by curve (layer order) then parameter index; rows follow
the instruments (curve order, then node order). Curves outside the layer
price the instruments but do not contribute columns.
"""

from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Mapping, Sequence, Tuple

import numpy as np

from ratescal.curves.base import DatedParameterMetadata
from ratescal.curves.definition import CurveDefinition
from ratescal.curves.nodal import InterpolatedNodalCurve
from ratescal.curves.provider import RatesProvider

from .builder import CalibrationInstrument
from .config import CalibrationMeasure


@dataclass(frozen=True, eq=False)
class LayerState:
    """Everything needed to turn a parameter vector into a rates provider.

    Attributes:
        base_provider: Seed curves and curves of earlier layers
        definitions: Curves solved in this layer
        metadata: Node metadata per curve in ``definitions``
        discount_curves: Currency -> curve name mapping of the group
        forward_curves: Index name -> curve name mapping of the group
    """

    base_provider: RatesProvider
    definitions: Tuple[CurveDefinition, ...]
    metadata: Tuple[Tuple[DatedParameterMetadata, ...], ...]
    discount_curves: Mapping[str, str]
    forward_curves: Mapping[str, str]

    @property
    def valuation_date(self) -> date:
        return self.base_provider.valuation_date

    @property
    def curve_names(self) -> Tuple[str, ...]:
        return tuple(d.name for d in self.definitions)

    @property
    def parameter_counts(self) -> Tuple[int, ...]:
        return tuple(d.parameter_count for d in self.definitions)

    @property
    def size(self) -> int:
        return sum(self.parameter_counts)

    def column_offsets(self) -> Dict[str, int]:
        offsets, position = {}, 0
        for name, count in zip(self.curve_names, self.parameter_counts):
            offsets[name] = position
            position += count
        return offsets

    def split(self, parameters: np.ndarray) -> List[np.ndarray]:
        """Split the joint parameter vector per curve."""
        return np.split(np.asarray(parameters, dtype=float), np.cumsum(self.parameter_counts)[:-1])

    def curves(self, parameters: np.ndarray) -> Dict[str, InterpolatedNodalCurve]:
        return {
            definition.name: definition.curve(self.valuation_date, metadata, values)
            for definition, metadata, values in zip(
                self.definitions, self.metadata, self.split(parameters)
            )
        }

    def provider(self, parameters: np.ndarray) -> RatesProvider:
        """Base provider extended with this layer's curves at ``parameters``."""
        curves = self.curves(parameters)
        return self.base_provider.with_curves(
            curves,
            discount_curves={k: v for k, v in self.discount_curves.items() if v in curves},
            forward_curves={k: v for k, v in self.forward_curves.items() if v in curves},
        )


def _assemble(
    state: LayerState,
    parameters: np.ndarray,
    instruments: Sequence[CalibrationInstrument],
    measure: CalibrationMeasure,
) -> Tuple[np.ndarray, np.ndarray, Dict[str, np.ndarray]]:
    provider = state.provider(parameters)
    offsets = state.column_offsets()
    n = len(instruments)
    residuals = np.empty(n)
    jacobian = np.zeros((n, state.size))
    external: Dict[str, np.ndarray] = {}

    for k, instrument in enumerate(instruments):
        residuals[k] = measure.value(instrument.trade, provider)
        points = measure.sensitivity(instrument.trade, provider)
        for sensitivity in provider.parameter_sensitivity(points):
            name = sensitivity.curve_name
            if name in offsets:
                start = offsets[name]
                jacobian[k, start:start + sensitivity.parameter_count] += sensitivity.sensitivity
            else:
                if name not in external:
                    external[name] = np.zeros((n, sensitivity.parameter_count))
                external[name][k] += sensitivity.sensitivity

    return residuals, jacobian, external


def assemble(
    state: LayerState,
    parameters: np.ndarray,
    instruments: Sequence[CalibrationInstrument],
    measure: CalibrationMeasure = CalibrationMeasure.PAR_SPREAD,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Residuals and Jacobian of the layer's instruments at ``parameters``.

    Args:
        state: Layer being solved
        parameters: Joint parameter vector in column order
        instruments: Calibration instruments in row order
        measure: Calibration measure of the residuals

    Returns:
        Tuple of (residuals, jacobian) with ``jacobian[k, j] = d residual_k / d parameter_j``
    """
    residuals, jacobian, _ = _assemble(state, parameters, instruments, measure)
    return residuals, jacobian


def assemble_external(
    state: LayerState,
    parameters: np.ndarray,
    instruments: Sequence[CalibrationInstrument],
    measure: CalibrationMeasure = CalibrationMeasure.PAR_SPREAD,
) -> Tuple[np.ndarray, Dict[str, np.ndarray]]:
    """Jacobian of the layer plus d residual / d parameter for curves outside the layer."""
    _, jacobian, external = _assemble(state, parameters, instruments, measure)
    return jacobian, external
