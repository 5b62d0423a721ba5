"""Result dataclasses for curve group calibration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Mapping, Tuple

import numpy as np
import pandas as pd

from ratescal.curves.jacobian import JacobianCalibrationMatrix
from ratescal.curves.nodal import InterpolatedNodalCurve
from ratescal.curves.provider import RatesProvider

from .builder import CalibrationInstrument


@dataclass(frozen=True, eq=False)
class CalibrationJacobian:
    """Jacobian of one jointly solved layer at the solution.

    ``matrix[k, j]`` is d residual_k / d parameter_j with columns ordered by
    ``curve_order`` (curve name, parameter count) and rows by instrument.
    """

    curve_order: Tuple[Tuple[str, int], ...]
    matrix: np.ndarray
    iterations: int = 0

    def __post_init__(self):
        matrix = np.array(self.matrix, dtype=float)
        size = sum(count for _, count in self.curve_order)
        if matrix.shape != (size, size):
            raise ValueError(f"Jacobian shape {matrix.shape} does not match {size} parameters")
        matrix.setflags(write=False)
        object.__setattr__(self, "curve_order", tuple(tuple(c) for c in self.curve_order))
        object.__setattr__(self, "matrix", matrix)

    @property
    def curve_names(self) -> Tuple[str, ...]:
        return tuple(name for name, _ in self.curve_order)

    def inverse(self) -> np.ndarray:
        return np.linalg.inv(self.matrix)


@dataclass(frozen=True, eq=False)
class CalibrationResult:
    """Calibrated curves with the Jacobians needed for quote sensitivities.

    Attributes:
        group_name: Name of the calibrated group
        provider: Seed curves plus the calibrated curves, with quote Jacobians
        jacobians: Jacobian per layer, in calibration order
        quote_jacobians: d parameter / d quote per calibrated curve
        instruments: Calibration instruments per calibrated curve
        iterations: Newton iterations summed over layers
    """

    group_name: str
    provider: RatesProvider
    jacobians: Tuple[CalibrationJacobian, ...]
    quote_jacobians: Mapping[str, JacobianCalibrationMatrix]
    instruments: Mapping[str, Tuple[CalibrationInstrument, ...]]
    iterations: int

    @property
    def curve_names(self) -> Tuple[str, ...]:
        """Calibrated curves in calibration order."""
        return tuple(name for jacobian in self.jacobians for name in jacobian.curve_names)

    @property
    def layers(self) -> Tuple[Tuple[str, ...], ...]:
        return tuple(jacobian.curve_names for jacobian in self.jacobians)

    @property
    def curves(self) -> Dict[str, InterpolatedNodalCurve]:
        return {name: self.provider.curve(name) for name in self.curve_names}

    def curve(self, name: str) -> InterpolatedNodalCurve:
        return self.provider.curve(name)

    def to_frame(self) -> pd.DataFrame:
        """One row per calibrated node with its parameter, discount factor and residual."""
        rows = []
        for name in self.curve_names:
            curve = self.provider.curve(name)
            for i, instrument in enumerate(self.instruments[name]):
                node_date = instrument.metadata.date
                rows.append(
                    {
                        "curve": name,
                        "label": instrument.metadata.label,
                        "date": node_date,
                        "time": float(curve.x_values[i]),
                        "quote_id": str(instrument.quote_id),
                        "parameter": float(curve.parameters[i]),
                        "discount_factor": curve.discount_factor(node_date),
                        "zero_rate": curve.zero_rate(node_date),
                        "par_spread": instrument.trade.par_spread(self.provider),
                    }
                )
        return pd.DataFrame(
            rows,
            columns=[
                "curve", "label", "date", "time", "quote_id",
                "parameter", "discount_factor", "zero_rate", "par_spread",
            ],
        )
