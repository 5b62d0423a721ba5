"""
Base classes for curve interpolation methods.

Every interpolator exposes the exact sensitivity of the interpolated value to
each node value. Calibration Jacobians and risk both rely on these node
sensitivities, so they are closed-form rather than bumped.
"""
from abc import ABC, abstractmethod
from enum import Enum
from typing import Sequence, Union

import numpy as np


class Extrapolator(Enum):
    """Boundary rule applied outside the node range, in interpolation space."""

    FLAT = "FLAT"
    LINEAR = "LINEAR"


def create_extrapolator(name: Union[str, Extrapolator]) -> Extrapolator:
    """Resolve an extrapolator by name."""
    if isinstance(name, Extrapolator):
        return name
    try:
        return Extrapolator[name.upper().strip()]
    except KeyError:
        raise ValueError(
            f"Unknown extrapolator: {name}. Available: {[e.value for e in Extrapolator]}"
        ) from None


class Interpolator(ABC):
    """Base class for interpolators that are linear in the node values.

    Subclasses provide the interpolation weights ``w(t)`` such that the value
    in interpolation space is ``w(t) . y``. Log interpolators apply the same
    weights to ``log(y)``.
    """

    name = ""

    def __init__(
        self,
        pillars: Sequence[float],
        values: Sequence[float],
        left_extrapolator: Extrapolator = Extrapolator.FLAT,
        right_extrapolator: Extrapolator = Extrapolator.FLAT,
    ):
        """
        Initialize interpolator.

        Args:
            pillars: Strictly increasing node times (in years)
            values: Node values (discount factors, zero rates, etc.)
            left_extrapolator: Rule applied before the first pillar
            right_extrapolator: Rule applied after the last pillar
        """
        if len(pillars) != len(values):
            raise ValueError("Pillars and values must have same length")
        if len(pillars) < 1:
            raise ValueError("Need at least 1 point for interpolation")

        self.pillars = np.asarray(pillars, dtype=float)
        self.values = np.asarray(values, dtype=float)
        if np.any(np.diff(self.pillars) <= 0.0):
            raise ValueError("Pillars must be strictly increasing, duplicates not allowed")

        self.left_extrapolator = left_extrapolator
        self.right_extrapolator = right_extrapolator
        self._prepare()

    def _prepare(self) -> None:
        """Hook for precomputation that depends on the pillars only."""

    @property
    def size(self) -> int:
        return len(self.pillars)

    # ------------------------------------------------------------------
    # Interpolation space
    # ------------------------------------------------------------------
    def _space_values(self) -> np.ndarray:
        return self.values

    def _from_space(self, space_value: float) -> float:
        return space_value

    def _space_sensitivity(self, value: float, weights: np.ndarray) -> np.ndarray:
        return weights

    # ------------------------------------------------------------------
    # Weights
    # ------------------------------------------------------------------
    @abstractmethod
    def _interior_weights(self, t: float, i: int) -> np.ndarray:
        """Weights for ``t`` inside the interval ``[pillars[i], pillars[i+1]]``."""

    @abstractmethod
    def _boundary_slope_weights(self, right: bool) -> np.ndarray:
        """Weights of the gradient at the first (or last) pillar."""

    def _unit(self, i: int) -> np.ndarray:
        e = np.zeros(self.size)
        e[i] = 1.0
        return e

    def weights(self, t: float) -> np.ndarray:
        """Weights ``w`` with interpolated space value ``w . y``."""
        if self.size == 1:
            return self._unit(0)

        first, last = self.pillars[0], self.pillars[-1]
        if t < first:
            w = self._unit(0)
            if self.left_extrapolator == Extrapolator.LINEAR:
                w = w + (t - first) * self._boundary_slope_weights(right=False)
            return w
        if t > last:
            w = self._unit(self.size - 1)
            if self.right_extrapolator == Extrapolator.LINEAR:
                w = w + (t - last) * self._boundary_slope_weights(right=True)
            return w

        i = int(np.searchsorted(self.pillars, t, side="right")) - 1
        i = min(max(i, 0), self.size - 2)
        return self._interior_weights(t, i)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def interpolate(self, t: float) -> float:
        """Interpolate value at time t."""
        return self._from_space(float(self.weights(t) @ self._space_values()))

    def node_sensitivity(self, t: float) -> np.ndarray:
        """Exact derivative of the interpolated value with respect to each node value."""
        w = self.weights(t)
        value = self._from_space(float(w @ self._space_values()))
        return self._space_sensitivity(value, w)

    def with_values(self, values: Sequence[float]) -> "Interpolator":
        """Same pillars and extrapolators, new node values."""
        return type(self)(self.pillars, values, self.left_extrapolator, self.right_extrapolator)


class LogInterpolatorMixin:
    """Interpolates ``log(y)`` and exponentiates the result.

    Non-positive node values produce NaN, which the calibration solver treats
    as a failed trial step.
    """

    def _space_values(self) -> np.ndarray:
        if getattr(self, "_log_values", None) is None:
            with np.errstate(divide="ignore", invalid="ignore"):
                self._log_values = np.log(self.values)
        return self._log_values

    def _from_space(self, space_value: float) -> float:
        return float(np.exp(space_value))

    def _space_sensitivity(self, value: float, weights: np.ndarray) -> np.ndarray:
        with np.errstate(divide="ignore", invalid="ignore"):
            return value * weights / self.values
