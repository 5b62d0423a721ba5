"""
Piecewise linear interpolation, directly or on logarithms.
"""
import numpy as np

from .base import Interpolator, LogInterpolatorMixin


class LinearInterpolator(Interpolator):
    """Linear interpolation between adjacent pillars."""

    name = "LINEAR"

    def _interior_weights(self, t: float, i: int) -> np.ndarray:
        t1, t2 = self.pillars[i], self.pillars[i + 1]
        weight = (t - t1) / (t2 - t1)
        w = np.zeros(self.size)
        w[i] = 1.0 - weight
        w[i + 1] = weight
        return w

    def _boundary_slope_weights(self, right: bool) -> np.ndarray:
        i = self.size - 2 if right else 0
        h = self.pillars[i + 1] - self.pillars[i]
        w = np.zeros(self.size)
        w[i] = -1.0 / h
        w[i + 1] = 1.0 / h
        return w


class LogLinearInterpolator(LogInterpolatorMixin, LinearInterpolator):
    """Linear interpolation on log values.

    Applied to discount factors this gives piecewise constant continuously
    compounded forward rates (step forward interpolation).
    """

    name = "LOG_LINEAR"
