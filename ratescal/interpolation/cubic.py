"""
Natural cubic spline interpolation, directly or on logarithms.
"""
import numpy as np

from .base import Interpolator, LogInterpolatorMixin


class NaturalCubicSplineInterpolator(Interpolator):
    """Natural cubic spline (zero second derivative at both ends).

    The second derivatives at the pillars are linear in the node values,
    ``m = M . y``, so the spline value and its node sensitivities are both
    expressed through the matrix ``M`` computed once per pillar set.
    """

    name = "NATURAL_CUBIC"

    def _prepare(self) -> None:
        n = self.size
        self._second_derivative_matrix = np.zeros((n, n))
        if n < 3:
            return

        h = np.diff(self.pillars)
        inner = n - 2
        lhs = np.zeros((inner, inner))
        rhs = np.zeros((inner, n))
        for k in range(inner):
            i = k + 1
            lhs[k, k] = 2.0 * (h[i - 1] + h[i])
            if k > 0:
                lhs[k, k - 1] = h[i - 1]
            if k < inner - 1:
                lhs[k, k + 1] = h[i]
            rhs[k, i - 1] = 6.0 / h[i - 1]
            rhs[k, i] = -6.0 / h[i - 1] - 6.0 / h[i]
            rhs[k, i + 1] = 6.0 / h[i]
        self._second_derivative_matrix[1:-1, :] = np.linalg.solve(lhs, rhs)

    def _interior_weights(self, t: float, i: int) -> np.ndarray:
        h = self.pillars[i + 1] - self.pillars[i]
        a = (self.pillars[i + 1] - t) / h
        b = (t - self.pillars[i]) / h
        m = self._second_derivative_matrix
        w = (a ** 3 - a) * h * h / 6.0 * m[i] + (b ** 3 - b) * h * h / 6.0 * m[i + 1]
        w[i] += a
        w[i + 1] += b
        return w

    def _boundary_slope_weights(self, right: bool) -> np.ndarray:
        i = self.size - 2 if right else 0
        h = self.pillars[i + 1] - self.pillars[i]
        m = self._second_derivative_matrix
        if right:
            w = h / 6.0 * m[i] + h / 3.0 * m[i + 1]
        else:
            w = -h / 3.0 * m[i] - h / 6.0 * m[i + 1]
        w[i] -= 1.0 / h
        w[i + 1] += 1.0 / h
        return w

    def with_values(self, values) -> "NaturalCubicSplineInterpolator":
        # Reuse the second derivative matrix, it depends on the pillars only
        clone = object.__new__(type(self))
        clone.pillars = self.pillars
        clone.values = np.asarray(values, dtype=float)
        clone.left_extrapolator = self.left_extrapolator
        clone.right_extrapolator = self.right_extrapolator
        clone._second_derivative_matrix = self._second_derivative_matrix
        return clone


class LogNaturalCubicSplineInterpolator(LogInterpolatorMixin, NaturalCubicSplineInterpolator):
    """Natural cubic spline on log values (log-natural-cubic on discount factors)."""

    name = "LOG_NATURAL_CUBIC"
