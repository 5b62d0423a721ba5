"""Typed failures raised while calibrating a curve group.

Every error aborts the calibration of the affected curve group. Batch runners
catch :class:`CalibrationError` per scenario so that a single failure does not
abort sibling scenarios.
"""


class CalibrationError(Exception):
    """Base class for all calibration failures."""


class MissingMarketDataError(CalibrationError, KeyError):
    """Raised when a quote required by a curve node is absent."""

    def __init__(self, quote_id, message: str = ""):
        self.quote_id = quote_id
        super().__init__(message or f"No market data available for quote '{quote_id}'")

    def __str__(self) -> str:
        # KeyError would otherwise wrap the message in quotes
        return self.args[0]


class InvalidCurveNodeError(CalibrationError, ValueError):
    """Raised for malformed node, convention and date combinations."""


class InvalidCurveGroupError(CalibrationError, ValueError):
    """Raised when a curve group references a curve that is neither defined nor seeded."""


class CyclicCurveDependencyError(CalibrationError, ValueError):
    """Raised when curves depend on each other in a cycle."""

    def __init__(self, curve_names):
        self.curve_names = tuple(curve_names)
        super().__init__(
            "Cyclic dependency between curves: " + ", ".join(self.curve_names)
        )


class SingularJacobianError(CalibrationError, ArithmeticError):
    """Raised when the calibration Jacobian is singular or ill-conditioned."""


class MaxIterationsExceededError(CalibrationError, RuntimeError):
    """Raised when the Newton solver fails to converge within the iteration bound."""

    def __init__(self, iterations: int, max_residual: float):
        self.iterations = iterations
        self.max_residual = max_residual
        super().__init__(
            f"Calibration failed to converge within {iterations} iterations, "
            f"max |residual| = {max_residual:.6e}"
        )


class CalibrationDivergedError(CalibrationError, RuntimeError):
    """Raised when no damped Newton step produces finite residuals."""
