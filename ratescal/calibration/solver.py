"""Multi-dimensional Newton solver with step halving."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Tuple

import numpy as np

from ratescal.errors import (
    CalibrationDivergedError,
    MaxIterationsExceededError,
    SingularJacobianError,
)

from .config import CalibrationConfig

logger = logging.getLogger(__name__)

ResidualFunction = Callable[[np.ndarray], Tuple[np.ndarray, np.ndarray]]


class SolverState(Enum):
    INITIALIZING = "INITIALIZING"
    ITERATING = "ITERATING"
    CONVERGED = "CONVERGED"
    DIVERGED = "DIVERGED"
    MAX_ITERATIONS_EXCEEDED = "MAX_ITERATIONS_EXCEEDED"


@dataclass(frozen=True, eq=False)
class SolverResult:
    parameters: np.ndarray
    residuals: np.ndarray
    jacobian: np.ndarray
    iterations: int
    state: SolverState


def _is_finite(*arrays: np.ndarray) -> bool:
    return all(bool(np.all(np.isfinite(a))) for a in arrays)


class NewtonSolver:
    """Newton root finder for a square system ``r(x) = 0``.

    Each iteration solves ``J d = -r`` and halves the step until the residual
    norm decreases. A step is accepted when it is finite; if no trial step
    decreases the norm, the best finite trial is taken. The Jacobian at the
    solution is returned with the result.
    """

    def __init__(self, config: Optional[CalibrationConfig] = None):
        self.config = config or CalibrationConfig()
        self.state = SolverState.INITIALIZING

    def solve(self, function: ResidualFunction, initial: np.ndarray) -> SolverResult:
        """
        Drive the residuals to zero.

        Args:
            function: Returns (residuals, jacobian) at a parameter vector
            initial: Initial parameter vector

        Returns:
            Converged parameters with the residuals and Jacobian there

        Raises:
            SingularJacobianError: If the Jacobian is singular or ill-conditioned
            CalibrationDivergedError: If residuals are not finite for any trial step
            MaxIterationsExceededError: If the tolerance is not met in time
        """
        config = self.config
        self.state = SolverState.INITIALIZING
        x = np.array(initial, dtype=float)
        residuals, jacobian = function(x)
        if residuals.shape != (len(x),) or jacobian.shape != (len(x), len(x)):
            raise ValueError(
                f"Calibration system must be square: {len(residuals)} residuals "
                f"for {len(x)} parameters"
            )
        if not _is_finite(residuals, jacobian):
            self.state = SolverState.DIVERGED
            raise CalibrationDivergedError("Residuals are not finite at the initial guess")

        self.state = SolverState.ITERATING
        iterations = 0
        while True:
            max_residual = float(np.max(np.abs(residuals)))
            logger.debug("Newton iteration %d: max |residual| = %.3e", iterations, max_residual)
            if max_residual < config.tolerance_absolute:
                self.state = SolverState.CONVERGED
                return SolverResult(x, residuals, jacobian, iterations, self.state)
            if iterations >= config.max_iterations:
                self.state = SolverState.MAX_ITERATIONS_EXCEEDED
                raise MaxIterationsExceededError(iterations, max_residual)

            self._check_conditioning(jacobian)
            try:
                delta = np.linalg.solve(jacobian, -residuals)
            except np.linalg.LinAlgError as err:
                raise SingularJacobianError(f"Calibration Jacobian is singular: {err}") from err

            x, residuals, jacobian = self._damped_step(function, x, residuals, delta)
            iterations += 1

    def _check_conditioning(self, jacobian: np.ndarray) -> None:
        condition = float(np.linalg.cond(jacobian))
        if not np.isfinite(condition) or condition > self.config.condition_threshold:
            logger.warning(
                "Calibration Jacobian is ill-conditioned: condition number %.3e", condition
            )
            raise SingularJacobianError(
                f"Calibration Jacobian condition number {condition:.3e} exceeds "
                f"{self.config.condition_threshold:.1e}"
            )

    def _damped_step(
        self,
        function: ResidualFunction,
        x: np.ndarray,
        residuals: np.ndarray,
        delta: np.ndarray,
    ) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        norm = float(np.linalg.norm(residuals))
        best = None
        step = 1.0
        for halving in range(self.config.max_step_halvings + 1):
            trial = x + step * delta
            trial_residuals, trial_jacobian = function(trial)
            if _is_finite(trial_residuals, trial_jacobian):
                trial_norm = float(np.linalg.norm(trial_residuals))
                if trial_norm < norm:
                    if halving:
                        logger.debug("Accepted Newton step after %d halvings", halving)
                    return trial, trial_residuals, trial_jacobian
                if best is None or trial_norm < best[0]:
                    best = (trial_norm, trial, trial_residuals, trial_jacobian)
            step *= 0.5

        if best is None:
            self.state = SolverState.DIVERGED
            raise CalibrationDivergedError(
                f"Residuals are not finite after {self.config.max_step_halvings} step halvings"
            )
        logger.warning(
            "No damped step reduced the residual norm %.3e after %d halvings, taking %.3e",
            norm,
            self.config.max_step_halvings,
            best[0],
        )
        return best[1], best[2], best[3]
