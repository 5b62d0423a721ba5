import logging

import numpy as np
import pytest

from ratescal.calibration import CalibrationConfig, NewtonSolver, SolverState
from ratescal.errors import (
    CalibrationDivergedError,
    CalibrationError,
    MaxIterationsExceededError,
    SingularJacobianError,
)


def _quadratic_system(x):
    residuals = np.array([x[0] ** 2 - 2.0, x[0] * x[1] - 3.0])
    jacobian = np.array([[2.0 * x[0], 0.0], [x[1], x[0]]])
    return residuals, jacobian


def test_newton_converges_quadratically():
    solver = NewtonSolver()
    result = solver.solve(_quadratic_system, np.array([1.0, 1.0]))
    assert result.state == SolverState.CONVERGED
    assert solver.state == SolverState.CONVERGED
    np.testing.assert_allclose(result.parameters, [np.sqrt(2.0), 3.0 / np.sqrt(2.0)], rtol=1e-12)
    assert np.max(np.abs(result.residuals)) < 1e-12
    assert result.iterations <= 10
    np.testing.assert_allclose(result.jacobian, _quadratic_system(result.parameters)[1])


def test_already_converged_guess_takes_no_iteration():
    result = NewtonSolver().solve(lambda x: (x - 1.0, np.eye(1)), np.array([1.0]))
    assert result.iterations == 0
    assert result.state == SolverState.CONVERGED


def test_max_iterations_exceeded():
    solver = NewtonSolver(CalibrationConfig(max_iterations=2))
    with pytest.raises(MaxIterationsExceededError) as excinfo:
        solver.solve(_quadratic_system, np.array([50.0, 1.0]))
    assert excinfo.value.iterations == 2
    assert excinfo.value.max_residual > 1e-12
    assert solver.state == SolverState.MAX_ITERATIONS_EXCEEDED


def test_singular_jacobian_is_reported(caplog):
    def singular(x):
        return np.array([1.0, 2.0]), np.array([[1.0, 1.0], [1.0, 1.0]])

    with caplog.at_level(logging.WARNING, logger="ratescal.calibration.solver"):
        with pytest.raises(SingularJacobianError):
            NewtonSolver().solve(singular, np.zeros(2))
    assert "ill-conditioned" in caplog.text


def test_non_finite_residuals_diverge():
    def blows_up(x):
        if x[0] == 1.0:
            return np.array([1.0]), np.eye(1)
        return np.array([np.nan]), np.eye(1)

    solver = NewtonSolver()
    with pytest.raises(CalibrationDivergedError):
        solver.solve(blows_up, np.array([1.0]))
    assert solver.state == SolverState.DIVERGED

    with pytest.raises(CalibrationDivergedError, match="initial guess"):
        NewtonSolver().solve(lambda x: (np.array([np.inf]), np.eye(1)), np.array([0.0]))


def test_step_halving_recovers_from_overshoot():
    # The full Newton step from 10 lands where the residual is undefined
    def log_system(x):
        if x[0] <= 0.0:
            return np.array([np.nan]), np.eye(1)
        return np.array([np.log(x[0])]), np.array([[1.0 / x[0]]])

    result = NewtonSolver().solve(log_system, np.array([10.0]))
    assert result.parameters[0] == pytest.approx(1.0, abs=1e-12)


def test_system_must_be_square():
    with pytest.raises(ValueError, match="square"):
        NewtonSolver().solve(lambda x: (np.zeros(3), np.zeros((3, 2))), np.zeros(2))


def test_errors_share_a_base_class():
    for error in (MaxIterationsExceededError, SingularJacobianError, CalibrationDivergedError):
        assert issubclass(error, CalibrationError)


def test_config_validation():
    with pytest.raises(ValueError):
        CalibrationConfig(tolerance_absolute=0.0)
    with pytest.raises(ValueError):
        CalibrationConfig(max_iterations=0)
    with pytest.raises(ValueError):
        CalibrationConfig(max_step_halvings=-1)
