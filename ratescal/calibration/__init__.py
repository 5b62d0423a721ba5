"""Multi-curve calibration.

This package provides:
- Calibration instrument building from curve nodes
- Residual and Jacobian assembly with exact curve sensitivities
- A Newton solver with step halving
- Dependency layering of curves and curve groups
- Market quote sensitivities through the calibration Jacobians
- Scenario batch calibration
"""

from .assembler import LayerState, assemble
from .builder import CalibrationInstrument, build, initial_guess
from .calibrator import CurveCalibrator
from .config import CalibrationConfig, CalibrationMeasure
from .orchestrator import curve_dependencies, layer_curves, order_groups, resolve_requirements
from .results import CalibrationJacobian, CalibrationResult, JacobianCalibrationMatrix
from .scenarios import CalibrationOutcome, calibrate_scenarios
from .sensitivity import (
    parameter_to_market_quote_sensitivity,
    to_market_quote_sensitivity,
    to_parameter_sensitivity,
)
from .solver import NewtonSolver, SolverResult, SolverState

__all__ = [
    # Configuration
    "CalibrationConfig",
    "CalibrationMeasure",
    # Building and assembly
    "CalibrationInstrument",
    "build",
    "initial_guess",
    "LayerState",
    "assemble",
    # Solver
    "NewtonSolver",
    "SolverResult",
    "SolverState",
    # Orchestration
    "resolve_requirements",
    "curve_dependencies",
    "layer_curves",
    "order_groups",
    # Entry point and results
    "CurveCalibrator",
    "CalibrationResult",
    "CalibrationJacobian",
    "JacobianCalibrationMatrix",
    # Sensitivities
    "to_parameter_sensitivity",
    "parameter_to_market_quote_sensitivity",
    "to_market_quote_sensitivity",
    # Scenarios
    "CalibrationOutcome",
    "calibrate_scenarios",
]
