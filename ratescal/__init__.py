"""Multi-curve calibration and market-quote sensitivity engine.

This package builds discount and forward curves from market quotes with a
joint Newton solve and maps trade sensitivities back to those quotes through
the calibration Jacobian.

Key modules:
- calibration: Curve group calibration, Jacobians and quote sensitivities
- curves: Curve nodes, definitions and interpolated nodal curves
- valuation: Calibration trades with value and point sensitivities
- interpolation: Interpolators with exact node sensitivities
- conventions: Day counts, calendars, indices and reference data
- schedule: Payment schedule generation
"""

__version__ = "1.0.0"

__all__ = [
    "__version__",
    # Main modules are imported via subpackages
    "calibration",
    "curves",
    "valuation",
    "instruments",
    "interpolation",
    "conventions",
    "schedule",
]
