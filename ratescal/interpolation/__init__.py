"""
Interpolation methods for yield curves.

All interpolators report exact node sensitivities, which feed the calibration
Jacobian and the conversion of point sensitivities to curve parameters.
"""

# Base classes
from .base import Extrapolator, Interpolator, create_extrapolator

# Spline interpolation
from .cubic import LogNaturalCubicSplineInterpolator, NaturalCubicSplineInterpolator

# Factory and utilities
from .factory import create_interpolator, get_interpolator_type

# Linear interpolation methods
from .linear import LinearInterpolator, LogLinearInterpolator

__all__ = [
    # Base classes
    'Extrapolator',
    'Interpolator',
    'create_extrapolator',

    # Linear interpolation methods
    'LinearInterpolator',
    'LogLinearInterpolator',

    # Spline interpolation
    'NaturalCubicSplineInterpolator',
    'LogNaturalCubicSplineInterpolator',

    # Factory and utilities
    'create_interpolator',
    'get_interpolator_type',
]
