"""
Factory functions and utilities for creating interpolators.
"""
from typing import Dict, Sequence, Type, Union

from .base import Extrapolator, Interpolator, create_extrapolator
from .cubic import LogNaturalCubicSplineInterpolator, NaturalCubicSplineInterpolator
from .linear import LinearInterpolator, LogLinearInterpolator

INTERPOLATORS: Dict[str, Type[Interpolator]] = {
    "LINEAR": LinearInterpolator,
    "LOG_LINEAR": LogLinearInterpolator,
    "NATURAL_CUBIC": NaturalCubicSplineInterpolator,
    "LOG_NATURAL_CUBIC": LogNaturalCubicSplineInterpolator,
}


def get_interpolator_type(method: str) -> Type[Interpolator]:
    """Resolve an interpolator class by method name."""
    method_upper = method.upper().strip()
    if method_upper not in INTERPOLATORS:
        raise ValueError(
            f"Unknown interpolation method: {method}. "
            f"Available: {', '.join(INTERPOLATORS)}"
        )
    return INTERPOLATORS[method_upper]


def create_interpolator(
    method: str,
    pillars: Sequence[float],
    values: Sequence[float],
    left_extrapolator: Union[str, Extrapolator] = Extrapolator.FLAT,
    right_extrapolator: Union[str, Extrapolator] = Extrapolator.FLAT,
) -> Interpolator:
    """
    Create an interpolator based on method name.

    Args:
        method: Interpolation method name
        pillars: Time points
        values: Values to interpolate
        left_extrapolator: Extrapolator name or enum for t before the first pillar
        right_extrapolator: Extrapolator name or enum for t after the last pillar

    Returns:
        Configured interpolator
    """
    return get_interpolator_type(method)(
        pillars,
        values,
        create_extrapolator(left_extrapolator),
        create_extrapolator(right_extrapolator),
    )
