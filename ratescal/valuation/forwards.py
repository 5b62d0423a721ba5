"""Simple forward rates implied by projection curves.

Formula: F = (DF(start) / DF(end) - 1) / alpha

where alpha is the accrual fraction of the index period. Overnight compounded
periods use the same telescoping formula over the whole accrual period.
"""

from datetime import date
from typing import TYPE_CHECKING, Tuple, Union

from ratescal.conventions.indices import RateIndex

from .sensitivity import PointSensitivities, PointSensitivity

if TYPE_CHECKING:
    from ratescal.curves.provider import RatesProvider


def simple_forward_rate(
    provider: "RatesProvider",
    curve_name: str,
    currency: str,
    start: date,
    end: date,
    accrual: float,
) -> Tuple[float, PointSensitivities]:
    """Forward rate between two dates on a named curve, with point sensitivities."""
    if accrual <= 0:
        raise ValueError(f"Accrual fraction must be positive, got {accrual}")
    curve = provider.curve(curve_name)
    df_start = curve.discount_factor(start)
    df_end = curve.discount_factor(end)
    rate = (df_start / df_end - 1.0) / accrual
    sensitivities = PointSensitivities.of(
        PointSensitivity(curve_name, currency, start, 1.0 / (accrual * df_end)),
        PointSensitivity(curve_name, currency, end, -df_start / (accrual * df_end * df_end)),
    )
    return rate, sensitivities


def forward_rate(
    provider: "RatesProvider",
    index: Union[RateIndex, str],
    currency: str,
    start: date,
    end: date,
    accrual: float,
) -> Tuple[float, PointSensitivities]:
    """Forward rate of an index period, projected from the index's forward curve.

    Raises:
        ValueError: If no forward curve is mapped for the index
    """
    curve_name = provider.forward_curve_name(index)
    return simple_forward_rate(provider, curve_name, currency, start, end, accrual)
