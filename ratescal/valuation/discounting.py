"""Discount factor lookups with their point sensitivities.

Every helper returns the value together with ``PointSensitivities`` of that
value to the discount factors it read.
"""

from datetime import date
from typing import TYPE_CHECKING, Tuple

from .sensitivity import PointSensitivities, PointSensitivity

if TYPE_CHECKING:
    from ratescal.curves.provider import RatesProvider


def discount_factor(
    provider: "RatesProvider", currency: str, payment_date: date
) -> Tuple[float, PointSensitivities]:
    """Discount factor of the currency's discount curve at ``payment_date``.

    Args:
        provider: Curves and currency mappings
        currency: Currency of the payment
        payment_date: Date of the payment

    Returns:
        Discount factor and its point sensitivity (``1`` per unit of DF)

    Raises:
        ValueError: If no discount curve is mapped for the currency
    """
    curve_name = provider.discount_curve_name(currency)
    df = provider.curve(curve_name).discount_factor(payment_date)
    return df, PointSensitivities.of(PointSensitivity(curve_name, currency, payment_date, 1.0))


def annuity(
    provider: "RatesProvider", currency: str, payments
) -> Tuple[float, PointSensitivities]:
    """Sum of ``year_fraction * DF(payment_date)`` over ``(payment_date, year_fraction)`` pairs."""
    total = 0.0
    sensitivities = []
    curve_name = provider.discount_curve_name(currency)
    curve = provider.curve(curve_name)
    for payment_date, year_fraction in payments:
        total += year_fraction * curve.discount_factor(payment_date)
        sensitivities.append(PointSensitivity(curve_name, currency, payment_date, year_fraction))
    return total, PointSensitivities(tuple(sensitivities))
