"""
Conversion of point sensitivities to market quote sensitivities.

Point sensitivities are chained through each curve's parameter sensitivity
(the mapping that built the calibration Jacobian) and then through the
stored d parameter / d quote matrices. For a single layer this equals
``-(J^-T) . D . s`` with ``D`` the diagonal of d residual / d quote.
"""

from typing import Dict, Tuple, Union

from ratescal.curves.provider import RatesProvider
from ratescal.schema.quotes import QuoteId
from ratescal.valuation.sensitivity import (
    CurrencyParameterSensitivities,
    MarketQuoteSensitivities,
    PointSensitivities,
)

from .results import CalibrationResult


def _provider(source: Union[CalibrationResult, RatesProvider]) -> RatesProvider:
    return source.provider if isinstance(source, CalibrationResult) else source


def to_parameter_sensitivity(
    point_sensitivities: PointSensitivities,
    source: Union[CalibrationResult, RatesProvider],
) -> CurrencyParameterSensitivities:
    """Point sensitivities expressed per curve parameter."""
    return _provider(source).parameter_sensitivity(point_sensitivities)


def parameter_to_market_quote_sensitivity(
    parameter_sensitivities: CurrencyParameterSensitivities,
    source: Union[CalibrationResult, RatesProvider],
) -> MarketQuoteSensitivities:
    """Parameter sensitivities expressed per market quote.

    Curves without a quote Jacobian, such as seed curves supplied from
    outside any calibration, are skipped.
    """
    provider = _provider(source)
    quote_sensitivities: Dict[Tuple[QuoteId, str], float] = {}
    for sensitivity in parameter_sensitivities:
        jacobian = provider.find_quote_jacobian(sensitivity.curve_name)
        if jacobian is None:
            continue
        values = jacobian.matrix.T @ sensitivity.sensitivity
        for quote_id, value in zip(jacobian.quote_ids, values):
            key = (quote_id, sensitivity.currency)
            quote_sensitivities[key] = quote_sensitivities.get(key, 0.0) + float(value)
    return MarketQuoteSensitivities(quote_sensitivities)


def to_market_quote_sensitivity(
    point_sensitivities: PointSensitivities,
    source: Union[CalibrationResult, RatesProvider],
) -> MarketQuoteSensitivities:
    """
    Sensitivity of a priced quantity to each calibration quote.

    Args:
        point_sensitivities: d value / d discount factor from a pricer
        source: Calibration result or a provider carrying quote Jacobians

    Returns:
        Sensitivities keyed by (quote id, currency)
    """
    return parameter_to_market_quote_sensitivity(
        to_parameter_sensitivity(point_sensitivities, source), source
    )
