from datetime import date

import numpy as np
import pytest

from ratescal.curves.base import DatedParameterMetadata
from ratescal.schema.quotes import QuoteId
from ratescal.valuation.sensitivity import (
    CurrencyParameterSensitivities,
    CurrencyParameterSensitivity,
    MarketQuoteSensitivities,
    PointSensitivities,
    PointSensitivity,
)

D1, D2 = date(2025, 1, 15), date(2026, 1, 15)


def test_point_sensitivities_normalize_deterministically():
    points = PointSensitivities.of(
        PointSensitivity("B", "EUR", D1, 1.0),
        PointSensitivity("A", "EUR", D2, 2.0),
        PointSensitivity("B", "EUR", D1, 0.5),
    )
    normalized = points.normalized()
    assert [(s.curve_name, s.date, s.sensitivity) for s in normalized] == [
        ("A", D2, 2.0),
        ("B", D1, 1.5),
    ]
    assert points.curve_names() == ["B", "A"]
    assert len(points.for_curve("B")) == 2
    assert [s.sensitivity for s in (points + points).multiplied_by(-1).normalized()] == [-4.0, -3.0]


def test_parameter_sensitivities_merge_by_curve_and_currency():
    metadata = (DatedParameterMetadata(D1, "1Y"), DatedParameterMetadata(D2, "2Y"))
    sensitivities = CurrencyParameterSensitivities(
        [
            CurrencyParameterSensitivity("A", "EUR", [1.0, 2.0], metadata),
            CurrencyParameterSensitivity("A", "EUR", [0.5, 0.5], metadata),
            CurrencyParameterSensitivity("B", "USD", [3.0]),
        ]
    )
    assert len(sensitivities) == 2
    np.testing.assert_array_equal(sensitivities.get("A", "EUR").sensitivity, [1.5, 2.5])
    assert sensitivities.total() == {"EUR": 4.0, "USD": 3.0}
    assert sensitivities.find("A", "USD") is None
    with pytest.raises(KeyError):
        sensitivities.get("A", "USD")

    frame = sensitivities.to_frame()
    assert list(frame["label"]) == ["1Y", "2Y", ""]
    assert frame["sensitivity"].sum() == pytest.approx(7.0)


def test_market_quote_sensitivities():
    sensitivities = MarketQuoteSensitivities({(QuoteId("B"), "EUR"): 2.0, (QuoteId("A"), "EUR"): 1.0})
    assert sensitivities.get("A", "EUR") == 1.0
    assert sensitivities.get("C", "EUR") == 0.0
    assert sensitivities.quote_ids() == [QuoteId("A"), QuoteId("B")]

    combined = sensitivities.combined_with(MarketQuoteSensitivities({(QuoteId("A"), "USD"): 5.0}))
    assert combined.total() == 8.0
    assert combined.total("EUR") == 3.0
    assert list(combined.to_frame()["quote_id"]) == ["A", "A", "B"]
