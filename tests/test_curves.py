import dataclasses
import math
from datetime import date

import numpy as np
import pytest

from ratescal.conventions import EUR_ESTR, EUR_EURIBOR_3M
from ratescal.curves import (
    CurveDefinition,
    CurveGroupDefinition,
    InterpolatedNodalCurve,
    JacobianCalibrationMatrix,
    RatesProvider,
    ValueType,
)
from ratescal.errors import InvalidCurveGroupError
from ratescal.schema.quotes import QuoteId
from ratescal.valuation import PointSensitivities, PointSensitivity

import input_curves

VALUATION_DATE = date(2024, 6, 3)
TIMES = [0.25, 1.0, 2.0, 5.0]


def _curve(value_type, parameters, interpolator="LINEAR", name="EUR-TEST"):
    return InterpolatedNodalCurve(
        name=name,
        valuation_date=VALUATION_DATE,
        value_type=value_type,
        x_values=TIMES,
        parameters=parameters,
        interpolator=interpolator,
    )


@pytest.fixture(scope="module")
def zero_curve():
    return _curve(ValueType.ZERO_RATE, [0.030, 0.032, 0.031, 0.029], "NATURAL_CUBIC")


@pytest.fixture(scope="module")
def df_curve():
    return _curve(ValueType.DISCOUNT_FACTOR, [0.992, 0.968, 0.94, 0.865], "LOG_LINEAR")


@pytest.fixture(scope="module")
def log_df_curve():
    return _curve(ValueType.LOG_DISCOUNT_FACTOR, [-0.0075, -0.032, -0.062, -0.145])


def test_zero_rate_curve_discount_factor(zero_curve):
    assert zero_curve.discount_factor(1.0) == pytest.approx(math.exp(-0.032))
    assert zero_curve.value(2.0) == pytest.approx(math.exp(-0.062))
    assert zero_curve.zero_rate(5.0) == pytest.approx(0.029)


def test_discount_factor_curves_are_anchored_at_one(df_curve, log_df_curve):
    for curve in (df_curve, log_df_curve):
        assert curve.discount_factor(0.0) == 1.0
        assert curve.discount_factor(VALUATION_DATE) == 1.0
        assert curve.parameter_count == 4
    # log-linear between the anchor and the first node
    assert df_curve.discount_factor(0.125) == pytest.approx(math.sqrt(0.992))
    assert log_df_curve.discount_factor(0.125) == pytest.approx(math.exp(-0.00375))


def test_dates_use_curve_day_count(log_df_curve):
    one_year = date(2025, 6, 3)
    assert log_df_curve.year_fraction(one_year) == pytest.approx(365 / 365)
    assert log_df_curve.discount_factor(one_year) == pytest.approx(math.exp(-0.032))


def test_forward_rate_from_discount_factors(df_curve):
    expected = (0.968 / 0.94 - 1.0) / 1.0
    assert df_curve.forward_rate(1.0, 2.0, 1.0) == pytest.approx(expected)
    with pytest.raises(ValueError):
        df_curve.forward_rate(1.0, 2.0, 0.0)


@pytest.mark.parametrize("fixture_name", ["zero_curve", "df_curve", "log_df_curve"])
def test_parameter_sensitivity_matches_bumped_curve(fixture_name, request):
    curve = request.getfixturevalue(fixture_name)
    shift = 1e-7
    for t in (0.1, 0.6, 1.0, 3.5, 7.0):
        bumped = np.array(
            [
                (
                    curve.with_parameter(i, curve.parameters[i] + shift).discount_factor(t)
                    - curve.with_parameter(i, curve.parameters[i] - shift).discount_factor(t)
                )
                / (2 * shift)
                for i in range(curve.parameter_count)
            ]
        )
        np.testing.assert_allclose(curve.parameter_sensitivity(t), bumped, atol=1e-7)
        assert curve.derivative(t, 1) == pytest.approx(curve.parameter_sensitivity(t)[1])


def test_curve_is_immutable(zero_curve):
    with pytest.raises(ValueError):
        zero_curve.parameters[0] = 0.5
    with pytest.raises(dataclasses.FrozenInstanceError):
        zero_curve.name = "OTHER"

    updated = zero_curve.with_parameter(0, 0.05)
    assert updated.parameters[0] == 0.05
    assert zero_curve.parameters[0] == 0.030


def test_curve_validation():
    with pytest.raises(ValueError):
        _curve(ValueType.ZERO_RATE, [0.01, 0.02])
    with pytest.raises(ValueError, match="first node time"):
        InterpolatedNodalCurve(
            "BAD", VALUATION_DATE, ValueType.DISCOUNT_FACTOR, [0.0, 1.0], [1.0, 0.97]
        )
    with pytest.raises(IndexError):
        _curve(ValueType.ZERO_RATE, [0.03] * 4).derivative(1.0, 4)
    with pytest.raises(ValueError):
        _curve(ValueType.ZERO_RATE, [0.03] * 4).with_parameters([0.03])


def test_curve_definition_rejects_log_interpolation_of_log_discount_factors():
    node = input_curves.two_node_definition().nodes[0]
    with pytest.raises(ValueError, match="cannot interpolate log discount factors"):
        CurveDefinition("BAD", ValueType.LOG_DISCOUNT_FACTOR, [node], interpolator="LOG_LINEAR")
    with pytest.raises(ValueError):
        CurveDefinition("EMPTY", ValueType.ZERO_RATE, [])
    with pytest.raises(TypeError):
        CurveDefinition("BAD", ValueType.ZERO_RATE, ["DEP-1D"])


def test_zero_rate_curves_default_to_linear_interpolation():
    node = input_curves.two_node_definition().nodes[0]
    with pytest.raises(ValueError, match="cannot interpolate zero rates"):
        CurveDefinition("BAD", ValueType.ZERO_RATE, [node], interpolator="LOG_NATURAL_CUBIC")
    assert CurveDefinition("Z", ValueType.ZERO_RATE, [node]).interpolator == "LINEAR"
    assert CurveDefinition("DF", ValueType.DISCOUNT_FACTOR, [node]).interpolator == "LOG_LINEAR"
    assert CurveDefinition("DF", ValueType.DISCOUNT_FACTOR, [node], "linear").interpolator == "LINEAR"

    curve = InterpolatedNodalCurve(
        "EUR-NEG", VALUATION_DATE, ValueType.ZERO_RATE, TIMES, [-0.005, -0.004, -0.002, 0.001]
    )
    assert curve.interpolator == "LINEAR"
    assert curve.zero_rate(0.5) == pytest.approx(-0.005 + (-0.004 + 0.005) / 3)
    assert curve.discount_factor(1.0) == pytest.approx(math.exp(0.004))


def test_curve_definition_metadata_and_curve(ref_data):
    definition = input_curves.estr_definition()
    metadata = definition.metadata(input_curves.CURVE_DATE, ref_data)
    assert [m.label for m in metadata] == ["1D", "6M", "1Y", "2Y", "5Y", "10Y"]
    assert metadata[0].date == date(2024, 6, 4)
    assert metadata[1].date == date(2024, 12, 5)

    curve = definition.curve(input_curves.CURVE_DATE, metadata, np.linspace(0.999, 0.75, 6))
    assert curve.name == "EUR-ESTR"
    assert curve.node_dates == tuple(m.date for m in metadata)
    assert curve.x_values[0] == pytest.approx(1 / 365)


def test_group_definition_validates_mappings():
    definition = input_curves.estr_definition()
    with pytest.raises(InvalidCurveGroupError, match="duplicate"):
        CurveGroupDefinition("DUP", [definition, definition])
    with pytest.raises(InvalidCurveGroupError, match="not in the group"):
        CurveGroupDefinition("BAD", [definition], discount_curves={"EUR": "EUR-OTHER"})

    group = input_curves.eur_group()
    assert group.find_forward_curve_name(EUR_EURIBOR_3M) == "EUR-EURIBOR-3M"
    assert group.find_forward_curve_name("EUR-ESTR") == "EUR-ESTR"
    assert group.find_discount_curve_name("USD") is None
    assert dict(group.discount_curves_for("EUR-ESTR")) == {"EUR": "EUR-ESTR"}
    assert dict(group.forward_curves_for("EUR-ESTR")) == {"EUR-ESTR": "EUR-ESTR"}
    assert group.find_curve_definition("EUR-EURIBOR-6M").value_type == ValueType.LOG_DISCOUNT_FACTOR


def test_rates_provider_lookups(df_curve, log_df_curve):
    other = _curve(ValueType.ZERO_RATE, [0.03] * 4, name="EUR-FWD")
    provider = RatesProvider(
        VALUATION_DATE,
        curves={"EUR-TEST": df_curve, "EUR-FWD": other},
        discount_curves={"EUR": "EUR-TEST"},
        forward_curves={EUR_ESTR: "EUR-TEST", EUR_EURIBOR_3M: "EUR-FWD"},
    )
    assert provider.discount_curve("EUR") is df_curve
    assert provider.forward_curve("EUR-EURIBOR-3M") is other
    assert provider.discount_factor("EUR", 1.0) == pytest.approx(0.968)
    assert provider.find_forward_curve_name("EUR-EURIBOR-6M") is None
    with pytest.raises(ValueError, match="No discount curve"):
        provider.discount_curve("USD")
    with pytest.raises(ValueError):
        RatesProvider(VALUATION_DATE, curves={"EUR-TEST": df_curve}, discount_curves={"EUR": "X"})
    with pytest.raises(ValueError):
        RatesProvider(VALUATION_DATE, curves={"WRONG-NAME": df_curve})

    with pytest.raises(TypeError):
        provider.curves["EUR-NEW"] = log_df_curve
    extended = provider.with_curves({"EUR-TEST": log_df_curve})
    assert extended.curve("EUR-TEST") is log_df_curve
    assert provider.curve("EUR-TEST") is df_curve


def test_provider_parameter_sensitivity_merges_points(log_df_curve):
    provider = RatesProvider(
        VALUATION_DATE, curves={"EUR-TEST": log_df_curve}, discount_curves={"EUR": "EUR-TEST"}
    )
    points = PointSensitivities.of(
        PointSensitivity("EUR-TEST", "EUR", date(2025, 6, 3), 2.0),
        PointSensitivity("EUR-TEST", "EUR", date(2025, 6, 3), -0.5),
        PointSensitivity("EUR-TEST", "EUR", date(2026, 6, 3), 1.0),
    )
    result = provider.parameter_sensitivity(points).get("EUR-TEST", "EUR")
    expected = 1.5 * log_df_curve.parameter_sensitivity(date(2025, 6, 3)) + (
        log_df_curve.parameter_sensitivity(date(2026, 6, 3))
    )
    np.testing.assert_allclose(result.sensitivity, expected)


def test_jacobian_calibration_matrix_expansion():
    jacobian = JacobianCalibrationMatrix("EUR-TEST", ("B", "A"), [[1.0, 2.0], [3.0, 4.0]])
    assert jacobian.quote_ids == (QuoteId("B"), QuoteId("A"))
    expanded = jacobian.expanded([QuoteId("A"), QuoteId("C"), QuoteId("B")])
    np.testing.assert_array_equal(expanded, [[2.0, 0.0, 1.0], [4.0, 0.0, 3.0]])
    with pytest.raises(ValueError):
        JacobianCalibrationMatrix("EUR-TEST", ("A",), [[1.0, 2.0]])
