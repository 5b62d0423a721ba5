import logging
from datetime import date

import numpy as np
import pytest

from ratescal.calibration import CalibrationOutcome, CurveCalibrator, calibrate_scenarios
from ratescal.errors import InvalidCurveGroupError, MissingMarketDataError
from ratescal.schema.quotes import MarketData

import input_curves


@pytest.fixture
def scenarios():
    base = input_curves.two_node_market_data()
    return [
        base,
        base.without("DEP-1D"),
        base.with_bumped("OIS-1Y", 0.0001),
    ]


def test_failed_scenario_does_not_affect_the_others(caplog, scenarios, two_node_group, two_node_result, ref_data):
    with caplog.at_level(logging.WARNING, logger="ratescal.calibration.scenarios"):
        outcomes = calibrate_scenarios(two_node_group, scenarios, ref_data, max_workers=2)

    assert [outcome.scenario for outcome in outcomes] == [0, 1, 2]
    assert [outcome.is_success for outcome in outcomes] == [True, False, True]

    np.testing.assert_array_equal(
        outcomes[0].get().curve("EUR-DSC").parameters,
        two_node_result.curve("EUR-DSC").parameters,
    )
    alpha = 366 / 360
    assert outcomes[2].get().curve("EUR-DSC").parameters[1] == pytest.approx(
        -np.log(1.0 + 0.0101 * alpha), rel=1e-10
    )

    failed = outcomes[1]
    assert isinstance(failed.error, MissingMarketDataError)
    assert failed.result is None
    with pytest.raises(MissingMarketDataError, match="DEP-1D"):
        failed.get()
    assert "Scenario 1 of group EUR-SINGLE failed" in caplog.text


def test_scenarios_match_sequential_calibration(scenarios, two_node_group, ref_data):
    calibrator = CurveCalibrator()
    outcomes = calibrate_scenarios(two_node_group, scenarios[::2], ref_data, calibrator=calibrator)
    for outcome, market_data in zip(outcomes, scenarios[::2]):
        expected = calibrator.calibrate(two_node_group, market_data, ref_data)
        np.testing.assert_array_equal(
            outcome.get().quote_jacobians["EUR-DSC"].matrix,
            expected.quote_jacobians["EUR-DSC"].matrix,
        )


def test_outcome_of_empty_batch(two_node_group, ref_data):
    assert calibrate_scenarios(two_node_group, [], ref_data) == []
    assert CalibrationOutcome(3).is_success


def test_seeded_scenario_on_another_date_fails_alone(eur_market_data, ref_data):
    calibrator = CurveCalibrator()
    ois = calibrator.calibrate(input_curves.estr_group(), eur_market_data, ref_data)
    next_day = MarketData(date(2024, 6, 4), eur_market_data.values)

    outcomes = calibrate_scenarios(
        input_curves.euribor_3m_group(),
        [eur_market_data, next_day, eur_market_data],
        ref_data,
        calibrator=calibrator,
        seed=ois.provider,
    )
    assert [outcome.is_success for outcome in outcomes] == [True, False, True]
    assert isinstance(outcomes[1].error, InvalidCurveGroupError)
    np.testing.assert_array_equal(
        outcomes[0].get().curve("EUR-EURIBOR-3M").parameters,
        outcomes[2].get().curve("EUR-EURIBOR-3M").parameters,
    )


def test_unexpected_scenario_error_is_captured(caplog, two_node_group, ref_data):
    base = input_curves.two_node_market_data()
    with caplog.at_level(logging.ERROR, logger="ratescal.calibration.scenarios"):
        outcomes = calibrate_scenarios(two_node_group, [base, None], ref_data)

    assert [outcome.is_success for outcome in outcomes] == [True, False]
    assert isinstance(outcomes[1].error, AttributeError)
    assert "Scenario 1 of group EUR-SINGLE failed unexpectedly" in caplog.text
