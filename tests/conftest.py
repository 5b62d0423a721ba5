import pytest

from ratescal.calibration import CurveCalibrator
from ratescal.conventions import ReferenceData

import input_curves


@pytest.fixture(scope="session")
def ref_data():
    return ReferenceData.standard()


@pytest.fixture(scope="module")
def calibrator():
    return CurveCalibrator()


@pytest.fixture(scope="module")
def two_node_group():
    return input_curves.two_node_group()


@pytest.fixture(scope="module")
def two_node_market_data():
    return input_curves.two_node_market_data()


@pytest.fixture(scope="module")
def two_node_result(calibrator, two_node_group, two_node_market_data, ref_data):
    return calibrator.calibrate(two_node_group, two_node_market_data, ref_data)


@pytest.fixture(scope="module")
def eur_group():
    return input_curves.eur_group()


@pytest.fixture(scope="module")
def eur_market_data():
    return input_curves.eur_market_data()


@pytest.fixture(scope="module")
def eur_result(calibrator, eur_group, eur_market_data, ref_data):
    return calibrator.calibrate(eur_group, eur_market_data, ref_data)
