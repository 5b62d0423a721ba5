"""
Scenario batch calibration.

Each scenario is an independent market data snapshot calibrated on a worker
thread. A calibration failure is captured in that scenario's outcome and does
not affect the others.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import List, Optional, Sequence

from ratescal.conventions.calendars import ReferenceData
from ratescal.curves.definition import CurveGroupDefinition
from ratescal.curves.provider import RatesProvider
from ratescal.errors import CalibrationError
from ratescal.schema.quotes import MarketData

from .calibrator import CurveCalibrator
from .results import CalibrationResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CalibrationOutcome:
    """Result of one scenario: either a calibration result or the error that aborted it."""

    scenario: int
    result: Optional[CalibrationResult] = None
    error: Optional[Exception] = None

    @property
    def is_success(self) -> bool:
        return self.error is None

    def get(self) -> CalibrationResult:
        """The calibration result, re-raising the scenario's error on failure."""
        if self.error is not None:
            raise self.error
        return self.result


def _calibrate_one(
    calibrator: CurveCalibrator,
    scenario: int,
    group: CurveGroupDefinition,
    market_data: MarketData,
    ref_data: ReferenceData,
    seed: Optional[RatesProvider],
) -> CalibrationOutcome:
    try:
        result = calibrator.calibrate(group, market_data, ref_data, seed)
    except CalibrationError as err:
        logger.warning("Scenario %d of group %s failed: %s", scenario, group.name, err)
        return CalibrationOutcome(scenario, error=err)
    except Exception as err:
        logger.exception("Scenario %d of group %s failed unexpectedly", scenario, group.name)
        return CalibrationOutcome(scenario, error=err)
    return CalibrationOutcome(scenario, result=result)


def calibrate_scenarios(
    group: CurveGroupDefinition,
    scenarios: Sequence[MarketData],
    ref_data: ReferenceData,
    calibrator: Optional[CurveCalibrator] = None,
    seed: Optional[RatesProvider] = None,
    max_workers: Optional[int] = None,
) -> List[CalibrationOutcome]:
    """
    Calibrate a group once per market data scenario.

    Args:
        group: Curve group definition
        scenarios: One market data snapshot per scenario
        ref_data: Holiday calendars
        calibrator: Calibrator to use, default configuration if omitted
        seed: Known curves shared by all scenarios
        max_workers: Worker thread count, executor default if omitted

    Returns:
        One outcome per scenario, in scenario order
    """
    calibrator = calibrator or CurveCalibrator()
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = [
            executor.submit(_calibrate_one, calibrator, i, group, market_data, ref_data, seed)
            for i, market_data in enumerate(scenarios)
        ]
        return [future.result() for future in futures]
