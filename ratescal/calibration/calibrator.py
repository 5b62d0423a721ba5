"""
Curve group calibrator: the entry point of curve calibration.

A group is split into layers by dependency. Each layer is solved with one
joint Newton run, after which its curves join the provider used to price the
next layer. The quote Jacobian of every calibrated curve covers its own
quotes and those of the curves it was calibrated against.
"""

import logging
from functools import partial
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from ratescal.conventions.calendars import ReferenceData
from ratescal.curves.definition import CurveDefinition, CurveGroupDefinition
from ratescal.curves.jacobian import JacobianCalibrationMatrix
from ratescal.curves.provider import RatesProvider
from ratescal.errors import InvalidCurveGroupError, SingularJacobianError
from ratescal.schema.quotes import MarketData, QuoteId

from .assembler import LayerState, assemble, assemble_external
from .builder import CalibrationInstrument, build
from .config import CalibrationConfig, CalibrationMeasure
from .orchestrator import layer_curves, order_groups
from .results import CalibrationJacobian, CalibrationResult
from .solver import NewtonSolver

logger = logging.getLogger(__name__)


class CurveCalibrator:
    """Calibrates curve groups to market data."""

    def __init__(self, config: Optional[CalibrationConfig] = None):
        self.config = config or CalibrationConfig()

    def calibrate(
        self,
        group: CurveGroupDefinition,
        market_data: MarketData,
        ref_data: ReferenceData,
        seed: Optional[RatesProvider] = None,
    ) -> CalibrationResult:
        """
        Calibrate every curve of a group.

        Args:
            group: Curve group definition
            market_data: Quotes on the valuation date
            ref_data: Holiday calendars
            seed: Known curves the group is calibrated against

        Returns:
            Calibration result; its provider holds the seed curves and the
            calibrated curves

        Raises:
            CalibrationError: Any calibration failure aborts the whole group
        """
        valuation_date = market_data.valuation_date
        if seed is None:
            seed = RatesProvider.empty(valuation_date)
        elif seed.valuation_date != valuation_date:
            raise InvalidCurveGroupError(
                f"Seed curves are for {seed.valuation_date}, market data for {valuation_date}"
            )

        layers = layer_curves(group, seed)
        if self.config.verbose:
            logger.info(
                "Calibrating group %s on %s in %d layer(s): %s",
                group.name,
                valuation_date,
                len(layers),
                [[d.name for d in layer] for layer in layers],
            )

        # Every instrument is built before solving so missing quotes fail fast
        instruments: Dict[str, Tuple[CalibrationInstrument, ...]] = {}
        for layer in layers:
            for definition in layer:
                instruments[definition.name] = self._build_instruments(
                    definition, market_data, ref_data
                )

        provider = seed
        jacobians: List[CalibrationJacobian] = []
        quote_jacobians: Dict[str, JacobianCalibrationMatrix] = {}
        total_iterations = 0
        for layer in layers:
            provider, jacobian, layer_quote_jacobians = self._calibrate_layer(
                group, layer, provider, instruments, ref_data
            )
            jacobians.append(jacobian)
            quote_jacobians.update(layer_quote_jacobians)
            total_iterations += jacobian.iterations

        if self.config.verbose:
            logger.info(
                "Calibrated group %s: %d curve(s) in %d iteration(s)",
                group.name,
                len(quote_jacobians),
                total_iterations,
            )
        return CalibrationResult(
            group_name=group.name,
            provider=provider,
            jacobians=tuple(jacobians),
            quote_jacobians=quote_jacobians,
            instruments=instruments,
            iterations=total_iterations,
        )

    def calibrate_groups(
        self,
        groups: Sequence[CurveGroupDefinition],
        market_data: MarketData,
        ref_data: ReferenceData,
        seed: Optional[RatesProvider] = None,
    ) -> Dict[str, CalibrationResult]:
        """
        Calibrate several groups, each after the groups providing its curves.

        Returns:
            Results by group name in calibration order; each result's provider
            also holds the curves of the groups calibrated before it
        """
        results: Dict[str, CalibrationResult] = {}
        provider = seed
        for group in order_groups(groups, seed):
            result = self.calibrate(group, market_data, ref_data, provider)
            results[group.name] = result
            provider = result.provider
        return results

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _build_instruments(
        self,
        definition: CurveDefinition,
        market_data: MarketData,
        ref_data: ReferenceData,
    ) -> Tuple[CalibrationInstrument, ...]:
        valuation_date = market_data.valuation_date
        # Validates node date order before any trade is priced
        definition.metadata(valuation_date, ref_data)
        time_axis = partial(definition.time, valuation_date)
        return tuple(
            build(node, valuation_date, market_data, ref_data, definition.value_type, time_axis)
            for node in definition.nodes
        )

    def _calibrate_layer(
        self,
        group: CurveGroupDefinition,
        layer: Tuple[CurveDefinition, ...],
        base_provider: RatesProvider,
        instruments: Dict[str, Tuple[CalibrationInstrument, ...]],
        ref_data: ReferenceData,
    ) -> Tuple[RatesProvider, CalibrationJacobian, Dict[str, JacobianCalibrationMatrix]]:
        layer_instruments = [i for d in layer for i in instruments[d.name]]
        state = LayerState(
            base_provider=base_provider,
            definitions=layer,
            metadata=tuple(tuple(i.metadata for i in instruments[d.name]) for d in layer),
            discount_curves=group.discount_curves,
            forward_curves=group.forward_curves,
        )
        measure = self.config.measure
        initial = np.array([i.initial_guess for i in layer_instruments])

        solver = NewtonSolver(self.config)
        solution = solver.solve(
            lambda parameters: assemble(state, parameters, layer_instruments, measure),
            initial,
        )
        if self.config.verbose:
            logger.info(
                "Layer %s converged in %d iteration(s), max |residual| = %.3e",
                list(state.curve_names),
                solution.iterations,
                float(np.max(np.abs(solution.residuals))),
            )

        quote_jacobians = self._quote_jacobians(
            state, solution.parameters, layer_instruments, base_provider
        )
        provider = state.provider(solution.parameters).with_curves({}, quote_jacobians=quote_jacobians)
        jacobian = CalibrationJacobian(
            curve_order=tuple(zip(state.curve_names, state.parameter_counts)),
            matrix=solution.jacobian,
            iterations=solution.iterations,
        )
        return provider, jacobian, quote_jacobians

    def _quote_jacobians(
        self,
        state: LayerState,
        parameters: np.ndarray,
        instruments: List[CalibrationInstrument],
        base_provider: RatesProvider,
    ) -> Dict[str, JacobianCalibrationMatrix]:
        """d parameter / d quote for each curve of a solved layer.

        The parameters at the solution do not depend on the measure, so the
        par spread residuals are used whatever measure drove the solve.
        """
        jacobian, external = assemble_external(
            state, parameters, instruments, CalibrationMeasure.PAR_SPREAD
        )

        # Quotes of earlier curves first, then this layer's quotes
        quote_ids: List[QuoteId] = []
        upstream = []
        for curve_name in base_provider.curve_names:
            if curve_name not in external:
                continue
            upstream_jacobian = base_provider.find_quote_jacobian(curve_name)
            if upstream_jacobian is None:
                continue  # seed curve without calibration history
            upstream.append((external[curve_name], upstream_jacobian))
            for quote_id in upstream_jacobian.quote_ids:
                if quote_id not in quote_ids:
                    quote_ids.append(quote_id)
        for instrument in instruments:
            if instrument.quote_id not in quote_ids:
                quote_ids.append(instrument.quote_id)

        position = {q: j for j, q in enumerate(quote_ids)}
        residual_by_quote = np.zeros((len(instruments), len(quote_ids)))
        for k, instrument in enumerate(instruments):
            residual_by_quote[k, position[instrument.quote_id]] += instrument.quote_derivative
        for residual_by_parameter, upstream_jacobian in upstream:
            residual_by_quote += residual_by_parameter @ upstream_jacobian.expanded(quote_ids)

        try:
            parameter_by_quote = -np.linalg.solve(jacobian, residual_by_quote)
        except np.linalg.LinAlgError as err:
            raise SingularJacobianError(f"Par spread Jacobian is singular: {err}") from err

        result = {}
        for name, block in zip(state.curve_names, np.split(
            parameter_by_quote, np.cumsum(state.parameter_counts)[:-1]
        )):
            result[name] = JacobianCalibrationMatrix(name, tuple(quote_ids), block)
        return result
