import math
from datetime import date

import pytest

from ratescal.calibration import build, initial_guess
from ratescal.conventions import EUR_ESTR, EUR_EURIBOR_3M, EUR_EURIBOR_6M
from ratescal.curves import (
    AbsoluteIborFutureCurveNode,
    CurveNodeDate,
    CurveNodeDateType,
    FixedIborSwapCurveNode,
    FixedOvernightSwapCurveNode,
    FraCurveNode,
    IborFixingDepositCurveNode,
    IborFutureCurveNode,
    IborIborSwapCurveNode,
    TermDepositCurveNode,
    ValueType,
)
from ratescal.errors import InvalidCurveNodeError, MissingMarketDataError
from ratescal.instruments import (
    EUR_DEPOSIT_T2,
    EUR_EURIBOR_3M_EURIBOR_6M,
    EUR_EURIBOR_3M_IMM_FUTURE,
    EUR_FIXED_1Y_ESTR_OIS,
    EUR_FIXED_1Y_EURIBOR_3M,
    EURIBOR_3M_FIXING_DEPOSIT,
    EURIBOR_3M_FRA,
)
from ratescal.schema.quotes import MarketData, QuoteId

from input_curves import CURVE_DATE

MARKET_DATA = MarketData(
    CURVE_DATE,
    {
        "DEP-3M": 0.037,
        "FIX-3M": 0.0375,
        "FRA-3X6": 0.036,
        "FUT-1": 96.60,
        "OIS-2Y": 0.034,
        "IRS-5Y": 0.030,
        "BASIS-5Y": 0.0011,
    },
)


def _curve_time(dt):
    return (dt - CURVE_DATE).days / 365.0


def test_term_deposit_resolves_from_spot(ref_data):
    node = TermDepositCurveNode("DEP-3M", EUR_DEPOSIT_T2, "3M", additional_spread=0.0005)
    trade = node.trade(CURVE_DATE, MARKET_DATA, ref_data)
    assert trade.start_date == date(2024, 6, 5)
    assert trade.end_date == date(2024, 9, 5)
    assert trade.year_fraction == pytest.approx(92 / 360)
    assert trade.rate == pytest.approx(0.0375)
    assert node.quote_id == QuoteId("DEP-3M")
    requirements = node.requirements()
    assert requirements.discount_currencies == ("EUR",)
    assert requirements.forward_indices == ()


def test_fixing_deposit_and_fra_follow_the_index(ref_data):
    fixing = IborFixingDepositCurveNode("FIX-3M", EURIBOR_3M_FIXING_DEPOSIT)
    trade = fixing.trade(CURVE_DATE, MARKET_DATA, ref_data)
    assert (trade.fixing_date, trade.start_date, trade.end_date) == (
        date(2024, 6, 3), date(2024, 6, 5), date(2024, 9, 5)
    )
    assert fixing.metadata(CURVE_DATE, ref_data).label == "3M"

    fra = FraCurveNode("FRA-3X6", EURIBOR_3M_FRA, "3M")
    trade = fra.trade(CURVE_DATE, MARKET_DATA, ref_data)
    assert (trade.start_date, trade.end_date) == (date(2024, 9, 5), date(2024, 12, 5))
    assert trade.fixing_date == date(2024, 9, 3)
    assert trade.last_fixing_end == date(2024, 12, 5)
    assert fra.metadata(CURVE_DATE, ref_data).label == "3x6"
    assert fra.requirements().forward_indices == (EUR_EURIBOR_3M,)


def test_future_node_uses_imm_dates_and_price_quotes(ref_data):
    node = IborFutureCurveNode("FUT-1", EUR_EURIBOR_3M_IMM_FUTURE, "6M", 1)
    trade = node.trade(CURVE_DATE, MARKET_DATA, ref_data)
    assert trade.start_date == date(2024, 12, 18)
    assert trade.end_date == date(2025, 3, 18)
    assert trade.reference_price == pytest.approx(0.966)
    assert node.approximate_rate(MARKET_DATA) == pytest.approx(0.034)
    assert node.quote_derivative == -0.01
    assert node.requirements().discount_currencies == ()
    assert str(node.metadata(CURVE_DATE, ref_data)) == "6M+1"


def test_future_node_for_a_contract_month(ref_data):
    node = AbsoluteIborFutureCurveNode("FUT-1", EUR_EURIBOR_3M_IMM_FUTURE, "2025-3")
    assert node.year_month == "2025-03"
    trade = node.trade(CURVE_DATE, MARKET_DATA, ref_data)
    assert trade.start_date == date(2025, 3, 19)
    assert trade.end_date == date(2025, 6, 19)
    assert trade.last_trade_date == date(2025, 3, 17)
    assert node.approximate_rate(MARKET_DATA) == pytest.approx(0.034)
    metadata = node.metadata(CURVE_DATE, ref_data)
    assert (metadata.date, metadata.label) == (date(2025, 6, 19), "2025-03")

    for year_month in ("2025-04", "March 2025"):
        with pytest.raises(InvalidCurveNodeError):
            AbsoluteIborFutureCurveNode("FUT-1", EUR_EURIBOR_3M_IMM_FUTURE, year_month)

    expired = AbsoluteIborFutureCurveNode("FUT-1", EUR_EURIBOR_3M_IMM_FUTURE, "2024-03")
    with pytest.raises(InvalidCurveNodeError, match="stopped trading"):
        expired.trade(CURVE_DATE, MARKET_DATA, ref_data)


def test_future_node_last_fixing_date_is_last_trade_date(ref_data):
    relative = IborFutureCurveNode(
        "FUT-1", EUR_EURIBOR_3M_IMM_FUTURE, "6M", 1, date=CurveNodeDate.LAST_FIXING
    )
    assert relative.node_date(CURVE_DATE, ref_data) == date(2024, 12, 16)

    absolute = AbsoluteIborFutureCurveNode(
        "FUT-1", EUR_EURIBOR_3M_IMM_FUTURE, "2025-03", date=CurveNodeDate.LAST_FIXING
    )
    trade = absolute.trade(CURVE_DATE, MARKET_DATA, ref_data)
    assert absolute.node_date(CURVE_DATE, ref_data) == trade.last_trade_date
    assert trade.last_fixing_end == trade.end_date


def test_swap_nodes_resolve_both_legs(ref_data):
    ois = FixedOvernightSwapCurveNode("OIS-2Y", EUR_FIXED_1Y_ESTR_OIS, "2Y")
    trade = ois.trade(CURVE_DATE, MARKET_DATA, ref_data)
    assert len(trade.fixed_leg.periods) == 2
    assert trade.end_date == date(2026, 6, 5)
    period = trade.floating_leg.periods[0]
    assert (period.fixing_start, period.fixing_end) == (period.accrual_start, period.accrual_end)
    assert period.payment_date == date(2025, 6, 6)
    assert ois.requirements().forward_indices == (EUR_ESTR,)

    irs = FixedIborSwapCurveNode("IRS-5Y", EUR_FIXED_1Y_EURIBOR_3M, "5Y")
    trade = irs.trade(CURVE_DATE, MARKET_DATA, ref_data)
    assert len(trade.fixed_leg.periods) == 5
    assert len(trade.floating_leg.periods) == 20
    assert trade.fixed_rate == pytest.approx(0.030)
    assert trade.last_fixing_end == date(2029, 6, 5)

    basis = IborIborSwapCurveNode("BASIS-5Y", EUR_EURIBOR_3M_EURIBOR_6M, "5Y")
    trade = basis.trade(CURVE_DATE, MARKET_DATA, ref_data)
    assert len(trade.spread_leg.periods) == 20
    assert len(trade.flat_leg.periods) == 10
    assert basis.requirements().forward_indices == (EUR_EURIBOR_3M, EUR_EURIBOR_6M)


def test_forward_starting_swap_label(ref_data):
    node = FixedIborSwapCurveNode("IRS-5Y", EUR_FIXED_1Y_EURIBOR_3M, "5Y", period_to_start="1Y")
    metadata = node.metadata(CURVE_DATE, ref_data)
    assert metadata.label == "1Yx5Y"
    assert metadata.date == date(2030, 6, 5)


def test_node_date_rules(ref_data):
    fixed = TermDepositCurveNode(
        "DEP-3M", EUR_DEPOSIT_T2, "3M", date=CurveNodeDate.of(date(2024, 10, 1)), label="DEP"
    )
    assert fixed.metadata(CURVE_DATE, ref_data).date == date(2024, 10, 1)
    assert str(fixed.metadata(CURVE_DATE, ref_data)) == "DEP"

    last_fixing = FixedIborSwapCurveNode(
        "IRS-5Y", EUR_FIXED_1Y_EURIBOR_3M, "5Y", date=CurveNodeDate.LAST_FIXING
    )
    assert last_fixing.node_date(CURVE_DATE, ref_data) == date(2029, 6, 5)

    no_fixings = TermDepositCurveNode("DEP-3M", EUR_DEPOSIT_T2, "3M", date=CurveNodeDate.LAST_FIXING)
    with pytest.raises(InvalidCurveNodeError, match="LAST_FIXING"):
        no_fixings.node_date(CURVE_DATE, ref_data)

    stale = TermDepositCurveNode("DEP-3M", EUR_DEPOSIT_T2, "3M", date=CurveNodeDate.of(CURVE_DATE))
    with pytest.raises(InvalidCurveNodeError, match="not after valuation date"):
        stale.node_date(CURVE_DATE, ref_data)


def test_invalid_nodes_are_rejected():
    with pytest.raises(InvalidCurveNodeError):
        TermDepositCurveNode("DEP", EUR_DEPOSIT_T2, "3X")
    with pytest.raises(InvalidCurveNodeError, match="overnight index"):
        FixedIborSwapCurveNode("IRS", EUR_FIXED_1Y_ESTR_OIS, "5Y")
    with pytest.raises(InvalidCurveNodeError, match="term index"):
        FixedOvernightSwapCurveNode("OIS", EUR_FIXED_1Y_EURIBOR_3M, "5Y")
    with pytest.raises(InvalidCurveNodeError):
        IborFutureCurveNode("FUT", EUR_EURIBOR_3M_IMM_FUTURE, "6M", 0)
    with pytest.raises(InvalidCurveNodeError):
        TermDepositCurveNode("DEP", EUR_DEPOSIT_T2, "3M", date=CurveNodeDate(CurveNodeDateType.FIXED))


def test_missing_quote_raises(ref_data):
    node = TermDepositCurveNode("DEP-6M", EUR_DEPOSIT_T2, "6M")
    with pytest.raises(MissingMarketDataError) as excinfo:
        node.trade(CURVE_DATE, MARKET_DATA, ref_data)
    assert excinfo.value.quote_id == QuoteId("DEP-6M")
    assert isinstance(excinfo.value, KeyError)


@pytest.mark.parametrize(
    "value_type, expected",
    [
        (ValueType.ZERO_RATE, 0.03),
        (ValueType.DISCOUNT_FACTOR, math.exp(-0.06)),
        (ValueType.LOG_DISCOUNT_FACTOR, -0.06),
    ],
)
def test_initial_guess_from_flat_rate(value_type, expected):
    assert initial_guess(value_type, 0.03, 2.0) == pytest.approx(expected)


def test_build_instrument(ref_data):
    node = IborFutureCurveNode("FUT-1", EUR_EURIBOR_3M_IMM_FUTURE, "6M", 1)
    instrument = build(
        node, CURVE_DATE, MARKET_DATA, ref_data, ValueType.LOG_DISCOUNT_FACTOR, _curve_time
    )
    assert instrument.quote_id == QuoteId("FUT-1")
    assert instrument.quote_derivative == -0.01
    assert instrument.metadata.date == date(2025, 3, 18)
    assert instrument.initial_guess == pytest.approx(-0.034 * _curve_time(date(2025, 3, 18)))
    assert instrument.node is node
