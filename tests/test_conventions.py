from datetime import date

import pytest

from ratescal.business_calendar import add_tenor, get_spot_date, parse_tenor, tenor_to_months
from ratescal.conventions import (
    ACT_360,
    ACT_365F,
    THIRTY_360E,
    CalendarType,
    Frequency,
    ReferenceData,
    get_day_count_convention,
    get_rate_index,
)
from ratescal.instruments import (
    DateSequence,
    imm_date_in_month,
    next_imm_date,
    nth_imm_date,
    third_wednesday,
)
from ratescal.schedule import ScheduleGenerator, StubType


def test_day_counts():
    start, end = date(2024, 1, 1), date(2025, 1, 1)
    assert ACT_360.year_fraction(start, end) == pytest.approx(366 / 360)
    assert ACT_365F.year_fraction(start, end) == pytest.approx(366 / 365)
    assert THIRTY_360E.year_fraction(date(2024, 1, 31), date(2024, 2, 29)) == pytest.approx(
        29 / 360
    )
    assert get_day_count_convention("actual/360") is ACT_360
    with pytest.raises(ValueError, match="Unknown day count"):
        get_day_count_convention("BUS/252")


def test_rate_index_lookup():
    assert get_rate_index("eur-euribor-3m").tenor_months == 3
    assert get_rate_index("EUR-ESTR").is_overnight
    with pytest.raises(ValueError):
        get_rate_index("EUR-EONIA")


def test_reference_data_calendars(ref_data):
    target = ref_data.calendar(CalendarType.TARGET)
    assert not target.is_business_day(date(2024, 12, 25))
    assert target.is_business_day(date(2024, 12, 27))
    assert target.add_business_days(date(2024, 12, 24), 1) == date(2024, 12, 27)
    weekend = ref_data.calendar(CalendarType.WEEKEND)
    assert weekend.is_business_day(date(2024, 12, 25))
    with pytest.raises(ValueError, match="Unknown calendar"):
        ReferenceData({}).calendar(CalendarType.TARGET)


def test_tenor_arithmetic(ref_data):
    target = ref_data.calendar(CalendarType.TARGET)
    assert parse_tenor("10y") == (10, "Y")
    assert tenor_to_months("2Y") == 24
    assert get_spot_date(date(2024, 6, 3), target) == date(2024, 6, 5)
    # Modified following keeps the month end in the month
    assert add_tenor(date(2024, 1, 31), "1M", target) == date(2024, 2, 29)
    assert add_tenor(date(2024, 6, 3), "1W", target) == date(2024, 6, 10)
    for bad in ("", "3", "M3", "0M", "-1Y", "3Q"):
        with pytest.raises(ValueError):
            parse_tenor(bad)
    with pytest.raises(ValueError):
        tenor_to_months("1W")


def test_schedule_with_short_initial_stub(ref_data):
    generator = ScheduleGenerator(ref_data.calendar(CalendarType.TARGET))
    periods = generator.generate_schedule(
        date(2024, 6, 5), date(2025, 12, 5), Frequency.ANNUAL, ACT_360, StubType.SHORT_INITIAL
    )
    assert [(p.accrual_start, p.accrual_end) for p in periods] == [
        (date(2024, 6, 5), date(2024, 12, 5)),
        (date(2024, 12, 5), date(2025, 12, 5)),
    ]
    assert periods[0].is_stub
    assert not periods[1].is_stub
    assert periods[1].year_fraction == pytest.approx(365 / 360)


def test_schedule_payment_delay_and_adjustment(ref_data):
    generator = ScheduleGenerator(ref_data.calendar(CalendarType.TARGET), payment_delay_days=1)
    periods = generator.generate_schedule(
        date(2024, 6, 5), date(2026, 6, 5), Frequency.ANNUAL, ACT_360
    )
    assert len(periods) == 2
    assert periods[-1].accrual_end == date(2026, 6, 5)
    assert periods[-1].payment_date == date(2026, 6, 8)
    with pytest.raises(ValueError, match="must be before"):
        generator.generate_schedule(date(2024, 6, 5), date(2024, 6, 5), Frequency.ANNUAL, ACT_360)


def test_imm_dates():
    assert third_wednesday(2024, 3) == date(2024, 3, 20)
    assert third_wednesday(2024, 12) == date(2024, 12, 18)
    assert next_imm_date(date(2024, 6, 3)) == date(2024, 6, 19)
    assert next_imm_date(date(2024, 6, 20)) == date(2024, 9, 18)
    assert next_imm_date(date(2024, 6, 20), DateSequence.MONTHLY_IMM) == date(2024, 7, 17)
    assert nth_imm_date(date(2024, 12, 3), 1) == date(2024, 12, 18)
    assert nth_imm_date(date(2024, 12, 3), 3) == date(2025, 6, 18)
    with pytest.raises(ValueError):
        nth_imm_date(date(2024, 12, 3), 0)


def test_imm_date_on_an_imm_date_and_in_a_contract_month():
    assert next_imm_date(date(2024, 6, 19)) == date(2024, 6, 19)
    assert imm_date_in_month(2025, 3) == date(2025, 3, 19)
    assert imm_date_in_month(2025, 4, DateSequence.MONTHLY_IMM) == date(2025, 4, 16)
    with pytest.raises(ValueError, match="not a QUARTERLY_IMM contract month"):
        imm_date_in_month(2025, 4)
