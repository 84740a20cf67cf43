from datetime import date, timedelta

import pytest

from src.overtime_bank.overtime_bank.core.enums import FortnightHalf
from src.overtime_bank.overtime_bank.periods.fortnight import (
    Fortnight,
    current_fortnight_info,
    days_without_entry,
    fortnight_of,
    is_closed,
    is_open,
    last_day_of_month,
)


@pytest.mark.parametrize("day", range(1, 32))
def test_first_half_iff_day_up_to_15(day):
    f = fortnight_of(date(2024, 1, day))
    assert (f.half == FortnightHalf.FIRST) == (day <= 15)


@pytest.mark.parametrize(
    "before, after",
    [
        (date(2024, 1, 31), date(2024, 2, 1)),
        (date(2024, 2, 29), date(2024, 3, 1)),
        (date(2023, 2, 28), date(2023, 3, 1)),
        (date(2024, 12, 31), date(2025, 1, 1)),
    ],
)
def test_month_boundaries_roll_over(before, after):
    assert fortnight_of(before) == Fortnight(before.year, before.month, FortnightHalf.SECOND)
    assert fortnight_of(after) == Fortnight(after.year, after.month, FortnightHalf.FIRST)
    assert fortnight_of(before).end == before
    assert fortnight_of(after).start == after


def test_last_day_of_month_without_lookup_table():
    assert last_day_of_month(2024, 2) == 29
    assert last_day_of_month(2023, 2) == 28
    assert last_day_of_month(2024, 4) == 30
    assert last_day_of_month(2024, 12) == 31


def test_is_open_only_for_todays_fortnight():
    today = date(2024, 3, 20)
    assert is_open(Fortnight(2024, 3, FortnightHalf.SECOND), today)
    assert not is_open(Fortnight(2024, 3, FortnightHalf.FIRST), today)
    assert not is_open(Fortnight(2024, 4, FortnightHalf.FIRST), today)


def test_is_closed_in_second_half():
    today = date(2024, 3, 20)
    assert is_closed(date(2024, 3, 10), today, False) is True
    assert is_closed(date(2024, 3, 15), today, False) is True
    assert is_closed(date(2024, 3, 16), today, False) is False
    assert is_closed(date(2024, 3, 20), today, False) is False
    assert is_closed(date(2024, 4, 1), today, False) is False
    assert is_closed(date(2024, 2, 29), today, False) is True


def test_is_closed_in_first_half_keeps_later_days_open():
    today = date(2024, 3, 5)
    assert is_closed(date(2024, 3, 1), today, False) is False
    assert is_closed(date(2024, 3, 25), today, False) is False
    assert is_closed(date(2024, 2, 20), today, False) is True
    assert is_closed(date(2024, 2, 10), today, False) is True


def test_is_closed_across_year_boundary():
    today = date(2025, 1, 2)
    assert is_closed(date(2024, 12, 31), today, False) is True
    assert is_closed(date(2025, 1, 1), today, False) is False
    assert is_closed(date(2025, 2, 1), date(2024, 12, 20), False) is False


def test_privileged_caller_never_sees_closed_fortnight():
    today = date(2024, 3, 20)
    start = date(2023, 1, 1)
    for offset in range(0, 500, 7):
        assert is_closed(start + timedelta(days=offset), today, True) is False


def test_current_fortnight_info_second_half_of_leap_february():
    info = current_fortnight_info(date(2024, 2, 20))
    assert info.label == "2ª Quinzena"
    assert info.start == date(2024, 2, 16)
    assert info.end == date(2024, 2, 29)
    assert info.range_label == "16 a 29 de fevereiro"
    assert info.days_remaining == 9


def test_current_fortnight_info_last_day_has_zero_remaining():
    info = current_fortnight_info(date(2024, 3, 15))
    assert info.label == "1ª Quinzena"
    assert info.range_label == "01 a 15 de março"
    assert info.days_remaining == 0


def test_days_without_entry_stop_at_today():
    marked = [date(2024, 3, 1), date(2024, 3, 3), date(2024, 2, 2)]
    missing = days_without_entry(marked, date(2024, 3, 4))
    assert missing == [date(2024, 3, 2), date(2024, 3, 4)]
