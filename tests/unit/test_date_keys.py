"""
Unit tests for calendar date helpers.
"""

from datetime import date

import pytest

from calendar_engine.utils.date_keys import (
    iter_dates,
    parse_date_key,
    to_date_key,
    week_dates,
)


def test_date_key_round_trip():
    assert to_date_key(date(2024, 3, 5)) == "2024-03-05"
    assert parse_date_key("2024-03-05") == date(2024, 3, 5)


@pytest.mark.parametrize("value", ["2024-3-5", "2024/03/05", "2024-02-30", "", None])
def test_parse_date_key_rejects_malformed(value):
    with pytest.raises(ValueError):
        parse_date_key(value)


def test_iter_dates_is_inclusive_and_empty_when_inverted():
    assert list(iter_dates(date(2024, 2, 28), date(2024, 3, 1))) == [
        date(2024, 2, 28),
        date(2024, 2, 29),
        date(2024, 3, 1),
    ]
    assert list(iter_dates(date(2024, 3, 2), date(2024, 3, 1))) == []


def test_week_dates_start_on_sunday():
    # 2024-01-03 is a Wednesday
    week = week_dates(date(2024, 1, 3))
    assert week[0] == date(2023, 12, 31)
    assert week[-1] == date(2024, 1, 6)
    assert len(week) == 7


def test_week_dates_offset_and_sunday_reference():
    assert week_dates(date(2024, 1, 7))[0] == date(2024, 1, 7)
    assert week_dates(date(2024, 1, 3), offset=1)[0] == date(2024, 1, 7)
    assert week_dates(date(2024, 1, 3), offset=-1)[0] == date(2023, 12, 24)
