"""
Unit tests for time-of-day arithmetic.
"""

import pytest

from calendar_engine.core.exceptions import InvalidTimeFormat
from calendar_engine.utils.time_math import (
    add_minutes,
    clamp_time,
    duration_minutes,
    ensure_time_format,
    round_half_up,
    snap_to_grid,
    to_minutes,
    to_time_string,
)


class TestToMinutes:
    """Tests for parsing HH:MM."""

    def test_parses_padded_and_single_digit_hours(self):
        assert to_minutes("00:00") == 0
        assert to_minutes("09:30") == 570
        assert to_minutes("7:05") == 425
        assert to_minutes("23:59") == 1439

    @pytest.mark.parametrize("value", ["", "24:00", "12:60", "noon", "1230", "12:3", None, 720])
    def test_rejects_invalid_values(self, value):
        with pytest.raises(InvalidTimeFormat):
            to_minutes(value)

    def test_round_trip_over_whole_day(self):
        for minutes in range(0, 1440):
            assert to_minutes(to_time_string(minutes)) == minutes


class TestToTimeString:
    """Tests for formatting minutes."""

    def test_zero_pads(self):
        assert to_time_string(425) == "07:05"

    def test_clamps_out_of_day_values(self):
        assert to_time_string(-30) == "00:00"
        assert to_time_string(1500) == "23:59"

    def test_add_minutes_never_rolls_over(self):
        assert add_minutes("23:30", 45) == "23:59"
        assert add_minutes("00:10", -20) == "00:00"
        assert add_minutes("10:00", 90) == "11:30"


class TestSnapToGrid:
    """Tests for grid snapping."""

    @pytest.mark.parametrize(
        "minutes,expected",
        [(0, 0), (7, 0), (8, 15), (22, 15), (23, 30), (-7, 0), (-8, -15)],
    )
    def test_nearest_multiple(self, minutes, expected):
        assert snap_to_grid(minutes, 15) == expected

    def test_halves_round_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(-2.5) == -2
        assert snap_to_grid(15, 30) == 30

    def test_idempotent(self):
        for minutes in range(-120, 120):
            once = snap_to_grid(minutes, 15)
            assert snap_to_grid(once, 15) == once

    def test_non_positive_grid_disables_snapping(self):
        assert snap_to_grid(7, 0) == 7


class TestHelpers:
    """Tests for clamp/duration/normalization helpers."""

    def test_clamp_time(self):
        assert clamp_time("06:00", "08:00", "18:00") == "08:00"
        assert clamp_time("19:15", "08:00", "18:00") == "18:00"
        assert clamp_time("12:00", "08:00", "18:00") == "12:00"

    def test_duration_minutes(self):
        assert duration_minutes("09:00", "10:30") == 90
        assert duration_minutes("10:30", "09:00") == -90

    def test_ensure_time_format(self):
        assert ensure_time_format("9:05") == "09:05"
        assert ensure_time_format("") == "09:00"
        assert ensure_time_format(None, "08:00") == "08:00"
        assert ensure_time_format("25:00", "10:00") == "10:00"
