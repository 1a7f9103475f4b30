"""Tests for shared time helpers."""

import datetime as dt

import pytest

from booking_core.utils import add_hours_hhmm, interval_on, overlaps, parse_hhmm


class TestParseHHMM:
    def test_valid(self):
        assert parse_hhmm("09:30") == dt.time(9, 30)

    def test_strips_whitespace(self):
        assert parse_hhmm(" 17:05 ") == dt.time(17, 5)

    @pytest.mark.parametrize("value", ["9:30", "24:00", "12:60", "noon", ""])
    def test_invalid(self, value):
        with pytest.raises(ValueError, match="HH:MM"):
            parse_hhmm(value)


class TestAddHours:
    def test_keeps_minutes(self):
        assert add_hours_hhmm("10:45", 3) == "13:45"

    def test_pads_hour(self):
        assert add_hours_hhmm("06:00", 1) == "07:00"

    def test_runs_past_midnight_without_wrapping(self):
        assert add_hours_hhmm("22:30", 3) == "25:30"


class TestIntervals:
    def test_interval_on(self):
        start, end = interval_on(dt.date(2025, 6, 1), "10:00", 2)
        assert start == dt.datetime(2025, 6, 1, 10, 0)
        assert end == dt.datetime(2025, 6, 1, 12, 0)

    def test_late_interval_ends_next_day(self):
        _, end = interval_on(dt.date(2025, 6, 1), "23:00", 2)
        assert end == dt.datetime(2025, 6, 2, 1, 0)

    def test_overlap_half_open(self):
        a = interval_on(dt.date(2025, 6, 1), "10:00", 2)
        b = interval_on(dt.date(2025, 6, 1), "12:00", 1)
        c = interval_on(dt.date(2025, 6, 1), "11:00", 1)
        assert overlaps(*a, *b) is False
        assert overlaps(*b, *a) is False
        assert overlaps(*a, *c) is True
