"""Tests for calendar arithmetic (last / this / next, ago / from now)."""

from datetime import datetime

import pytest

from daysie.calculator import (
    ChronoUnit,
    Weekday,
    calculate_ago_point,
    calculate_day_of_week_ago,
    calculate_day_of_week_from_now,
    calculate_from_now_point,
    calculate_last_range,
    calculate_next_range,
    calculate_this_range,
    following_weekday,
    iso_week_start,
    most_recent_weekday,
    previous_weekday,
    start_of_quarter,
    start_of_week,
    upcoming_weekday,
)
from daysie.exceptions import UnsupportedUnitError
from daysie.values import Point, Range


NOW = datetime(2026, 2, 14, 10, 0, 0)  # Saturday


class TestLastRange:
    """Ranges that end at the current period boundary (or now for sub-day units)."""

    @pytest.mark.parametrize(
        "unit,amount,quarter,start,end",
        [
            (ChronoUnit.WEEK, 1, False, datetime(2026, 2, 2), datetime(2026, 2, 9)),
            (ChronoUnit.WEEK, 2, False, datetime(2026, 1, 26), datetime(2026, 2, 9)),
            (ChronoUnit.MONTH, 1, False, datetime(2026, 1, 1), datetime(2026, 2, 1)),
            (ChronoUnit.MONTH, 1, True, datetime(2025, 10, 1), datetime(2026, 1, 1)),
            (ChronoUnit.YEAR, 1, False, datetime(2025, 1, 1), datetime(2026, 1, 1)),
            (ChronoUnit.DAY, 3, False, datetime(2026, 2, 11), NOW),
            (ChronoUnit.HOUR, 1, False, datetime(2026, 2, 14, 9), NOW),
            (ChronoUnit.MINUTE, 30, False, datetime(2026, 2, 14, 9, 30), NOW),
        ],
    )
    def test_last(self, unit, amount, quarter, start, end):
        assert calculate_last_range(NOW, unit, amount, quarter) == Range(start, end, True, False)


class TestThisRange:
    @pytest.mark.parametrize(
        "unit,amount,quarter,start,end",
        [
            (ChronoUnit.WEEK, 1, False, datetime(2026, 2, 9), datetime(2026, 2, 16)),
            (ChronoUnit.MONTH, 1, False, datetime(2026, 2, 1), datetime(2026, 3, 1)),
            (ChronoUnit.MONTH, 1, True, datetime(2026, 1, 1), datetime(2026, 4, 1)),
            (ChronoUnit.YEAR, 1, False, datetime(2026, 1, 1), datetime(2027, 1, 1)),
            (ChronoUnit.DAY, 1, False, datetime(2026, 2, 14), datetime(2026, 2, 15)),
            (ChronoUnit.MONTH, 2, False, datetime(2026, 1, 1), datetime(2026, 3, 1)),
        ],
    )
    def test_this(self, unit, amount, quarter, start, end):
        assert calculate_this_range(NOW, unit, amount, quarter) == Range(start, end, True, False)


class TestNextRange:
    @pytest.mark.parametrize(
        "unit,amount,quarter,start,end",
        [
            (ChronoUnit.HOUR, 2, False, NOW, datetime(2026, 2, 14, 12)),
            (ChronoUnit.DAY, 2, False, NOW, datetime(2026, 2, 17)),
            (ChronoUnit.WEEK, 1, False, datetime(2026, 2, 16), datetime(2026, 2, 23)),
            (ChronoUnit.MONTH, 1, False, datetime(2026, 3, 1), datetime(2026, 4, 1)),
            (ChronoUnit.MONTH, 1, True, datetime(2026, 4, 1), datetime(2026, 7, 1)),
            (ChronoUnit.YEAR, 1, False, datetime(2027, 1, 1), datetime(2028, 1, 1)),
        ],
    )
    def test_next(self, unit, amount, quarter, start, end):
        assert calculate_next_range(NOW, unit, amount, quarter) == Range(start, end, True, False)

    def test_ranges_are_ordered(self):
        """Every unit and direction yields start <= end."""
        for unit in ChronoUnit:
            for fn in (calculate_last_range, calculate_this_range, calculate_next_range):
                result = fn(NOW, unit, 3)
                assert result.start <= result.end


class TestPoints:
    def test_ago(self):
        assert calculate_ago_point(NOW, ChronoUnit.DAY, 3) == Point(datetime(2026, 2, 11, 10))

    def test_month_ago_is_calendar_correct(self):
        """March 31st minus a month clamps to the end of February."""
        now = datetime(2026, 3, 31, 10)
        assert calculate_ago_point(now, ChronoUnit.MONTH, 1) == Point(datetime(2026, 2, 28, 10))

    def test_quarter_ago(self):
        """The quarter flag turns a month step into three months."""
        assert calculate_ago_point(NOW, ChronoUnit.MONTH, 1, True) == Point(datetime(2025, 11, 14, 10))

    def test_from_now(self):
        assert calculate_from_now_point(NOW, ChronoUnit.WEEK, 2) == Point(datetime(2026, 2, 28, 10))


class TestWeekdays:
    """Weekday lookups relative to Saturday 2026-02-14."""

    def test_most_recent_includes_today(self):
        assert most_recent_weekday(NOW, Weekday.SATURDAY) == datetime(2026, 2, 14)
        assert most_recent_weekday(NOW, Weekday.MONDAY) == datetime(2026, 2, 9)

    def test_previous_is_strict(self):
        """Last saturday on a Saturday is a week back, never today."""
        assert previous_weekday(NOW, Weekday.SATURDAY) == datetime(2026, 2, 7)

    def test_upcoming_includes_today(self):
        assert upcoming_weekday(NOW, Weekday.SATURDAY) == datetime(2026, 2, 14)

    def test_following_is_strict(self):
        """Next saturday on a Saturday is a week ahead."""
        assert following_weekday(NOW, Weekday.SATURDAY) == datetime(2026, 2, 21)
        assert following_weekday(NOW, Weekday.MONDAY) == datetime(2026, 2, 16)

    def test_day_of_week_ago(self):
        assert calculate_day_of_week_ago(NOW, Weekday.MONDAY, 2) == Point(datetime(2026, 2, 2))

    def test_day_of_week_from_now(self):
        assert calculate_day_of_week_from_now(NOW, Weekday.FRIDAY, 1) == Point(datetime(2026, 2, 20))
        assert calculate_day_of_week_from_now(NOW, Weekday.FRIDAY, 2) == Point(datetime(2026, 2, 27))


class TestAlignment:
    def test_week_starts_monday(self):
        assert start_of_week(NOW) == datetime(2026, 2, 9)

    def test_quarter_start(self):
        assert start_of_quarter(datetime(2026, 8, 20, 5)) == datetime(2026, 7, 1)

    def test_iso_week(self):
        """Week 1 holds January 4th, so it can start in December."""
        assert iso_week_start(2026, 1) == datetime(2025, 12, 29)
        assert iso_week_start(2026, 7) == datetime(2026, 2, 9)

    def test_iso_week_out_of_range(self):
        with pytest.raises(ValueError):
            iso_week_start(2026, 54)

    def test_week_53_only_in_long_years(self):
        """2026 has 53 ISO weeks; 2025 has 52."""
        assert iso_week_start(2026, 53) == datetime(2026, 12, 28)
        with pytest.raises(ValueError):
            iso_week_start(2025, 53)


class TestUnsupportedUnit:
    def test_unknown_unit_raises(self):
        with pytest.raises(UnsupportedUnitError) as exc_info:
            calculate_last_range(NOW, "fortnight", 1)

        assert exc_info.value.unit == "fortnight"
        assert "last" in str(exc_info.value)
