"""Unit tests for calendar helpers."""

from __future__ import annotations

import calendar as std_calendar
from datetime import date

import pytest

from pyhydrots.core.calendar import (
    YearType,
    absolute_day,
    absolute_month,
    day_of_year,
    is_leap_year,
    month_abbreviation,
    month_and_day_from_day_of_year,
    num_days_in_month,
    num_days_in_months,
    num_days_in_year,
)


class TestLeapYear:
    @pytest.mark.parametrize("year", [1996, 2000, 2004, 2400])
    def test_leap_years(self, year: int) -> None:
        assert is_leap_year(year)

    @pytest.mark.parametrize("year", [1900, 1999, 2100, 2200])
    def test_non_leap_years(self, year: int) -> None:
        assert not is_leap_year(year)


class TestDaysInMonth:
    def test_matches_gregorian_calendar(self) -> None:
        """Every month from 1800 through 2400 matches the standard library."""
        for year in range(1800, 2401):
            for month in range(1, 13):
                assert num_days_in_month(month, year) == std_calendar.monthrange(year, month)[1]

    def test_february(self) -> None:
        assert num_days_in_month(2, 1996) == 29
        assert num_days_in_month(2, 2000) == 29
        assert num_days_in_month(2, 2400) == 29
        assert num_days_in_month(2, 1900) == 28
        assert num_days_in_month(2, 2100) == 28

    def test_month_past_december_wraps(self) -> None:
        assert num_days_in_month(14, 1999) == 29  # February 2000
        assert num_days_in_month(13, 2000) == 31  # January 2001

    def test_month_below_one_is_zero(self) -> None:
        assert num_days_in_month(0, 2000) == 0

    def test_month_range(self) -> None:
        assert num_days_in_months(1, 2000, 3, 2000) == 31 + 29 + 31
        assert num_days_in_months(12, 1999, 1, 2000) == 62
        assert num_days_in_months(3, 2000, 1, 2000) == 0

    def test_days_in_year(self) -> None:
        assert num_days_in_year(2000) == 366
        assert num_days_in_year(2001) == 365


class TestDayNumbers:
    def test_day_of_year(self) -> None:
        assert day_of_year(1, 1, 2001) == 1
        assert day_of_year(1, 3, 2000) == 61
        assert day_of_year(1, 3, 2001) == 60
        assert day_of_year(31, 12, 2000) == 366

    def test_month_and_day_from_day_of_year(self) -> None:
        assert month_and_day_from_day_of_year(60, 2000) == (2, 29)
        assert month_and_day_from_day_of_year(60, 2001) == (3, 1)

    def test_month_and_day_from_day_of_year_out_of_range(self) -> None:
        with pytest.raises(ValueError, match="not valid"):
            month_and_day_from_day_of_year(366, 2001)

    def test_absolute_month(self) -> None:
        assert absolute_month(6, 1992) == 1992 * 12 + 6

    def test_absolute_day_matches_ordinal(self) -> None:
        for d in (date(1, 1, 1), date(1900, 3, 1), date(2000, 2, 29), date(2024, 12, 31)):
            assert absolute_day(d.year, d.month, d.day) == d.toordinal()

    def test_month_abbreviation(self) -> None:
        assert month_abbreviation(1) == "Jan"
        assert month_abbreviation(12) == "Dec"


class TestYearType:
    def test_water_year(self) -> None:
        wy = YearType.WATER
        assert wy.start_month == 10
        assert wy.start_year_offset == -1
        assert wy.end_month == 9
        assert wy.end_year_offset == 0

    def test_calendar_months(self) -> None:
        assert YearType.CALENDAR.months() == list(range(1, 13))

    def test_water_year_months(self) -> None:
        assert YearType.WATER.months() == [10, 11, 12, 1, 2, 3, 4, 5, 6, 7, 8, 9]

    def test_from_string(self) -> None:
        assert YearType.from_string("water") == YearType.WATER
        assert YearType.from_string("NovToOct") == YearType.NOV_TO_OCT
        assert YearType.from_string("YEAR_MAY_TO_APR") == YearType.YEAR_MAY_TO_APR

    def test_from_string_unknown_raises(self) -> None:
        with pytest.raises(ValueError, match="Unknown year type"):
            YearType.from_string("Fiscal")

    def test_str(self) -> None:
        assert str(YearType.CALENDAR) == "Calendar"
