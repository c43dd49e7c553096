"""
Calendar helpers for hydrologic time series.

This module provides stateless Gregorian calendar functions used by the
date/time, interval, and storage classes: leap-year tests, month lengths,
day-of-year conversions, and the "absolute" month and day numbers used for
constant-time distance arithmetic between dates.
"""

from __future__ import annotations

from enum import Enum

MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)

MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)

# Days in each month of a non-leap year
MONTH_DAYS = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)

# Cumulative days before the first of each month, non-leap year
_DAYS_BEFORE_MONTH = (0, 31, 59, 90, 120, 151, 181, 212, 243, 273, 304, 334)


def is_leap_year(year: int) -> bool:
    """Return True if ``year`` is a Gregorian leap year."""
    return (year % 4 == 0 and year % 100 != 0) or year % 400 == 0


def num_days_in_month(month: int, year: int) -> int:
    """
    Return the number of days in a month.

    Months greater than 12 roll forward into the following years, so
    ``num_days_in_month(14, 1999)`` is the length of February 2000.

    Args:
        month: Month number (1-12, or larger to wrap into later years)
        year: Four-digit year

    Returns:
        Number of days in the month, or 0 if ``month`` is less than 1
    """
    if month < 1:
        return 0
    if month > 12:
        year += (month - 1) // 12
        month = (month - 1) % 12 + 1
    if month == 2 and is_leap_year(year):
        return 29
    return MONTH_DAYS[month - 1]


def num_days_in_months(month1: int, year1: int, month2: int, year2: int) -> int:
    """
    Return the total number of days in an inclusive range of months.

    Args:
        month1: First month of the range
        year1: Year of the first month
        month2: Last month of the range
        year2: Year of the last month

    Returns:
        Total days, or 0 if the range is reversed
    """
    first = absolute_month(month1, year1)
    last = absolute_month(month2, year2)
    total = 0
    for amon in range(first, last + 1):
        year, month = divmod(amon - 1, 12)
        total += num_days_in_month(month + 1, year)
    return total


def num_days_in_year(year: int) -> int:
    """Return 366 for leap years and 365 otherwise."""
    return 366 if is_leap_year(year) else 365


def day_of_year(day: int, month: int, year: int) -> int:
    """Return the 1-based day of the year for a calendar date."""
    days = _DAYS_BEFORE_MONTH[month - 1] + day
    if month > 2 and is_leap_year(year):
        days += 1
    return days


def month_and_day_from_day_of_year(day_of_year: int, year: int) -> tuple[int, int]:
    """
    Convert a 1-based day of the year into ``(month, day)``.

    Raises:
        ValueError: If ``day_of_year`` is outside the year
    """
    if day_of_year < 1 or day_of_year > num_days_in_year(year):
        raise ValueError(f"Day of year {day_of_year} is not valid for {year}")
    remaining = day_of_year
    for month in range(1, 13):
        ndays = num_days_in_month(month, year)
        if remaining <= ndays:
            return month, remaining
        remaining -= ndays
    raise ValueError(f"Day of year {day_of_year} is not valid for {year}")


def absolute_month(month: int, year: int) -> int:
    """Return ``year * 12 + month``."""
    return year * 12 + month


def absolute_day(year: int, month: int, day: int) -> int:
    """
    Return the proleptic Gregorian day number of a date.

    Day 1 is 0001-01-01, matching :meth:`datetime.date.toordinal`.
    """
    y = year - 1
    return y * 365 + y // 4 - y // 100 + y // 400 + day_of_year(day, month, year)


def month_abbreviation(month: int) -> str:
    """Return the three-letter abbreviation for a month number (1-12)."""
    return MONTH_ABBREVIATIONS[month - 1]


class YearType(Enum):
    """
    Year definitions used when summarizing data by year.

    Each member carries the start month, the end month, and the offsets from
    the nominal year to the calendar years holding those months.  A water
    year 2000 runs from October 1999 through September 2000.
    """

    CALENDAR = ("Calendar", 0, 1, 0, 12)
    WATER = ("Water", -1, 10, 0, 9)
    NOV_TO_OCT = ("NovToOct", -1, 11, 0, 10)
    YEAR_MAY_TO_APR = ("YearMayToApr", 0, 5, 1, 4)

    def __init__(
        self,
        display_name: str,
        start_year_offset: int,
        start_month: int,
        end_year_offset: int,
        end_month: int,
    ) -> None:
        self.display_name = display_name
        self.start_year_offset = start_year_offset
        self.start_month = start_month
        self.end_year_offset = end_year_offset
        self.end_month = end_month

    @classmethod
    def from_string(cls, s: str) -> YearType:
        """Look up a year type by display name or member name, ignoring case."""
        key = s.strip().upper()
        for member in cls:
            if key in (member.display_name.upper(), member.name):
                return member
        raise ValueError(f"Unknown year type: '{s}'")

    def months(self) -> list[int]:
        """Return the month numbers of the year, in order."""
        return [(self.start_month - 1 + i) % 12 + 1 for i in range(12)]

    def __str__(self) -> str:
        return self.display_name
