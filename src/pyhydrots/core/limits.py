"""
Time series data limits and statistics.

This module scans a series over a period and summarizes it: extreme values
and their dates, missing and non-missing counts, sum, mean, median,
standard deviation and skew, and the first and last non-missing dates.

Example
-------
>>> from pyhydrots.core.limits import TimeSeriesLimits
>>> limits = TimeSeriesLimits.compute(ts)  # doctest: +SKIP
>>> print(limits.summary())  # doctest: +SKIP
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum, IntFlag
from typing import TYPE_CHECKING, Any, Iterable

import numpy as np
from numpy.typing import NDArray

from pyhydrots.core.date_time import DateTime, DateTimeFlag
from pyhydrots.core.exceptions import DataLimitsError
from pyhydrots.core.interval import IntervalBase, is_regular_interval
from pyhydrots.core.period import get_valid_period

if TYPE_CHECKING:
    from pyhydrots.core.timeseries import TimeSeries


class LimitsFlag(IntFlag):
    """Options for :meth:`TimeSeriesLimits.calculate_data_limits`."""

    NONE = 0
    REFRESH_TS = 0x1
    NO_COMPUTE_TOTALS = 0x2
    NO_COMPUTE_DETAIL = 0x4
    IGNORE_LESS_THAN_OR_EQUAL_ZERO = 0x8


class ArrayReturnType(Enum):
    """What :func:`to_array` returns for each selected time step."""

    DATA_VALUE = "DataValue"
    DATE_TIME = "DateTime"


def _snapshot(date: DateTime) -> DateTime:
    copy = date.copy()
    copy.set_precision(DateTimeFlag.STRICT)
    copy.reset()
    return copy


def to_array(
    ts: TimeSeries,
    start: DateTime | None = None,
    end: DateTime | None = None,
    months: Iterable[int] | None = None,
    include_missing: bool = True,
    paired_ts: TimeSeries | None = None,
    match_other_nonmissing: bool = True,
    return_type: ArrayReturnType = ArrayReturnType.DATA_VALUE,
) -> NDArray:
    """
    Extract series data for a period as an array.

    Args:
        ts: Time series to extract
        start: First date (default: start of the series period)
        end: Last date (default: end of the series period)
        months: Month numbers (1-12) to include; None includes all months
        include_missing: Whether missing values are included
        paired_ts: Optional series with the same interval.  When given, a
            step is only included if ``ts`` is not missing there and
            ``paired_ts`` is non-missing (``match_other_nonmissing=True``)
            or missing (``match_other_nonmissing=False``)
        match_other_nonmissing: See ``paired_ts``
        return_type: Return the values, or a date key per step (year for
            yearly data, absolute month for monthly data, absolute day for
            daily data)

    Returns:
        Float array of values, or integer array of date keys

    Raises:
        ValueError: If the interval is irregular, the paired series has a
            different interval, or date keys are requested for an interval
            other than 1Year, 1Month or 1Day
    """
    base = ts.data_interval_base
    mult = ts.data_interval_mult
    if not is_regular_interval(base):
        raise ValueError("Irregular interval time series cannot be converted to an array")
    if paired_ts is not None and (
        paired_ts.data_interval_base != base or paired_ts.data_interval_mult != mult
    ):
        raise ValueError(
            "Time series from which to extract data has a different interval "
            "than the paired time series"
        )
    if return_type == ArrayReturnType.DATE_TIME and (
        mult != 1 or base not in (IntervalBase.YEAR, IntervalBase.MONTH, IntervalBase.DAY)
    ):
        raise ValueError(
            "Interval must be Year, Month, or Day (no multiplier) to return date/time as array"
        )

    period = get_valid_period(ts, start, end)
    include = set(months) if months else None

    result: list[float] = []
    date = period.start
    date.set_precision(DateTimeFlag.FAST)
    while not date.greater_than(period.end):
        if include is None or date.month in include:
            value = ts.get_data_value(date)
            is_missing = ts.is_data_missing(value)
            if paired_ts is not None:
                transfer = False
                if not is_missing:
                    other_missing = paired_ts.is_data_missing(paired_ts.get_data_value(date))
                    transfer = not other_missing if match_other_nonmissing else other_missing
            else:
                transfer = include_missing or not is_missing

            if transfer:
                if return_type == ArrayReturnType.DATA_VALUE:
                    result.append(value)
                elif base == IntervalBase.YEAR:
                    result.append(date.year)
                elif base == IntervalBase.MONTH:
                    result.append(date.absolute_month)
                else:
                    result.append(date.absolute_day)
        date.add_interval(base, mult)

    if return_type == ArrayReturnType.DATE_TIME:
        return np.array(result, dtype=np.int64)
    return np.array(result, dtype=np.float64)


def _skew(values: NDArray[np.float64]) -> float:
    """Adjusted Fisher-Pearson sample skewness."""
    n = len(values)
    if n < 3:
        return math.nan
    std_dev = float(np.std(values, ddof=1))
    if std_dev == 0.0:
        return math.nan
    mean = float(np.mean(values))
    total = float(np.sum(((values - mean) / std_dev) ** 3))
    return n * total / ((n - 1) * (n - 2))


@dataclass
class TimeSeriesLimits:
    """
    Statistics for a time series over a period.

    Attributes:
        date1: First date of the period analyzed
        date2: Last date of the period analyzed
        max_value: Largest non-missing value
        max_value_date: Date of the first occurrence of ``max_value``
        min_value: Smallest non-missing value
        min_value_date: Date of the first occurrence of ``min_value``
        missing_data_count: Number of missing values
        non_missing_data_count: Number of non-missing values
        sum: Sum of non-missing values (missing value if none)
        mean: Mean of non-missing values (missing value if none)
        median: Median of non-missing values
        std_dev: Sample standard deviation (needs 2 values)
        skew: Sample skew (needs 3 values)
        non_missing_data_date1: First date with a non-missing value
        non_missing_data_date2: Last date with a non-missing value
        data_units: Units copied from the series
        flags: :class:`LimitsFlag` options used in the calculation
        found: True once every date field is populated
    """

    date1: DateTime | None = None
    date2: DateTime | None = None
    max_value: float = math.nan
    max_value_date: DateTime | None = None
    min_value: float = math.nan
    min_value_date: DateTime | None = None
    missing_data_count: int = 0
    non_missing_data_count: int = 0
    sum: float = math.nan
    mean: float = math.nan
    median: float = math.nan
    std_dev: float = math.nan
    skew: float = math.nan
    non_missing_data_date1: DateTime | None = None
    non_missing_data_date2: DateTime | None = None
    data_units: str = ""
    flags: int = LimitsFlag.NONE
    found: bool = False

    @classmethod
    def compute(
        cls,
        ts: TimeSeries | None,
        start: DateTime | None = None,
        end: DateTime | None = None,
        flags: int = LimitsFlag.NONE,
    ) -> TimeSeriesLimits:
        """
        Compute limits for a series.

        Args:
            ts: Time series to analyze
            start: First date (default: start of the series period)
            end: Last date (default: end of the series period)
            flags: :class:`LimitsFlag` options

        Returns:
            TimeSeriesLimits with all statistics populated

        Raises:
            DataLimitsError: If the series or its data is missing, or no
                value in the period is non-missing
        """
        limits = cls(flags=flags)
        limits.calculate_data_limits(
            ts, start, end, refresh=bool(flags & LimitsFlag.REFRESH_TS)
        )
        return limits

    def calculate_data_limits(
        self,
        ts: TimeSeries | None,
        start: DateTime | None = None,
        end: DateTime | None = None,
        refresh: bool = False,
    ) -> None:
        """
        Scan a series and populate this instance.

        Values within the missing-value band (or at or below zero when
        IGNORE_LESS_THAN_OR_EQUAL_ZERO is set) are counted as missing.  The
        forward scan keeps the first occurrence of a tied extreme and the
        first non-missing date; a backward scan finds the last non-missing
        date.

        Raises:
            DataLimitsError: If the series or its data is missing, or no
                value in the period is non-missing
        """
        if ts is None:
            raise DataLimitsError("Null time series - cannot compute limits")
        if not ts.is_allocated:
            raise DataLimitsError(
                f"Null data for '{ts.identifier_string}' - cannot compute limits",
                ts.identifier_string,
            )
        base = ts.data_interval_base
        mult = ts.data_interval_mult
        if not is_regular_interval(base):
            raise DataLimitsError(
                f"Cannot compute limits for irregular interval '{ts.identifier_string}'",
                ts.identifier_string,
            )
        if refresh:
            ts.refresh()

        period = get_valid_period(ts, start, end)
        ignore_lezero = bool(self.flags & LimitsFlag.IGNORE_LESS_THAN_OR_EQUAL_ZERO)
        missing = ts.missing

        def counts_as_missing(v: float) -> bool:
            return ts.is_data_missing(v) or (ignore_lezero and v <= 0.0)

        total = 0.0
        max_value = min_value = math.nan
        max_date = min_date = None
        first_date = last_date = None
        missing_count = 0
        non_missing_count = 0
        found = False

        date = period.start.copy()
        date.set_precision(DateTimeFlag.FAST)
        while not date.greater_than(period.end):
            value = ts.get_data_value(date)
            if counts_as_missing(value):
                missing_count += 1
            else:
                total += value
                non_missing_count += 1
                if not found:
                    max_value = min_value = value
                    max_date = _snapshot(date)
                    min_date = max_date.copy()
                    first_date = max_date.copy()
                    found = True
                else:
                    if value > max_value:
                        max_value = value
                        max_date = _snapshot(date)
                    if value < min_value:
                        min_value = value
                        min_date = _snapshot(date)
            date.add_interval(base, mult)

        if not found:
            raise DataLimitsError(
                f'"{ts.identifier_string}": problems finding limits, whole POR missing!',
                ts.identifier_string,
            )

        date = period.end.copy()
        date.set_precision(DateTimeFlag.FAST)
        while not date.less_than(period.start):
            if not counts_as_missing(ts.get_data_value(date)):
                last_date = _snapshot(date)
                break
            date.add_interval(base, -mult)

        if not self.flags & LimitsFlag.NO_COMPUTE_DETAIL:
            values = to_array(ts, period.start, period.end, include_missing=False)
            if ignore_lezero:
                values = values[values > 0.0]
            if len(values) > 0:
                self.median = float(np.median(values))
            if len(values) > 1:
                self.std_dev = float(np.std(values, ddof=1))
            if len(values) > 2:
                self.skew = _skew(values)

        self.date1 = period.start
        self.date2 = period.end
        self.max_value = max_value
        self.max_value_date = max_date
        self.min_value = min_value
        self.min_value_date = min_date
        self.non_missing_data_date1 = first_date
        self.non_missing_data_date2 = last_date
        self.missing_data_count = missing_count
        self.non_missing_data_count = non_missing_count
        if self.flags & LimitsFlag.NO_COMPUTE_TOTALS:
            self.sum = missing
            self.mean = missing
        else:
            self.sum = total
            self.mean = total / non_missing_count
        self.data_units = ts.data_units
        self.check_dates()

    def check_dates(self) -> None:
        """Set :attr:`found` if every date field is populated."""
        if (
            self.date1 is not None
            and self.date2 is not None
            and self.max_value_date is not None
            and self.min_value_date is not None
            and self.non_missing_data_date1 is not None
            and self.non_missing_data_date2 is not None
        ):
            self.found = True

    @property
    def has_non_missing_data(self) -> bool:
        return self.non_missing_data_count > 0

    def to_dict(self) -> dict[str, Any]:
        """
        Convert limits to a dictionary.

        Dates are converted to strings.
        """

        def text(date: DateTime | None) -> str | None:
            return str(date) if date is not None else None

        return {
            "date1": text(self.date1),
            "date2": text(self.date2),
            "max_value": self.max_value,
            "max_value_date": text(self.max_value_date),
            "min_value": self.min_value,
            "min_value_date": text(self.min_value_date),
            "missing_data_count": self.missing_data_count,
            "non_missing_data_count": self.non_missing_data_count,
            "sum": self.sum,
            "mean": self.mean,
            "median": self.median,
            "std_dev": self.std_dev,
            "skew": self.skew,
            "non_missing_data_date1": text(self.non_missing_data_date1),
            "non_missing_data_date2": text(self.non_missing_data_date2),
            "data_units": self.data_units,
            "found": self.found,
        }

    def summary(self) -> str:
        """
        Generate a human-readable summary.

        Returns:
            Summary string
        """
        units = self.data_units
        count = self.missing_data_count + self.non_missing_data_count
        missing_percent = 100.0 * self.missing_data_count / count if count else 0.0
        non_missing_percent = 100.0 * self.non_missing_data_count / count if count else 0.0
        lines = [
            f"Min:    {self.min_value:20.4f}{units} on {self.min_value_date}",
            f"Max:    {self.max_value:20.4f}{units} on {self.max_value_date}",
            f"Sum:    {self.sum:20.4f}{units}",
            f"Mean:   {self.mean:20.4f}{units}",
            f"Median: {self.median:20.4f}{units}",
            f"StdDev: {self.std_dev:20.4f}{units}",
            f"Skew:   {self.skew:20.4f}",
            f"Number Missing:     {self.missing_data_count} ({missing_percent:.2f}%)",
            f"Number Not Missing: {self.non_missing_data_count} ({non_missing_percent:.2f}%)",
            f"Total period: {self.date1} to {self.date2}",
            f"Non-missing data period: {self.non_missing_data_date1} to "
            f"{self.non_missing_data_date2}",
        ]
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.summary()
