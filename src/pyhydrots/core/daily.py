"""
Daily time series.

Values are stored in one bucket per calendar month of the period.  Each
bucket is sized to the actual number of days in its month, so a value is
found at ``(absolute_month - allocated_start_absolute_month, day - 1)``.
The buckets keep the layout of the period they were allocated for, even if
the period dates are changed later.
"""

from __future__ import annotations

import logging

from pyhydrots.core.calendar import num_days_in_month, num_days_in_months
from pyhydrots.core.date_time import DateTime
from pyhydrots.core.interval import IntervalBase
from pyhydrots.core.timeseries import TimeSeries
from pyhydrots.core.tsid import TSIdent

logger = logging.getLogger(__name__)


class DailySeries(TimeSeries):
    """
    Time series with a one-day interval.

    Example:
        >>> ts = DailySeries("08123.USGS.Streamflow.Day")
        >>> ts.date1 = DateTime.parse("2000-01-15")
        >>> ts.date2 = DateTime.parse("2000-03-10")
        >>> ts.allocate_data_space()
        0
        >>> ts.data_size
        56
    """

    def __init__(self, identifier: TSIdent | str | None = None) -> None:
        super().__init__(identifier)
        self.set_data_interval(IntervalBase.DAY, 1)
        self.set_data_interval_original(IntervalBase.DAY, 1)

    @staticmethod
    def calculate_data_size(
        start: DateTime | None, end: DateTime | None, multiplier: int = 1
    ) -> int:
        """
        Return the number of days from ``start`` to ``end`` inclusive.

        Args:
            start: First date
            end: Last date
            multiplier: Interval multiplier; only 1 is supported

        Returns:
            Number of daily values, or 0 if the arguments are not usable
        """
        if start is None or end is None:
            logger.warning("Cannot calculate daily data size - period dates are not set")
            return 0
        if multiplier != 1:
            logger.warning(
                "Daily data size for multiplier %d is not supported - only 1Day", multiplier
            )
            return 0
        total = num_days_in_months(start.month, start.year, end.month, end.year)
        # Days before start in its month and after end in its month
        total -= start.day - 1
        total -= num_days_in_month(end.month, end.year) - end.day
        return total

    def allocate_data_space(self, value: float | None = None) -> int:
        if self._date1 is None or self._date2 is None:
            logger.warning("Dates have not been set - cannot allocate data space")
            return 1
        if self._data_interval_mult != 1:
            logger.warning(
                "Only 1Day interval is supported - cannot allocate %dDay data space",
                self._data_interval_mult,
            )
            return 1

        nmonths = self._date2.absolute_month - self._date1.absolute_month + 1
        if nmonths <= 0:
            logger.warning(
                "End date %s is before start date %s - cannot allocate data space",
                self._date2,
                self._date1,
            )
            return 1

        sizes = []
        year = self._date1.year
        month = self._date1.month
        for _ in range(nmonths):
            sizes.append(num_days_in_month(month, year))
            month += 1
            if month > 12:
                month = 1
                year += 1

        self._allocate_buckets(sizes, value)
        self._data_size = self.calculate_data_size(self._date1, self._date2, 1)
        return 0

    def get_data_position(self, date: DateTime | None) -> tuple[int, int] | None:
        if date is None or self._data_date1 is None:
            return None
        return date.absolute_month - self._data_date1.absolute_month, date.day - 1
