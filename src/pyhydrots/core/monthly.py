"""
Monthly time series.

Values are stored in one 12-slot bucket per calendar year of the period, so
a value is found at ``(year - allocated_start_year, month - 1)``.  Slots in the
first and last years that fall outside the allocated period stay at the fill
value.
"""

from __future__ import annotations

import logging

from pyhydrots.core.date_time import DateTime
from pyhydrots.core.interval import IntervalBase
from pyhydrots.core.timeseries import TimeSeries
from pyhydrots.core.tsid import TSIdent

logger = logging.getLogger(__name__)


class MonthlySeries(TimeSeries):
    """Time series with a one-month interval."""

    def __init__(self, identifier: TSIdent | str | None = None) -> None:
        super().__init__(identifier)
        self.set_data_interval(IntervalBase.MONTH, 1)
        self.set_data_interval_original(IntervalBase.MONTH, 1)
        self._min_amon = 0
        self._max_amon = 0

    @staticmethod
    def calculate_data_size(
        start: DateTime | None, end: DateTime | None, multiplier: int = 1
    ) -> int:
        """
        Return the number of months from ``start`` to ``end`` inclusive.

        Returns:
            Number of monthly values, or 0 if the arguments are not usable
        """
        if start is None or end is None:
            logger.warning("Cannot calculate monthly data size - period dates are not set")
            return 0
        if multiplier != 1:
            logger.warning(
                "Monthly data size for multiplier %d is not supported - only 1Month",
                multiplier,
            )
            return 0
        return end.absolute_month - start.absolute_month + 1

    @property
    def min_amon(self) -> int:
        """Absolute month of the first date of the allocated period."""
        return self._min_amon

    @property
    def max_amon(self) -> int:
        """Absolute month of the last date of the allocated period."""
        return self._max_amon

    def allocate_data_space(self, value: float | None = None) -> int:
        if self._date1 is None or self._date2 is None:
            logger.warning("Dates have not been set - cannot allocate data space")
            return 1
        if self._data_interval_mult != 1:
            logger.warning(
                "Only 1Month interval is supported - cannot allocate %dMonth data space",
                self._data_interval_mult,
            )
            return 1

        nyears = self._date2.year - self._date1.year + 1
        if nyears <= 0 or self._date2.less_than(self._date1):
            logger.warning(
                "End date %s is before start date %s - cannot allocate data space",
                self._date2,
                self._date1,
            )
            return 1

        self._allocate_buckets([12] * nyears, value)
        self._data_size = self.calculate_data_size(self._date1, self._date2, 1)
        self._min_amon = self._date1.absolute_month
        self._max_amon = self._date2.absolute_month
        return 0

    def _in_allocation(self, date: DateTime) -> bool:
        return self._min_amon <= date.absolute_month <= self._max_amon

    def get_data_position(self, date: DateTime | None) -> tuple[int, int] | None:
        if date is None or self._data_date1 is None:
            return None
        return date.year - self._data_date1.year, date.month - 1
