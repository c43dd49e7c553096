"""Period of record helpers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from pyhydrots.core.date_time import DateTime
from pyhydrots.core.exceptions import TimeSeriesError
from pyhydrots.core.interval import is_regular_interval

if TYPE_CHECKING:
    from pyhydrots.core.timeseries import TimeSeries


@dataclass
class Period:
    """
    An inclusive date range.

    Attributes:
        start: First date
        end: Last date
    """

    start: DateTime
    end: DateTime

    def contains(self, date: DateTime) -> bool:
        """Return True if ``date`` falls within the period."""
        return not (date.less_than(self.start) or date.greater_than(self.end))

    def __str__(self) -> str:
        return f"{self.start} to {self.end}"


def get_valid_period(
    ts: TimeSeries,
    start: DateTime | None = None,
    end: DateTime | None = None,
) -> Period:
    """
    Resolve a requested period against a series.

    Missing bounds are taken from the series period.  The returned dates are
    copies at the precision of the series interval.

    Args:
        ts: Time series supplying default bounds
        start: Requested first date, or None for the series start
        end: Requested last date, or None for the series end

    Returns:
        Resolved period

    Raises:
        TimeSeriesError: If a bound is not given and the series has no period
    """
    first = start.copy() if start is not None else ts.date1
    last = end.copy() if end is not None else ts.date2
    if first is None or last is None:
        raise TimeSeriesError(
            f"Period is not set for time series '{ts.identifier_string}'"
        )
    if is_regular_interval(ts.data_interval_base):
        first.set_precision(ts.data_interval_base)
        last.set_precision(ts.data_interval_base)
    return Period(start=first, end=last)
