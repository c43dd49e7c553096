"""
Utilities that operate on one or more time series.

This module selects the series class for an interval, creates new series
from identifiers, and reconciles periods of record across series.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Sequence

from pyhydrots.core.daily import DailySeries
from pyhydrots.core.date_time import DateTime
from pyhydrots.core.exceptions import DataLimitsError
from pyhydrots.core.interval import IntervalBase, parse_interval
from pyhydrots.core.limits import TimeSeriesLimits
from pyhydrots.core.monthly import MonthlySeries
from pyhydrots.core.period import Period
from pyhydrots.core.timeseries import TimeSeries
from pyhydrots.core.tsid import TSIdent

logger = logging.getLogger(__name__)


class PeriodType(Enum):
    """How periods of several series are combined."""

    MAX_POR = 0
    MIN_POR = 1
    AVAILABLE_POR = 2


# Series class for each supported interval base
SERIES_TYPES: dict[IntervalBase, type[TimeSeries]] = {
    IntervalBase.DAY: DailySeries,
    IntervalBase.MONTH: MonthlySeries,
}


def series_class_for_interval(base: int) -> type[TimeSeries] | None:
    """Return the series class storing ``base`` intervals, or None."""
    try:
        return SERIES_TYPES.get(IntervalBase(base))
    except ValueError:
        return None


def new_time_series(identifier: str, long_id: bool = True) -> TimeSeries | None:
    """
    Create an empty series of the right class for an identifier.

    Only the interval is set; the period and storage are left for the
    caller.  The identifier itself is not assigned to the series.

    Args:
        identifier: Full identifier, or only an interval string when
            ``long_id`` is False
        long_id: Whether ``identifier`` is a full identifier

    Returns:
        New DailySeries or MonthlySeries, or None if the interval is not
        supported
    """
    if long_id:
        tsid = TSIdent(identifier)
        interval_string = tsid.interval
        base = tsid.interval_base
        mult = tsid.interval_mult
    else:
        interval_string = identifier
        interval = parse_interval(identifier)
        base = interval.base if interval is not None else IntervalBase.UNKNOWN
        mult = interval.multiplier if interval is not None else 0

    series_class = series_class_for_interval(base)
    if series_class is None:
        logger.warning(
            'Cannot create a new time series for "%s" (the interval "%s" [%s] is not recognized)',
            identifier,
            interval_string,
            base,
        )
        return None

    ts = series_class()
    ts.set_data_interval(base, mult)
    ts.set_data_interval_original(base, mult)
    ts.add_to_genesis(
        f'Created new time series with interval determined from TSID "{identifier}"'
    )
    return ts


def calculate_data_size(
    start: DateTime | None, end: DateTime | None, base: int, multiplier: int = 1
) -> int:
    """
    Return the number of values between two dates for an interval.

    Returns:
        Number of values, or 0 for unsupported intervals or unset dates
    """
    series_class = series_class_for_interval(base)
    if series_class is None:
        logger.warning("Cannot calculate data size for interval base %s", base)
        return 0
    return series_class.calculate_data_size(start, end, multiplier)


def intervals_match(
    series: Sequence[TimeSeries],
    base: int | None = None,
    multiplier: int | None = None,
) -> bool:
    """
    Return True if every series has the same interval.

    Args:
        series: Time series to compare; None entries are skipped
        base: Interval base to require (default: that of the first series)
        multiplier: Interval multiplier to require (default: that of the
            first series)
    """
    valid = [ts for ts in series if ts is not None]
    if not valid:
        return True
    if base is None:
        base = valid[0].data_interval_base
    if multiplier is None:
        multiplier = valid[0].data_interval_mult
    return all(
        ts.data_interval_base == base and ts.data_interval_mult == multiplier for ts in valid
    )


def _available_period(ts: TimeSeries) -> Period | None:
    try:
        limits = TimeSeriesLimits.compute(ts)
    except DataLimitsError as exc:
        logger.warning("No available data for '%s': %s", ts.identifier_string, exc)
        return None
    return Period(start=limits.non_missing_data_date1, end=limits.non_missing_data_date2)


def get_period_from_ts(
    series: Sequence[TimeSeries | None],
    period_type: PeriodType = PeriodType.MAX_POR,
) -> Period | None:
    """
    Combine the periods of several series.

    Args:
        series: Time series; None entries and series without a period are
            skipped
        period_type: MAX_POR for the earliest start to the latest end,
            MIN_POR for the overlap, AVAILABLE_POR for the earliest to the
            latest non-missing value

    Returns:
        Combined period, or None if there is no period (or, for MIN_POR, no
        overlap)
    """
    periods: list[Period] = []
    for ts in series:
        if ts is None or ts.date1 is None or ts.date2 is None:
            continue
        if period_type == PeriodType.AVAILABLE_POR:
            if not ts.is_allocated:
                continue
            period = _available_period(ts)
            if period is not None:
                periods.append(period)
        else:
            periods.append(Period(start=ts.date1, end=ts.date2))

    if not periods:
        logger.warning("No time series with a period of record - cannot determine period")
        return None

    start = periods[0].start
    end = periods[0].end
    for period in periods[1:]:
        if period_type == PeriodType.MIN_POR:
            if period.start.greater_than(start):
                start = period.start
            if period.end.less_than(end):
                end = period.end
        else:
            if period.start.less_than(start):
                start = period.start
            if period.end.greater_than(end):
                end = period.end

    if start.greater_than(end):
        logger.warning("Time series periods do not overlap (%s to %s)", start, end)
        return None
    return Period(start=start.copy(), end=end.copy())
