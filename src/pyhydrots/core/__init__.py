"""Core data structures for pyhydrots."""

from __future__ import annotations

from pyhydrots.core.calendar import (
    YearType,
    absolute_day,
    absolute_month,
    day_of_year,
    is_leap_year,
    num_days_in_month,
    num_days_in_months,
    num_days_in_year,
)
from pyhydrots.core.daily import DailySeries
from pyhydrots.core.date_time import DateTime, DateTimeFlag, Precision
from pyhydrots.core.exceptions import (
    DataLimitsError,
    InvalidDateTimeError,
    InvalidTimeIntervalError,
    PropertyFileError,
    PyHydroTSError,
    TimeSeriesError,
)
from pyhydrots.core.interval import (
    IntervalBase,
    TimeInterval,
    interval_name,
    is_regular_interval,
    parse_interval,
)
from pyhydrots.core.limits import ArrayReturnType, LimitsFlag, TimeSeriesLimits, to_array
from pyhydrots.core.monthly import MonthlySeries
from pyhydrots.core.period import Period, get_valid_period
from pyhydrots.core.properties import HowSet, Prop, PropList
from pyhydrots.core.timeseries import TimeSeries
from pyhydrots.core.tsid import TSIdent, identifier_from_parts, split_with_quotes
from pyhydrots.core.utilities import (
    SERIES_TYPES,
    PeriodType,
    calculate_data_size,
    get_period_from_ts,
    intervals_match,
    new_time_series,
    series_class_for_interval,
)

__all__ = [
    # Calendar
    "YearType",
    "absolute_day",
    "absolute_month",
    "day_of_year",
    "is_leap_year",
    "num_days_in_month",
    "num_days_in_months",
    "num_days_in_year",
    # Intervals and dates
    "IntervalBase",
    "TimeInterval",
    "interval_name",
    "is_regular_interval",
    "parse_interval",
    "DateTime",
    "DateTimeFlag",
    "Precision",
    # Identifiers
    "TSIdent",
    "identifier_from_parts",
    "split_with_quotes",
    # Series
    "TimeSeries",
    "DailySeries",
    "MonthlySeries",
    # Statistics
    "TimeSeriesLimits",
    "LimitsFlag",
    "ArrayReturnType",
    "to_array",
    # Utilities
    "Period",
    "PeriodType",
    "SERIES_TYPES",
    "calculate_data_size",
    "get_period_from_ts",
    "get_valid_period",
    "intervals_match",
    "new_time_series",
    "series_class_for_interval",
    # Properties
    "HowSet",
    "Prop",
    "PropList",
    # Exceptions
    "PyHydroTSError",
    "TimeSeriesError",
    "DataLimitsError",
    "InvalidTimeIntervalError",
    "InvalidDateTimeError",
    "PropertyFileError",
]
