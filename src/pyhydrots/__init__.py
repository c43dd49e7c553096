"""
pyhydrots - Python package for hydrologic time series.

This package provides tools for:
- Parsing and building time series identifiers (TSIDs)
- Calendar dates with precision and time intervals
- Daily and monthly time series storage
- Time series statistics and period-of-record utilities
"""

from __future__ import annotations

__version__ = "0.1.0"

from pyhydrots.config import ProgramConfig, format_output_header
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
from pyhydrots.core.interval import IntervalBase, TimeInterval, parse_interval
from pyhydrots.core.limits import TimeSeriesLimits
from pyhydrots.core.monthly import MonthlySeries
from pyhydrots.core.properties import PropList
from pyhydrots.core.timeseries import TimeSeries
from pyhydrots.core.tsid import TSIdent
from pyhydrots.core.utilities import get_period_from_ts, new_time_series

__all__ = [
    "__version__",
    # Dates and intervals
    "DateTime",
    "DateTimeFlag",
    "Precision",
    "IntervalBase",
    "TimeInterval",
    "parse_interval",
    # Identifiers
    "TSIdent",
    # Series
    "TimeSeries",
    "DailySeries",
    "MonthlySeries",
    "TimeSeriesLimits",
    "new_time_series",
    "get_period_from_ts",
    # Configuration
    "ProgramConfig",
    "PropList",
    "format_output_header",
    # Exceptions
    "PyHydroTSError",
    "TimeSeriesError",
    "DataLimitsError",
    "InvalidTimeIntervalError",
    "InvalidDateTimeError",
    "PropertyFileError",
]
