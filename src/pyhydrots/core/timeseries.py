"""
Time series base class.

This module provides :class:`TimeSeries`, the header and storage base shared
by the interval-specific series classes.  It holds the identifier, period,
interval, units, missing-value policy and provenance; subclasses supply the
bucketed storage layout and the date-to-cell mapping.
"""

from __future__ import annotations

import logging
import math
import sys
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Iterator

import numpy as np
from numpy.typing import NDArray

from pyhydrots.core.date_time import DateTime, DateTimeFlag
from pyhydrots.core.exceptions import DataLimitsError
from pyhydrots.core.interval import IntervalBase, is_regular_interval
from pyhydrots.core.tsid import TSIdent

if TYPE_CHECKING:
    from pyhydrots.core.limits import TimeSeriesLimits

logger = logging.getLogger(__name__)

DEFAULT_MISSING = -999.0

# Half-width of the band around the missing value treated as missing
MISSING_TOLERANCE = 0.001


class TimeSeries(ABC):
    """
    Abstract regular-interval time series.

    Dates returned by the period properties are copies; changing them does
    not change the series.  Dates assigned to the period properties are
    copied and truncated to the series interval.

    Args:
        identifier: TSIdent or identifier string; copied into the series

    Attributes:
        description: Free-form description
        legend: Legend label for plots
        extended_legend: Longer legend label
        input_name: File or table the data came from
        version: Data version
        status: Free-form status text
        enabled: Whether the series is enabled for processing
        selected: Whether the series is selected in a listing
        editable: Whether the data may be edited
    """

    def __init__(self, identifier: TSIdent | str | None = None) -> None:
        self._id = TSIdent()
        if identifier is not None:
            self.identifier = identifier

        self._date1: DateTime | None = None
        self._date2: DateTime | None = None
        self._date1_original: DateTime | None = None
        self._date2_original: DateTime | None = None
        self._data_date1: DateTime | None = None
        self._data_date2: DateTime | None = None

        self._data_interval_base = IntervalBase.UNKNOWN
        self._data_interval_mult = 1
        self._data_interval_base_original = IntervalBase.UNKNOWN
        self._data_interval_mult_original = 1

        self._data_units = ""
        self._data_units_original = ""

        self._missing = DEFAULT_MISSING
        self._missing_lower = DEFAULT_MISSING - MISSING_TOLERANCE
        self._missing_upper = DEFAULT_MISSING + MISSING_TOLERANCE

        self._data: list[NDArray[np.float64]] | None = None
        self._data_flags: list[list[str]] | None = None
        self._has_data_flags = False
        self._data_size = 0
        self._dirty = False
        self._data_limits: TimeSeriesLimits | None = None

        self._genesis: list[str] = []
        self._comments: list[str] = []
        self._properties: dict[str, Any] = {}

        self.description = ""
        self.legend = ""
        self.extended_legend = ""
        self.input_name = ""
        self.version = ""
        self.status = ""
        self.enabled = True
        self.selected = False
        self.editable = False

    # ------------------------------------------------------------------
    # Identifier
    # ------------------------------------------------------------------

    @property
    def identifier(self) -> TSIdent:
        """Identifier owned by this series."""
        return self._id

    @identifier.setter
    def identifier(self, value: TSIdent | str) -> None:
        if isinstance(value, TSIdent):
            self._id = value.copy()
        else:
            self._id = TSIdent(value)

    @property
    def identifier_string(self) -> str:
        return self._id.identifier

    @property
    def location(self) -> str:
        return self._id.location

    @property
    def data_type(self) -> str:
        return self._id.data_type

    @data_type.setter
    def data_type(self, value: str) -> None:
        self._id.data_type = value

    # ------------------------------------------------------------------
    # Period
    # ------------------------------------------------------------------

    def _copy_date_in(self, date: DateTime | None) -> DateTime | None:
        if date is None:
            return None
        copy = date.copy()
        if is_regular_interval(self._data_interval_base):
            copy.set_precision(self._data_interval_base)
        return copy

    @property
    def date1(self) -> DateTime | None:
        """First date of the period (a copy)."""
        return self._date1.copy() if self._date1 is not None else None

    @date1.setter
    def date1(self, value: DateTime | None) -> None:
        self._date1 = self._copy_date_in(value)

    @property
    def date2(self) -> DateTime | None:
        """Last date of the period (a copy)."""
        return self._date2.copy() if self._date2 is not None else None

    @date2.setter
    def date2(self, value: DateTime | None) -> None:
        self._date2 = self._copy_date_in(value)

    @property
    def date1_original(self) -> DateTime | None:
        """First date of the original data source (a copy)."""
        return self._date1_original.copy() if self._date1_original is not None else None

    @date1_original.setter
    def date1_original(self, value: DateTime | None) -> None:
        self._date1_original = self._copy_date_in(value)

    @property
    def date2_original(self) -> DateTime | None:
        """Last date of the original data source (a copy)."""
        return self._date2_original.copy() if self._date2_original is not None else None

    @date2_original.setter
    def date2_original(self, value: DateTime | None) -> None:
        self._date2_original = self._copy_date_in(value)

    @property
    def allocated_date1(self) -> DateTime | None:
        """First date of the allocated storage (a copy), or None."""
        return self._data_date1.copy() if self._data_date1 is not None else None

    @property
    def allocated_date2(self) -> DateTime | None:
        """Last date of the allocated storage (a copy), or None."""
        return self._data_date2.copy() if self._data_date2 is not None else None

    # ------------------------------------------------------------------
    # Interval and units
    # ------------------------------------------------------------------

    @property
    def data_interval_base(self) -> IntervalBase:
        return self._data_interval_base

    @property
    def data_interval_mult(self) -> int:
        return self._data_interval_mult

    @property
    def data_interval_base_original(self) -> IntervalBase:
        return self._data_interval_base_original

    @property
    def data_interval_mult_original(self) -> int:
        return self._data_interval_mult_original

    def set_data_interval(self, base: int, multiplier: int) -> None:
        self._data_interval_base = IntervalBase(base)
        self._data_interval_mult = multiplier

    def set_data_interval_original(self, base: int, multiplier: int) -> None:
        self._data_interval_base_original = IntervalBase(base)
        self._data_interval_mult_original = multiplier

    @property
    def data_units(self) -> str:
        return self._data_units

    @data_units.setter
    def data_units(self, value: str) -> None:
        self._data_units = value or ""

    @property
    def data_units_original(self) -> str:
        return self._data_units_original

    @data_units_original.setter
    def data_units_original(self, value: str) -> None:
        self._data_units_original = value or ""

    # ------------------------------------------------------------------
    # Missing values
    # ------------------------------------------------------------------

    @property
    def missing(self) -> float:
        """Missing-data sentinel value."""
        return self._missing

    @missing.setter
    def missing(self, value: float) -> None:
        self._missing = value
        if math.isnan(value):
            self._missing_lower = math.nan
            self._missing_upper = math.nan
        elif value == sys.float_info.max:
            self._missing_lower = value - MISSING_TOLERANCE
            self._missing_upper = value
        else:
            self._missing_lower = value - MISSING_TOLERANCE
            self._missing_upper = value + MISSING_TOLERANCE

    @property
    def missing_range(self) -> tuple[float, float]:
        """Lower and upper bounds of values treated as missing."""
        return self._missing_lower, self._missing_upper

    def is_data_missing(self, value: float) -> bool:
        """
        Return True if ``value`` is a missing value.

        NaN is always missing.  Otherwise the value is missing when it falls
        within the tolerance band around the sentinel.
        """
        if math.isnan(value):
            return True
        if math.isnan(self._missing):
            return False
        return self._missing_lower <= value <= self._missing_upper

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def dirty(self) -> bool:
        """True if data changed since statistics were last computed."""
        return self._dirty

    @dirty.setter
    def dirty(self, value: bool) -> None:
        self._dirty = value

    @property
    def data_size(self) -> int:
        """Number of values in the allocated period."""
        return self._data_size

    @property
    def is_allocated(self) -> bool:
        return self._data is not None

    @property
    def has_data_flags(self) -> bool:
        """Whether a per-value flag string is stored alongside each value."""
        return self._has_data_flags

    @has_data_flags.setter
    def has_data_flags(self, value: bool) -> None:
        self._has_data_flags = value
        if value and self._data is not None and self._data_flags is None:
            self._allocate_flag_space()
        elif not value:
            self._data_flags = None

    @property
    def data_limits(self) -> TimeSeriesLimits | None:
        """Statistics from the last :meth:`refresh`, or None."""
        return self._data_limits

    # ------------------------------------------------------------------
    # Provenance and properties
    # ------------------------------------------------------------------

    @property
    def genesis(self) -> list[str]:
        """Provenance notes, oldest first (a copy)."""
        return list(self._genesis)

    def add_to_genesis(self, note: str) -> None:
        if note is not None:
            self._genesis.append(note)

    @property
    def comments(self) -> list[str]:
        return list(self._comments)

    def add_to_comments(self, comment: str) -> None:
        if comment is not None:
            self._comments.append(comment)

    @property
    def properties(self) -> dict[str, Any]:
        return dict(self._properties)

    def set_property(self, name: str, value: Any) -> None:
        self._properties[name] = value

    def get_property(self, name: str, default: Any = None) -> Any:
        return self._properties.get(name, default)

    # ------------------------------------------------------------------
    # Storage
    # ------------------------------------------------------------------

    def _allocate_buckets(self, sizes: list[int], value: float | None) -> None:
        fill = self._missing if value is None else value
        self._data = [np.full(size, fill, dtype=np.float64) for size in sizes]
        self._data_date1 = self._date1.copy()
        self._data_date2 = self._date2.copy()
        if self._has_data_flags:
            self._allocate_flag_space()
        else:
            self._data_flags = None
        self._dirty = False
        self._data_limits = None

    def _allocate_flag_space(self) -> None:
        if self._data is None:
            return
        self._data_flags = [[""] * len(bucket) for bucket in self._data]

    def _in_allocation(self, date: DateTime) -> bool:
        return not (date.less_than(self._data_date1) or date.greater_than(self._data_date2))

    def _in_period(self, date: DateTime) -> bool:
        """True if ``date`` is within both the period and the allocated storage."""
        if self._date1 is None or self._date2 is None or self._data_date1 is None:
            return False
        # Compare at the series interval, not at the precision of the argument
        check = self._copy_date_in(date)
        if check.less_than(self._date1) or check.greater_than(self._date2):
            return False
        return self._in_allocation(check)

    @abstractmethod
    def allocate_data_space(self, value: float | None = None) -> int:
        """
        Allocate storage for the period, filling every cell.

        Args:
            value: Fill value; defaults to the missing value

        Returns:
            0 on success, 1 on failure (the reason is logged)
        """

    @abstractmethod
    def get_data_position(self, date: DateTime | None) -> tuple[int, int] | None:
        """Return ``(bucket, offset)`` relative to the allocated start, or None."""

    def set_data_value(
        self, date: DateTime, value: float, data_flag: str | None = None
    ) -> None:
        """
        Set the value at a date.

        Dates outside the period, or outside the storage allocated for an
        earlier period, are ignored.  A successful write marks the
        series dirty.

        Args:
            date: Date of the value
            value: Value to store
            data_flag: Optional flag string; turns on flag storage if needed
        """
        if self._data is None or not self._in_period(date):
            return
        row, column = self.get_data_position(date)
        self._data[row][column] = value
        if data_flag is not None:
            if self._data_flags is None:
                self.has_data_flags = True
            self._data_flags[row][column] = data_flag
        self._dirty = True

    def get_data_value(self, date: DateTime) -> float:
        """Return the value at a date, or the missing value outside the period."""
        if self._data is None or not self._in_period(date):
            return self._missing
        row, column = self.get_data_position(date)
        return float(self._data[row][column])

    def get_data_flag(self, date: DateTime) -> str:
        """Return the flag at a date, or an empty string if none is stored."""
        if self._data_flags is None or not self._in_period(date):
            return ""
        row, column = self.get_data_position(date)
        return self._data_flags[row][column]

    def iter_data(
        self, start: DateTime | None = None, end: DateTime | None = None
    ) -> Iterator[tuple[DateTime, float]]:
        """
        Iterate over ``(date, value)`` pairs at the series interval.

        Args:
            start: First date (default: start of period)
            end: Last date (default: end of period)

        Yields:
            Tuples of a date copy and its value
        """
        first = start if start is not None else self._date1
        last = end if end is not None else self._date2
        if first is None or last is None:
            return
        date = self._copy_date_in(first)
        date.set_precision(DateTimeFlag.FAST)
        stop = self._copy_date_in(last)
        while not date.greater_than(stop):
            current = date.copy()
            current.set_precision(DateTimeFlag.STRICT)
            current.reset()
            yield current, self.get_data_value(current)
            date.add_interval(self._data_interval_base, self._data_interval_mult)

    def refresh(self) -> None:
        """Recompute the data limits and clear the dirty flag."""
        from pyhydrots.core.limits import TimeSeriesLimits

        if self._data is None:
            return
        try:
            self._data_limits = TimeSeriesLimits.compute(self)
        except DataLimitsError as exc:
            logger.warning("Unable to compute limits for '%s': %s", self.identifier_string, exc)
            self._data_limits = None
        self._dirty = False

    def to_dataframe(self):
        """
        Convert to a pandas DataFrame.

        Returns:
            DataFrame indexed by date with one column named by the identifier
        """
        import pandas as pd

        dates = []
        values = []
        for date, value in self.iter_data():
            dates.append(date.to_datetime())
            values.append(np.nan if self.is_data_missing(value) else value)

        return pd.DataFrame(
            {self.identifier_string or "value": values},
            index=pd.DatetimeIndex(dates),
        )

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(id='{self.identifier_string}', "
            f"period={self._date1} to {self._date2})"
        )
