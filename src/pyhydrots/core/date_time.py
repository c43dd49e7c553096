"""
Mutable calendar timestamp with precision.

:class:`DateTime` stores year through hundredth-of-second fields together
with a precision that decides which fields are significant.  Fields below
the precision are truncated when the precision is set and are ignored by
comparisons.

Two behavior modes are supported:

- STRICT (default): every field assignment is validated against calendar
  bounds and the derived fields (day of year, leap-year flag) are kept
  current.  Invalid assignments are logged and ignored.
- FAST: no validation and no derived-field upkeep, for tight loops that
  step through long periods one interval at a time.  Call :meth:`reset`
  before reading derived fields.

The absolute month (``year * 12 + month``) is maintained in both modes.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime
from enum import IntEnum, IntFlag

from pyhydrots.core.calendar import (
    absolute_day,
    absolute_month,
    day_of_year,
    is_leap_year,
    num_days_in_month,
)
from pyhydrots.core.exceptions import InvalidDateTimeError
from pyhydrots.core.interval import IntervalBase

logger = logging.getLogger(__name__)

# Precision values occupy the low byte of a behavior mask
PRECISION_MASK = 0xFF


class Precision(IntEnum):
    """DateTime precision, sharing values with :class:`IntervalBase`."""

    UNKNOWN = -1
    HSECOND = 5
    SECOND = 10
    MINUTE = 20
    HOUR = 30
    DAY = 40
    MONTH = 60
    YEAR = 70


class DateTimeFlag(IntFlag):
    """Behavior modifiers combined with a precision in a single mask."""

    NONE = 0
    STRICT = 0x1000
    FAST = 0x2000
    ZERO = 0x4000
    CURRENT = 0x8000
    TIME_ONLY = 0x10000
    USE_TIME_ZONE = 0x20000


# Fields in comparison order with the precision at which each stops mattering
_FIELD_ORDER = (
    ("_year", Precision.YEAR),
    ("_month", Precision.MONTH),
    ("_day", Precision.DAY),
    ("_hour", Precision.HOUR),
    ("_minute", Precision.MINUTE),
    ("_second", Precision.SECOND),
    ("_hsecond", Precision.HSECOND),
)

_DATE_PATTERNS = (
    (re.compile(r"^(?P<year>-?\d{1,4})$"), Precision.YEAR),
    (re.compile(r"^(?P<year>\d{4})-(?P<month>\d{1,2})$"), Precision.MONTH),
    (re.compile(r"^(?P<month>\d{1,2})/(?P<year>\d{4})$"), Precision.MONTH),
    (
        re.compile(r"^(?P<month>\d{1,2})/(?P<day>\d{1,2})/(?P<year>\d{4})$"),
        Precision.DAY,
    ),
    (
        re.compile(
            r"^(?P<year>\d{4})-(?P<month>\d{1,2})-(?P<day>\d{1,2})"
            r"(?:[ T](?P<hour>\d{1,2})"
            r"(?::(?P<minute>\d{2})"
            r"(?::(?P<second>\d{2})"
            r"(?::(?P<hsecond>\d{2}))?)?)?)?"
            r"(?:\s+(?P<tz>[A-Za-z][\w+\-]*))?$"
        ),
        None,
    ),
)


def _modifiers(flags: int) -> int:
    """Strip the precision and initialization bits from a behavior mask."""
    return int(flags) & ~PRECISION_MASK & ~int(DateTimeFlag.CURRENT)


def _validation_error(
    year: int,
    month: int,
    day: int,
    hour: int,
    minute: int,
    second: int,
    hsecond: int,
) -> str | None:
    if month < 1 or month > 12:
        return f"month {month} must be 1-12"
    ndays = num_days_in_month(month, year)
    if day < 1 or day > ndays:
        return f"day {day} must be 1-{ndays} for {year}-{month:02d}"
    if hour < 0 or hour > 23:
        return f"hour {hour} must be 0-23"
    if minute < 0 or minute > 59:
        return f"minute {minute} must be 0-59"
    if second < 0 or second > 59:
        return f"second {second} must be 0-59"
    if hsecond < 0 or hsecond > 99:
        return f"hundredth-second {hsecond} must be 0-99"
    return None


class DateTime:
    """
    Calendar timestamp with precision and STRICT/FAST behavior.

    Args:
        flags: Combination of one :class:`Precision` value and
            :class:`DateTimeFlag` modifiers.  CURRENT initializes to the
            current time, otherwise the date is zeroed (year 0, January 1).
            FAST disables validation; STRICT is the default.

    Example:
        >>> d = DateTime.from_parts(2000, 2, 28, precision=Precision.DAY)
        >>> d.add_day(1)
        >>> str(d)
        '2000-02-29'
    """

    # Mutable value type
    __hash__ = None  # type: ignore[assignment]

    def __init__(self, flags: int = 0) -> None:
        self._year = 0
        self._month = 1
        self._day = 1
        self._hour = 0
        self._minute = 0
        self._second = 0
        self._hsecond = 0
        self._tz = ""
        self._precision = Precision.SECOND
        self._fast = bool(flags & DateTimeFlag.FAST)
        self._use_time_zone = False
        self._time_only = False
        self._is_leap = False
        self._year_day = 0
        self._abs_month = 0

        if flags & DateTimeFlag.CURRENT:
            self._set_to_current()
        self.set_precision(flags)
        self.reset()

    # ------------------------------------------------------------------
    # Alternate constructors
    # ------------------------------------------------------------------

    @classmethod
    def from_parts(
        cls,
        year: int,
        month: int = 1,
        day: int = 1,
        hour: int = 0,
        minute: int = 0,
        second: int = 0,
        hsecond: int = 0,
        *,
        precision: Precision | None = None,
        flags: int = 0,
    ) -> DateTime:
        """
        Create a DateTime from individual fields.

        Fields are assigned through the validating setters, so in STRICT
        mode an invalid field is logged and left at its initial value.

        Args:
            year: Year
            month: Month (1-12)
            day: Day of month
            hour: Hour (0-23)
            minute: Minute (0-59)
            second: Second (0-59)
            hsecond: Hundredth of a second (0-99)
            precision: Precision to apply after assignment; defaults to the
                precision bits in ``flags`` or SECOND
            flags: Behavior mask (FAST, USE_TIME_ZONE, TIME_ONLY, ...)
        """
        dt = cls(_modifiers(flags))
        dt.year = year
        dt.month = month
        dt.day = day
        dt.hour = hour
        dt.minute = minute
        dt.second = second
        dt.hsecond = hsecond
        if precision is not None:
            dt.set_precision(precision)
        elif flags & PRECISION_MASK:
            dt.set_precision(flags & PRECISION_MASK)
        return dt

    @classmethod
    def from_datetime(cls, d: datetime, flags: int = 0) -> DateTime:
        """Create a DateTime from a :class:`datetime.datetime`."""
        dt = cls(_modifiers(flags))
        dt._year = d.year
        dt._month = d.month
        dt._day = d.day
        dt._hour = d.hour
        dt._minute = d.minute
        dt._second = d.second
        dt._hsecond = d.microsecond // 10000
        if d.tzinfo is not None:
            tz_name = d.tzname()
            if tz_name:
                dt.set_time_zone(tz_name)
        dt.set_precision(flags & PRECISION_MASK or Precision.HSECOND)
        dt.reset()
        return dt

    @classmethod
    def now(cls, precision: Precision = Precision.SECOND) -> DateTime:
        """Return the current local time at the given precision."""
        return cls(DateTimeFlag.CURRENT | precision)

    @classmethod
    def parse(cls, text: str, flags: int = 0) -> DateTime:
        """
        Parse a date/time string.

        Recognized formats, with the precision they imply::

            YYYY                      YEAR
            YYYY-MM, MM/YYYY          MONTH
            YYYY-MM-DD, MM/DD/YYYY    DAY
            YYYY-MM-DD HH             HOUR
            YYYY-MM-DD HH:mm          MINUTE
            YYYY-MM-DD HH:mm:SS       SECOND
            YYYY-MM-DD HH:mm:SS:hh    HSECOND

        A ``T`` may replace the space and a trailing time zone word may
        follow the time.

        Args:
            text: String to parse
            flags: Additional behavior modifiers (e.g., FAST)

        Returns:
            Parsed DateTime

        Raises:
            InvalidDateTimeError: If the string is not a recognized format or
                holds an out-of-range field
        """
        s = text.strip()
        for pattern, precision in _DATE_PATTERNS:
            match = pattern.match(s)
            if match is None:
                continue
            parts = match.groupdict()
            fields = {
                name: int(parts[name]) if parts.get(name) else default
                for name, default in (
                    ("year", 0),
                    ("month", 1),
                    ("day", 1),
                    ("hour", 0),
                    ("minute", 0),
                    ("second", 0),
                    ("hsecond", 0),
                )
            }
            if precision is None:
                if parts["hsecond"]:
                    precision = Precision.HSECOND
                elif parts["second"]:
                    precision = Precision.SECOND
                elif parts["minute"]:
                    precision = Precision.MINUTE
                elif parts["hour"]:
                    precision = Precision.HOUR
                else:
                    precision = Precision.DAY
            error = _validation_error(**fields)
            if error is not None:
                raise InvalidDateTimeError(f"Invalid date/time '{text}': {error}")

            dt = cls(_modifiers(flags))
            dt._year = fields["year"]
            dt._month = fields["month"]
            dt._day = fields["day"]
            dt._hour = fields["hour"]
            dt._minute = fields["minute"]
            dt._second = fields["second"]
            dt._hsecond = fields["hsecond"]
            if parts.get("tz"):
                dt.set_time_zone(parts["tz"])
            dt.set_precision(precision)
            dt.reset()
            return dt

        raise InvalidDateTimeError(f"Unrecognized date/time format: '{text}'")

    def copy(self) -> DateTime:
        """Return an independent copy."""
        other = DateTime.__new__(DateTime)
        other.__dict__.update(self.__dict__)
        return other

    def __copy__(self) -> DateTime:
        return self.copy()

    def __deepcopy__(self, memo: dict) -> DateTime:
        return self.copy()

    # ------------------------------------------------------------------
    # Fields
    # ------------------------------------------------------------------

    @property
    def year(self) -> int:
        return self._year

    @year.setter
    def year(self, value: int) -> None:
        self._year = value
        self._update_derived()

    @property
    def month(self) -> int:
        return self._month

    @month.setter
    def month(self, value: int) -> None:
        if not self._fast and (value < 1 or value > 12):
            logger.warning("Trying to set invalid month (%d) in DateTime - must be 1-12", value)
            return
        self._month = value
        self._update_derived()

    @property
    def day(self) -> int:
        return self._day

    @day.setter
    def day(self, value: int) -> None:
        if not self._fast:
            ndays = num_days_in_month(self._month, self._year)
            if value < 1 or value > ndays:
                logger.warning(
                    "Trying to set invalid day (%d) in DateTime for %04d-%02d - must be 1-%d",
                    value,
                    self._year,
                    self._month,
                    ndays,
                )
                return
        self._day = value
        self._update_derived()

    @property
    def hour(self) -> int:
        return self._hour

    @hour.setter
    def hour(self, value: int) -> None:
        if not self._fast and (value < 0 or value > 23):
            logger.warning("Trying to set invalid hour (%d) in DateTime - must be 0-23", value)
            return
        self._hour = value

    @property
    def minute(self) -> int:
        return self._minute

    @minute.setter
    def minute(self, value: int) -> None:
        if not self._fast and (value < 0 or value > 59):
            logger.warning("Trying to set invalid minute (%d) in DateTime - must be 0-59", value)
            return
        self._minute = value

    @property
    def second(self) -> int:
        return self._second

    @second.setter
    def second(self, value: int) -> None:
        if not self._fast and (value < 0 or value > 59):
            logger.warning("Trying to set invalid second (%d) in DateTime - must be 0-59", value)
            return
        self._second = value

    @property
    def hsecond(self) -> int:
        """Hundredths of a second (0-99)."""
        return self._hsecond

    @hsecond.setter
    def hsecond(self, value: int) -> None:
        if not self._fast and (value < 0 or value > 99):
            logger.warning(
                "Trying to set invalid hundredth-second (%d) in DateTime - must be 0-99",
                value,
            )
            return
        self._hsecond = value

    @property
    def time_zone(self) -> str:
        return self._tz

    @time_zone.setter
    def time_zone(self, value: str) -> None:
        self.set_time_zone(value)

    def set_time_zone(self, zone: str) -> None:
        """Set the time zone tag; a non-empty tag turns time zone use on."""
        self._tz = zone or ""
        self._use_time_zone = bool(self._tz)

    @property
    def precision(self) -> Precision:
        return self._precision

    @property
    def use_time_zone(self) -> bool:
        return self._use_time_zone

    @property
    def time_only(self) -> bool:
        return self._time_only

    @property
    def is_fast(self) -> bool:
        """True if validation and derived-field upkeep are disabled."""
        return self._fast

    @property
    def absolute_month(self) -> int:
        """``year * 12 + month``, always consistent with the fields."""
        return self._abs_month

    @property
    def absolute_day(self) -> int:
        """Proleptic Gregorian day number (0001-01-01 is day 1)."""
        return absolute_day(self._year, self._month, self._day)

    @property
    def year_day(self) -> int:
        """Day of the year; stale in FAST mode until :meth:`reset`."""
        return self._year_day

    @property
    def is_leap_year(self) -> bool:
        """Leap-year flag; stale in FAST mode until :meth:`reset`."""
        return self._is_leap

    # ------------------------------------------------------------------
    # Derived fields and precision
    # ------------------------------------------------------------------

    def _update_derived(self) -> None:
        self._abs_month = absolute_month(self._month, self._year)
        if self._fast:
            return
        self._is_leap = is_leap_year(self._year)
        self._year_day = self._compute_year_day()

    def _compute_year_day(self) -> int:
        if 1 <= self._month <= 12:
            return day_of_year(self._day, self._month, self._year)
        return 0

    def reset(self) -> None:
        """Recompute all derived fields, regardless of mode."""
        self._abs_month = absolute_month(self._month, self._year)
        self._is_leap = is_leap_year(self._year)
        self._year_day = self._compute_year_day()

    def _set_to_current(self) -> None:
        now = datetime.now()
        self._year = now.year
        self._month = now.month
        self._day = now.day
        self._hour = now.hour
        self._minute = now.minute
        self._second = now.second
        self._hsecond = now.microsecond // 10000

    def set_precision(self, flags: int, cumulative: bool = True) -> DateTime:
        """
        Set the precision and behavior modifiers from a bit mask.

        Fields below the new precision are truncated (month and day to 1,
        time fields to 0).  If the mask holds no precision, the current
        precision is kept.

        Args:
            flags: Precision value combined with :class:`DateTimeFlag` bits
            cumulative: If True, modifiers absent from ``flags`` keep their
                current state; if False they are reset to defaults

        Returns:
            This instance, to allow chained calls
        """
        try:
            precision = Precision(int(flags) & PRECISION_MASK)
        except ValueError:
            precision = None
        if precision is not None:
            if precision == Precision.YEAR:
                self._month = 1
            if precision >= Precision.MONTH:
                self._day = 1
            if precision >= Precision.DAY:
                self._hour = 0
            if precision >= Precision.HOUR:
                self._minute = 0
            if precision >= Precision.MINUTE:
                self._second = 0
            if precision >= Precision.SECOND:
                self._hsecond = 0
            self._precision = precision
            self._update_derived()

        if flags & DateTimeFlag.USE_TIME_ZONE:
            self._use_time_zone = True
        elif not cumulative:
            self._use_time_zone = False

        if flags & DateTimeFlag.TIME_ONLY:
            self._time_only = True
        elif not cumulative:
            self._time_only = False

        if flags & DateTimeFlag.FAST:
            self._fast = True
        elif flags & DateTimeFlag.STRICT or not cumulative:
            self._fast = False
        return self

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------

    def add_year(self, n: int) -> None:
        """Add years; month and day are not adjusted for leap years."""
        self._year += n
        self._update_derived()

    def add_month(self, n: int) -> None:
        """Add months one at a time, carrying into the year."""
        step = 1 if n > 0 else -1
        for _ in range(abs(n)):
            self._month += step
            if self._month > 12:
                self._month = 1
                self._year += 1
            elif self._month < 1:
                self._month = 12
                self._year -= 1
        self._update_derived()

    def add_day(self, n: int) -> None:
        """Add days one at a time, using each month's length in its own year."""
        if n > 0:
            for _ in range(n):
                ndays = num_days_in_month(self._month, self._year)
                self._day += 1
                if self._day > ndays:
                    self._day = 1
                    self.add_month(1)
        elif n < 0:
            for _ in range(-n):
                self._day -= 1
                if self._day < 1:
                    self.add_month(-1)
                    self._day = num_days_in_month(self._month, self._year)
        self._update_derived()

    def add_hour(self, n: int) -> None:
        days, self._hour = divmod(self._hour + n, 24)
        if days:
            self.add_day(days)

    def add_minute(self, n: int) -> None:
        hours, self._minute = divmod(self._minute + n, 60)
        if hours:
            self.add_hour(hours)

    def add_second(self, n: int) -> None:
        minutes, self._second = divmod(self._second + n, 60)
        if minutes:
            self.add_minute(minutes)

    def add_hsecond(self, n: int) -> None:
        seconds, self._hsecond = divmod(self._hsecond + n, 100)
        if seconds:
            self.add_second(seconds)

    def add_interval(self, base: int, multiplier: int) -> None:
        """
        Add ``multiplier`` intervals of ``base``.

        WEEK adds ``7 * multiplier`` days.  IRREGULAR is a no-op.

        Raises:
            ValueError: If ``base`` is not a known interval base
        """
        if base == IntervalBase.IRREGULAR:
            return
        if base == IntervalBase.WEEK:
            self.add_day(7 * multiplier)
            return
        adders = {
            IntervalBase.HSECOND: self.add_hsecond,
            IntervalBase.SECOND: self.add_second,
            IntervalBase.MINUTE: self.add_minute,
            IntervalBase.HOUR: self.add_hour,
            IntervalBase.DAY: self.add_day,
            IntervalBase.MONTH: self.add_month,
            IntervalBase.YEAR: self.add_year,
        }
        if base not in adders:
            raise ValueError(f"Cannot add unknown interval base: {base}")
        adders[base](multiplier)

    # ------------------------------------------------------------------
    # Comparison
    # ------------------------------------------------------------------

    def _compare(self, other: DateTime) -> int:
        # Receiver's precision controls how many fields are compared
        for name, level in _FIELD_ORDER:
            if self._time_only and level >= Precision.DAY:
                continue
            mine = getattr(self, name)
            theirs = getattr(other, name)
            if mine < theirs:
                return -1
            if mine > theirs:
                return 1
            if level <= self._precision:
                break
        return 0

    def less_than(self, other: DateTime) -> bool:
        """True if earlier than ``other`` at this instance's precision."""
        return self._compare(other) < 0

    def less_than_or_equal_to(self, other: DateTime) -> bool:
        return self._compare(other) <= 0

    def greater_than(self, other: DateTime) -> bool:
        """True if later than ``other`` at this instance's precision."""
        return self._compare(other) > 0

    def greater_than_or_equal_to(self, other: DateTime) -> bool:
        return self._compare(other) >= 0

    def equals(self, other: DateTime) -> bool:
        """True if equal to ``other`` at this instance's precision."""
        return self._compare(other) == 0

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DateTime):
            return NotImplemented
        return self.equals(other)

    def __lt__(self, other: DateTime) -> bool:
        return self.less_than(other)

    def __le__(self, other: DateTime) -> bool:
        return self.less_than_or_equal_to(other)

    def __gt__(self, other: DateTime) -> bool:
        return self.greater_than(other)

    def __ge__(self, other: DateTime) -> bool:
        return self.greater_than_or_equal_to(other)

    # ------------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------------

    def to_datetime(self) -> datetime:
        """Convert to a naive :class:`datetime.datetime`."""
        return datetime(
            self._year,
            self._month,
            self._day,
            self._hour,
            self._minute,
            self._second,
            self._hsecond * 10000,
        )

    def __str__(self) -> str:
        date_part = f"{self._year:04d}"
        if self._precision != Precision.YEAR:
            date_part += f"-{self._month:02d}"
            if self._precision != Precision.MONTH:
                date_part += f"-{self._day:02d}"

        time_part = ""
        if self._precision <= Precision.HOUR:
            time_part = f"{self._hour:02d}"
            if self._precision <= Precision.MINUTE:
                time_part += f":{self._minute:02d}"
                if self._precision <= Precision.SECOND:
                    time_part += f":{self._second:02d}"
                    if self._precision <= Precision.HSECOND:
                        time_part += f":{self._hsecond:02d}"

        if self._time_only:
            text = time_part
        elif time_part:
            text = f"{date_part} {time_part}"
        else:
            text = date_part

        if self._use_time_zone and self._tz:
            text = f"{text} {self._tz}"
        return text

    def __repr__(self) -> str:
        return f"DateTime('{self}', precision={self._precision.name})"
