"""
Time interval parsing.

Interval strings such as ``"1Day"``, ``"6Hour"`` or ``"Month"`` are parsed into
a :class:`TimeInterval` holding an :class:`IntervalBase` and a multiplier.
The substrings that were parsed are kept so the interval can be written
back exactly as it was given.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import IntEnum

from pyhydrots.core.exceptions import InvalidTimeIntervalError

logger = logging.getLogger(__name__)


class IntervalBase(IntEnum):
    """
    Base time intervals.

    Values increase with the magnitude of the interval and are shared with
    :class:`~pyhydrots.core.date_time.Precision`.  IRREGULAR has no place in
    the ordering.
    """

    UNKNOWN = -1
    IRREGULAR = 0
    HSECOND = 5
    SECOND = 10
    MINUTE = 20
    HOUR = 30
    DAY = 40
    WEEK = 50
    MONTH = 60
    YEAR = 70


_INTERVAL_NAMES = {
    IntervalBase.UNKNOWN: "Unknown",
    IntervalBase.IRREGULAR: "Irregular",
    IntervalBase.HSECOND: "HSecond",
    IntervalBase.SECOND: "Second",
    IntervalBase.MINUTE: "Minute",
    IntervalBase.HOUR: "Hour",
    IntervalBase.DAY: "Day",
    IntervalBase.WEEK: "Week",
    IntervalBase.MONTH: "Month",
    IntervalBase.YEAR: "Year",
}

# Checked in order; "hsec" must precede "h..." and "sec" prefixes
_BASE_PREFIXES = (
    ("hsec", IntervalBase.HSECOND),
    ("sec", IntervalBase.SECOND),
    ("min", IntervalBase.MINUTE),
    ("hour", IntervalBase.HOUR),
    ("hr", IntervalBase.HOUR),
    ("day", IntervalBase.DAY),
    ("dai", IntervalBase.DAY),
    ("week", IntervalBase.WEEK),
    ("wk", IntervalBase.WEEK),
    ("mon", IntervalBase.MONTH),
    ("year", IntervalBase.YEAR),
    ("yr", IntervalBase.YEAR),
    ("annual", IntervalBase.YEAR),
    ("irr", IntervalBase.IRREGULAR),
)

_BASE_EXACT = {
    "h": IntervalBase.HOUR,
    "s": IntervalBase.SECOND,
}


def interval_name(base: int) -> str:
    """Return the canonical name of an interval base (e.g., ``"Day"``)."""
    try:
        return _INTERVAL_NAMES[IntervalBase(base)]
    except ValueError:
        return _INTERVAL_NAMES[IntervalBase.UNKNOWN]


def is_regular_interval(base: int) -> bool:
    """Return True if ``base`` is a regular (fixed-step) interval."""
    return base not in (IntervalBase.IRREGULAR, IntervalBase.UNKNOWN)


def _match_base(text: str) -> IntervalBase | None:
    key = text.lower()
    if key in _BASE_EXACT:
        return _BASE_EXACT[key]
    for prefix, base in _BASE_PREFIXES:
        if key.startswith(prefix):
            return base
    return None


@dataclass(eq=False)
class TimeInterval:
    """
    A time interval as a base and multiplier.

    Attributes:
        base: Interval base
        multiplier: Positive interval multiplier
        base_string: Base substring as parsed (e.g., ``"Day"``)
        multiplier_string: Multiplier substring as parsed (may be empty)
    """

    base: IntervalBase = IntervalBase.UNKNOWN
    multiplier: int = 1
    base_string: str = ""
    multiplier_string: str = ""

    @classmethod
    def parse(cls, s: str) -> TimeInterval:
        """
        Parse an interval string.

        A leading run of digits is the multiplier (default 1).  A string made
        only of digits is read as a number of hours.  The remaining text is
        matched, ignoring case, against known interval names by prefix.

        Args:
            s: Interval string, e.g. ``"1Day"``, ``"6hr"``, ``"Month"``

        Returns:
            Parsed TimeInterval

        Raises:
            InvalidTimeIntervalError: If the string cannot be parsed
        """
        text = s.strip()
        if not text:
            raise InvalidTimeIntervalError("Empty time interval string")

        digits = ""
        for ch in text:
            if not ch.isdigit():
                break
            digits += ch

        multiplier = int(digits) if digits else 1
        if multiplier <= 0:
            raise InvalidTimeIntervalError(
                f"Time interval multiplier must be positive: '{s}'"
            )

        if digits == text:
            # Digits only: hourly multiplier
            return cls(
                base=IntervalBase.HOUR,
                multiplier=multiplier,
                base_string="",
                multiplier_string=digits,
            )

        remainder = text[len(digits):].strip()
        base = _match_base(remainder)
        if base is None:
            raise InvalidTimeIntervalError(f"Unrecognized time interval: '{s}'")

        return cls(
            base=base,
            multiplier=multiplier,
            base_string=remainder,
            multiplier_string=digits,
        )

    @classmethod
    def from_base(cls, base: int, multiplier: int = 1) -> TimeInterval:
        """Create an interval from a base and multiplier."""
        base = IntervalBase(base)
        return cls(
            base=base,
            multiplier=multiplier,
            base_string=interval_name(base),
            multiplier_string=str(multiplier) if multiplier != 1 else "",
        )

    @property
    def is_regular(self) -> bool:
        return is_regular_interval(self.base)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TimeInterval):
            return NotImplemented
        return self.base == other.base and self.multiplier == other.multiplier

    def __hash__(self) -> int:
        return hash((int(self.base), self.multiplier))

    def __str__(self) -> str:
        if self.base_string:
            return f"{self.multiplier_string}{self.base_string}"
        if self.multiplier_string:
            return self.multiplier_string
        prefix = str(self.multiplier) if self.multiplier != 1 else ""
        return f"{prefix}{interval_name(self.base)}"


def parse_interval(s: str, quiet: bool = False) -> TimeInterval | None:
    """
    Parse an interval string, returning None on failure.

    Unlike :meth:`TimeInterval.parse`, an unrecognized string is logged as a
    warning instead of raising, so callers can try several candidates.

    Args:
        s: Interval string
        quiet: If True, do not log a warning on failure

    Returns:
        Parsed TimeInterval, or None if the string is not a valid interval
    """
    try:
        return TimeInterval.parse(s)
    except InvalidTimeIntervalError as exc:
        if not quiet:
            logger.warning("Unable to parse time interval: %s", exc)
        return None
