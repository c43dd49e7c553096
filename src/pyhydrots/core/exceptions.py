"""Custom exceptions for pyhydrots package."""

from __future__ import annotations


class PyHydroTSError(Exception):
    """Base exception for all pyhydrots errors."""

    pass


class TimeSeriesError(PyHydroTSError):
    """Error related to time series operations."""

    pass


class DataLimitsError(TimeSeriesError):
    """Error raised when statistics cannot be computed for a series."""

    def __init__(self, message: str, identifier: str | None = None) -> None:
        super().__init__(message)
        self.identifier = identifier


class InvalidTimeIntervalError(PyHydroTSError, ValueError):
    """Error raised when an interval string cannot be parsed."""

    pass


class InvalidDateTimeError(PyHydroTSError, ValueError):
    """Error raised when a date/time string cannot be parsed."""

    pass


class PropertyFileError(PyHydroTSError):
    """Error raised when a persistent property file cannot be read."""

    def __init__(self, message: str, line_number: int | None = None) -> None:
        super().__init__(message)
        self.line_number = line_number
