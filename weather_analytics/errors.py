from __future__ import annotations


class AnalyticsError(Exception):
    """Base class for every error raised by the analytics package."""


class InvalidRangeError(AnalyticsError, ValueError):
    """Filter start date falls after its end date, or a date does not parse."""


class DivisionByZeroError(AnalyticsError, ZeroDivisionError):
    """Percent change requested against a zero baseline."""

    def __init__(self, city: str, message: str | None = None):
        self.city = city
        super().__init__(message or f"Zero baseline temperature for city '{city}', percent change is undefined")


class EmptyInputError(AnalyticsError, ValueError):
    """Proportions requested over an empty filtered set."""


class MeasurementParseError(AnalyticsError, ValueError):
    """A measurement payload is missing fields or holds non-numeric values."""
