# apps/analytics/exceptions.py


class AnalyticsError(Exception):
    """Base class for errors raised by the analytics engine."""


class InvalidDateRange(AnalyticsError, ValueError):
    """A date could not be parsed, or a range ends before it starts."""

    def __init__(self, message, start=None, end=None):
        super().__init__(message)
        self.start = start
        self.end = end
