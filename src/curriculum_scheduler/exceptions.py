"""Exceptions raised by the curriculum scheduler."""


class SchedulingError(Exception):
    """Base class for scheduler errors."""


class InvalidScheduleData(SchedulingError, ValueError):
    """Raised when a schedule supplied from outside cannot be parsed."""

    def __init__(self, message: str, errors=None):
        super().__init__(message)
        self.errors = list(errors or [])
