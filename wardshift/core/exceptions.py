"""
Exception hierarchy for WardShift.

The API layer maps each subclass to an HTTP status; services raise them
before touching any state.
"""


class WardShiftError(Exception):
    """Base class for all WardShift errors."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class FormValidationError(WardShiftError):
    """A submitted form is missing a required field or has an out-of-range value."""

    status_code = 422


class NotFoundError(WardShiftError):
    status_code = 404


class ConflictError(WardShiftError):
    status_code = 409


class AuthenticationError(WardShiftError):
    status_code = 401


class PersistenceError(WardShiftError):
    """The backing store rejected or failed a write."""

    status_code = 502
