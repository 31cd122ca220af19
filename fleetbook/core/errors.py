"""Error kinds raised or returned by the booking core."""


class BookingError(Exception):
    """Base class for booking domain errors.

    Domain errors are never retried automatically: retrying with the same
    input reproduces the same rejection.
    """


class ValidationError(BookingError):
    """Raised for malformed or missing input (bad dates, bad odometer readings)."""


class ConflictError(BookingError):
    """Raised when a candidate booking overlaps an active booking of the same car."""


class AvailabilityError(BookingError):
    """Raised when a car is blocked for the requested same-day slot."""


class IllegalTransitionError(BookingError):
    """Raised when a lifecycle action is not allowed from the booking's state."""


class PermissionDeniedError(BookingError):
    """Raised when the caller may not act on a booking or record."""


class StorageError(Exception):
    """Raised when a document store read or write fails."""


class NotFoundError(StorageError):
    """Raised when a point read finds no record with the requested id."""
