"""Time range helpers for booking windows.

All ranges are half-open: ``[start, end)``. A booking that ends at 12:00
and another that starts at 12:00 do not overlap.
"""

from datetime import date, datetime
from typing import Union

from fleetbook.core.errors import ValidationError

Instant = Union[datetime, str]


def parse_instant(value: Instant, field: str = "date") -> datetime:
    """
    Parse an instant from a datetime or an ISO-8601 string.

    Accepts full ISO timestamps, the ``YYYY-MM-DDTHH:MM`` form produced by
    date-time pickers and a trailing ``Z`` for UTC. Timezone-aware values
    are converted to naive local time so every instant in the core compares
    against the local clock.

    Args:
        value: The value to parse
        field: Field name used in the error message

    Returns:
        datetime: The parsed instant, naive local time

    Raises:
        ValidationError: If the value is empty or not a valid timestamp
    """
    if isinstance(value, datetime):
        parsed = value
    elif not value or not isinstance(value, str):
        raise ValidationError(f"Missing {field}.")
    else:
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            raise ValidationError(f"Invalid {field}: {value!r}")
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def overlaps(a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime) -> bool:
    """
    Check whether two half-open ranges intersect.

    Covers a range starting during, ending during or encompassing the other.
    A zero-length (or inverted) range never overlaps anything.
    """
    if a_end <= a_start or b_end <= b_start:
        return False
    return a_start < b_end and b_start < a_end


def local_date(instant: datetime) -> date:
    """Calendar date of an instant in local time. Naive instants are already local."""
    if instant.tzinfo is not None:
        instant = instant.astimezone()
    return instant.date()


def is_on_date(instant: datetime, day: date) -> bool:
    """Check whether an instant falls on the given local calendar date."""
    return local_date(instant) == day
