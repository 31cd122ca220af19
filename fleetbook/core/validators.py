"""Validation of booking requests before they reach the checks."""

from datetime import datetime
from typing import Tuple

from fleetbook.core.errors import ValidationError
from fleetbook.core.timerange import Instant, parse_instant


def validate_booking_window(start: Instant, end: Instant, now: datetime) -> Tuple[datetime, datetime]:
    """
    Parse and validate a requested booking window.

    Args:
        start: Requested start (datetime or ISO string)
        end: Requested end (datetime or ISO string)
        now: Current time supplied by the caller, converted like start and end

    Returns:
        Tuple[datetime, datetime]: The parsed (start, end)

    Raises:
        ValidationError: If a date is malformed, start is in the past,
            or end is not after start
    """
    now = parse_instant(now, "now")
    start_at = parse_instant(start, "start date")
    end_at = parse_instant(end, "end date")

    if start_at < now:
        raise ValidationError("Start date cannot be in the past.")
    if end_at <= start_at:
        raise ValidationError("End date must be after start date.")

    return start_at, end_at
