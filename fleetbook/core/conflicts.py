"""Booking conflict checker."""

from datetime import datetime
from typing import Iterable

from fleetbook.core.decision import Decision
from fleetbook.core.errors import ConflictError
from fleetbook.core.timerange import overlaps
from fleetbook.models.booking import Booking

DISPLAY_FORMAT = "%Y-%m-%d %H:%M"


def find_conflicts(start: datetime, end: datetime, existing: Iterable[Booking]):
    """Active bookings whose window overlaps ``[start, end)``, in input order."""
    return [
        booking for booking in existing
        if booking.is_active
        and overlaps(start, end, booking.start, booking.end)
    ]


def check_conflict(start: datetime, end: datetime, existing: Iterable[Booking]) -> Decision:
    """
    Decide whether a candidate window clashes with the car's bookings.

    ``existing`` should hold the bookings of the same car. Cancelled and
    completed bookings are ignored even if present. A linear scan is enough
    at fleet scale.

    Args:
        start: Candidate start (inclusive)
        end: Candidate end (exclusive)
        existing: Bookings already recorded for the car

    Returns:
        Decision: Accepted, or rejected with ConflictError
    """
    clashes = find_conflicts(start, end, existing)
    if not clashes:
        return Decision.accept()

    first = clashes[0]
    return Decision.reject(
        ConflictError,
        "This time slot conflicts with an existing booking "
        f"({first.start.strftime(DISPLAY_FORMAT)} - {first.end.strftime(DISPLAY_FORMAT)}). "
        "Please choose a different time.",
    )
