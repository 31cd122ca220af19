"""Scheduling rule for "trip starting soon" notifications.

The sweep itself (reading the store, writing notifications) lives in
:class:`fleetbook.services.notification_service.NotificationService`.
This module only decides which bookings are due.
"""

from datetime import datetime
from typing import Container, Iterable, List

from fleetbook import config
from fleetbook.core.timerange import parse_instant
from fleetbook.models.booking import Booking, BookingState


def minutes_until_start(booking: Booking, now: datetime) -> float:
    return (booking.start - parse_instant(now, "now")).total_seconds() / 60


def in_starting_soon_window(booking: Booking, now: datetime,
                            low: float = config.STARTING_SOON_MIN_MINUTES,
                            high: float = config.STARTING_SOON_MAX_MINUTES) -> bool:
    """
    Check whether a booking starts within ``[low, high]`` minutes.

    The window is centred on the one-hour mark and wide enough that a sweep
    every ten minutes sees each booking at least once.
    """
    return low <= minutes_until_start(booking, now) <= high


def select_due_bookings(bookings: Iterable[Booking], now: datetime,
                        already_notified: Container[str]) -> List[Booking]:
    """
    Bookings that should receive a "starting soon" notification now.

    Only reserved bookings (active, trip not started) qualify, and a booking
    whose id is in ``already_notified`` is skipped so repeated sweeps never
    notify twice.
    """
    return [
        booking for booking in bookings
        if booking.state is BookingState.RESERVED
        and booking.id not in already_notified
        and in_starting_soon_window(booking, now)
    ]
