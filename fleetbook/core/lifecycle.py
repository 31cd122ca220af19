"""Booking lifecycle state machine.

States and transitions::

    reserved --start_trip--> in_trip --end_trip--> completed
    reserved --cancel------> cancelled

Every transition returns a new :class:`Booking`. A rejected transition
raises before anything is built, so the caller's booking is unchanged.
"""

import math
from dataclasses import replace
from datetime import datetime
from typing import Any, Optional

from fleetbook.core.errors import IllegalTransitionError, ValidationError
from fleetbook.models.booking import Booking, BookingState, BookingStatus

DISTANCE_PRECISION = 2


def parse_odometer(value: Any) -> float:
    """
    Parse an odometer reading in km.

    Raises:
        ValidationError: If the reading is missing, non-numeric, not finite or negative
    """
    if isinstance(value, bool) or value is None or value == "":
        raise ValidationError("Please enter a valid odometer reading.")
    try:
        reading = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Please enter a valid odometer reading (got {value!r}).")
    if not math.isfinite(reading) or reading < 0:
        raise ValidationError(f"Please enter a valid odometer reading (got {value!r}).")
    return reading


def compute_distance(start_reading: float, end_reading: float) -> float:
    """
    Distance travelled between two odometer readings, rounded to 2 decimals.

    Raises:
        ValidationError: If the end reading is below the start reading
    """
    distance = round(end_reading - start_reading, DISTANCE_PRECISION)
    if distance < 0:
        raise ValidationError(
            f"End reading ({end_reading:g} km) cannot be less than "
            f"start reading ({start_reading:g} km)."
        )
    return distance


def _require_state(booking: Booking, expected: BookingState, action: str) -> None:
    if booking.state is not expected:
        raise IllegalTransitionError(
            f"Cannot {action} booking {booking.id}: it is {booking.state.value.replace('_', ' ')}."
        )


def start_trip(booking: Booking, odometer: Any, now: datetime) -> Booking:
    """Move a reserved booking into a trip, recording the start reading."""
    _require_state(booking, BookingState.RESERVED, "start a trip for")
    reading = parse_odometer(odometer)
    return replace(
        booking,
        trip_started=True,
        trip_start_time=now,
        start_meter_reading=reading,
    )


def end_trip(booking: Booking, odometer: Any, now: datetime) -> Booking:
    """Complete a trip in progress, recording the end reading and distance."""
    _require_state(booking, BookingState.IN_TRIP, "end the trip of")
    reading = parse_odometer(odometer)

    distance: Optional[float] = None
    # Trips started before readings were mandatory have no start reading
    if booking.start_meter_reading is not None:
        distance = compute_distance(booking.start_meter_reading, reading)

    return replace(
        booking,
        status=BookingStatus.COMPLETED,
        trip_end_time=now,
        end_meter_reading=reading,
        distance_traveled=distance,
    )


def cancel(booking: Booking) -> Booking:
    """
    Cancel a reserved booking.

    Trips already started cannot be cancelled; they can only be ended.
    """
    _require_state(booking, BookingState.RESERVED, "cancel")
    return replace(booking, status=BookingStatus.CANCELLED)
