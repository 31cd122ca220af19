"""Booking entity for the FleetBook application."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from fleetbook.core.errors import ValidationError
from fleetbook.core.timerange import parse_instant


class BookingStatus(Enum):
    """Statuses stored on a booking record."""
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class BookingState(Enum):
    """Lifecycle states of a booking, derived from status and trip flag."""
    RESERVED = "reserved"
    IN_TRIP = "in_trip"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class Delegate:
    """Administrator who booked on behalf of the requester."""
    id: str
    name: str
    email: str

    def to_record(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "email": self.email}


@dataclass(frozen=True)
class Booking:
    """
    Represents a car reservation for a time window.

    Bookings are immutable values: lifecycle transitions return a new
    Booking and leave the original untouched.

    Attributes:
        id: Unique identifier for the booking
        car_id: ID of the booked car
        user_id: ID of the employee the car is booked for
        user_name: Display name of the requester
        user_email: Email of the requester
        start: Start of the booking window (inclusive)
        end: End of the booking window (exclusive)
        purpose: Free-text purpose of the trip
        status: Stored booking status
        trip_started: Whether the trip has been started
        booked_by: Administrator who booked on someone else's behalf
        trip_start_time: When the trip was started
        trip_end_time: When the trip was ended
        start_meter_reading: Odometer reading at trip start (km)
        end_meter_reading: Odometer reading at trip end (km)
        distance_traveled: end_meter_reading - start_meter_reading (km)
        created_at: When the booking was created
    """
    id: str
    car_id: str
    user_id: str
    user_name: str
    user_email: str
    start: datetime
    end: datetime
    purpose: str = ""
    status: BookingStatus = BookingStatus.ACTIVE
    trip_started: bool = False
    booked_by: Optional[Delegate] = None
    trip_start_time: Optional[datetime] = None
    trip_end_time: Optional[datetime] = None
    start_meter_reading: Optional[float] = None
    end_meter_reading: Optional[float] = None
    distance_traveled: Optional[float] = None
    created_at: Optional[datetime] = field(default=None, compare=False)

    @property
    def state(self) -> BookingState:
        if self.status is BookingStatus.CANCELLED:
            return BookingState.CANCELLED
        if self.status is BookingStatus.COMPLETED:
            return BookingState.COMPLETED
        return BookingState.IN_TRIP if self.trip_started else BookingState.RESERVED

    @property
    def is_active(self) -> bool:
        """Active bookings count toward conflict checks."""
        return self.status is BookingStatus.ACTIVE

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Booking":
        """
        Build a Booking from a store record.

        Raises:
            ValidationError: If a required field is missing or malformed
        """
        for key in ("id", "carId", "startDate", "endDate"):
            if not record.get(key):
                raise ValidationError(f"Booking record is missing '{key}'.")
        try:
            status = BookingStatus(record.get("status") or BookingStatus.ACTIVE.value)
        except ValueError:
            raise ValidationError(f"Unknown booking status {record.get('status')!r}.")

        delegate = record.get("bookedBy")
        return cls(
            id=str(record["id"]),
            car_id=str(record["carId"]),
            user_id=str(record.get("userId") or ""),
            user_name=record.get("userName") or "",
            user_email=record.get("userEmail") or "",
            start=parse_instant(record["startDate"], "startDate"),
            end=parse_instant(record["endDate"], "endDate"),
            purpose=record.get("purpose") or "",
            status=status,
            trip_started=bool(record.get("tripStarted", False)),
            booked_by=Delegate(
                id=str(delegate.get("id") or ""),
                name=delegate.get("name") or "",
                email=delegate.get("email") or "",
            ) if delegate else None,
            trip_start_time=_optional_instant(record, "tripStartTime"),
            trip_end_time=_optional_instant(record, "tripEndTime"),
            start_meter_reading=_optional_float(record, "startMeterReading"),
            end_meter_reading=_optional_float(record, "endMeterReading"),
            distance_traveled=_optional_float(record, "distanceTraveled"),
            created_at=_optional_instant(record, "createdAt"),
        )

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "carId": self.car_id,
            "userId": self.user_id,
            "userName": self.user_name,
            "userEmail": self.user_email,
            "bookedBy": self.booked_by.to_record() if self.booked_by else None,
            "startDate": self.start.isoformat(),
            "endDate": self.end.isoformat(),
            "purpose": self.purpose,
            "status": self.status.value,
            "tripStarted": self.trip_started,
            "tripStartTime": _iso(self.trip_start_time),
            "tripEndTime": _iso(self.trip_end_time),
            "startMeterReading": self.start_meter_reading,
            "endMeterReading": self.end_meter_reading,
            "distanceTraveled": self.distance_traveled,
            "createdAt": _iso(self.created_at),
        }


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def _optional_instant(record: Dict[str, Any], key: str) -> Optional[datetime]:
    value = record.get(key)
    return parse_instant(value, key) if value else None


def _optional_float(record: Dict[str, Any], key: str) -> Optional[float]:
    value = record.get(key)
    if value is None or value == "":
        return None
    try:
        # distanceTraveled was historically stored as a "12.34" string
        return float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid {key}: {value!r}")
