"""Car entity for the FleetBook application."""

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Optional

from fleetbook.core.errors import ValidationError


@dataclass
class Car:
    """
    Represents a company car that employees can book.

    Attributes:
        id: Unique identifier for the car
        model: Display model name
        plate: License plate
        seats: Number of seats
        driver_id: ID of the assigned driver, if any
        available_today: Whether the car may be booked for today
        unavailable_since: Day the car was marked unavailable
    """
    id: str
    model: str
    plate: str
    seats: int = 5
    driver_id: Optional[str] = None
    available_today: bool = True
    unavailable_since: Optional[date] = None

    def is_blocked_on(self, today: date) -> bool:
        """
        Check whether the same-day block applies on ``today``.

        A block only ever covers the day it was set. A marker from an
        earlier day is stale and no longer blocks anything.
        """
        if self.available_today:
            return False
        return self.unavailable_since is None or self.unavailable_since == today

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Car":
        """Build a Car from a store record."""
        if not record.get("id"):
            raise ValidationError("Car record is missing an id.")
        since = record.get("unavailableSince")
        try:
            unavailable_since = date.fromisoformat(since[:10]) if since else None
            seats = int(record.get("seats") or 5)
        except (TypeError, ValueError):
            raise ValidationError(f"Malformed car record {record.get('id')}.")
        return cls(
            id=str(record["id"]),
            model=record.get("model") or "Unknown",
            plate=record.get("plate") or "",
            seats=seats,
            driver_id=record.get("driverId") or None,
            # Cars created before the flag existed are bookable
            available_today=record.get("availableToday", True) is not False,
            unavailable_since=unavailable_since,
        )

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "model": self.model,
            "plate": self.plate,
            "seats": self.seats,
            "driverId": self.driver_id,
            "availableToday": self.available_today,
            "unavailableSince": self.unavailable_since.isoformat() if self.unavailable_since else None,
        }
