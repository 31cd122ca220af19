"""Notification entity for the FleetBook application."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from fleetbook.core.errors import ValidationError


class NotificationType(Enum):
    """Kinds of notifications sent to drivers."""
    NEW_TRIP = "new_trip"
    STARTING_SOON = "starting_soon"
    TRIP_STARTED = "trip_started"
    TRIP_ENDED = "trip_ended"


@dataclass
class Notification:
    """
    Represents a notification addressed to a driver.

    Attributes:
        id: Unique identifier for the notification
        driver_id: ID of the target driver
        type: Kind of notification
        title: Short title
        message: Notification body
        trip_id: ID of the related booking, if any
        read: Whether the driver has read it
        shown: Whether it has already been delivered to the driver's device
        created_at: ISO timestamp of when it was created
    """
    id: str
    driver_id: str
    type: NotificationType
    title: str
    message: str
    trip_id: Optional[str] = None
    read: bool = False
    shown: bool = False
    created_at: Optional[str] = None

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Notification":
        """
        Build a Notification from a store record.

        Raises:
            ValidationError: If a required field is missing or the kind is unknown
        """
        for key in ("id", "driverId", "type"):
            if not record.get(key):
                raise ValidationError(f"Notification record is missing '{key}'.")
        try:
            kind = NotificationType(record["type"])
        except ValueError:
            raise ValidationError(f"Unknown notification type {record['type']!r}.")

        return cls(
            id=str(record["id"]),
            driver_id=str(record["driverId"]),
            type=kind,
            title=record.get("title") or "",
            message=record.get("message") or "",
            trip_id=record.get("tripId"),
            read=bool(record.get("read", False)),
            shown=bool(record.get("shown", False)),
            created_at=record.get("createdAt"),
        )

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "driverId": self.driver_id,
            "tripId": self.trip_id,
            "type": self.type.value,
            "title": self.title,
            "message": self.message,
            "read": self.read,
            "shown": self.shown,
            "createdAt": self.created_at,
        }
