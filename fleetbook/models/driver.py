"""Driver entity for the FleetBook application."""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from fleetbook.core.errors import ValidationError


@dataclass
class Driver:
    """
    Represents a company driver.

    Attributes:
        id: Unique identifier for the driver
        name: Driver's full name
        email: Driver's email address (used to sign in)
        phone: Driver's phone number
        license: Driver's license number
        car_id: ID of the car assigned to the driver
    """
    id: str
    name: str
    email: str = ""
    phone: str = ""
    license: str = ""
    car_id: Optional[str] = None

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Driver":
        """Build a Driver from a store record."""
        if not record.get("id"):
            raise ValidationError("Driver record is missing an id.")
        return cls(
            id=str(record["id"]),
            name=record.get("name") or "",
            email=(record.get("email") or "").lower(),
            phone=record.get("phone") or "",
            license=record.get("license") or "",
            car_id=record.get("carId") or None,
        )

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "license": self.license,
            "carId": self.car_id,
        }
