"""Car service for the FleetBook application."""

from datetime import date
from typing import Any, Dict, List, Optional

from fleetbook.core import clock
from fleetbook.core.errors import ValidationError
from fleetbook.models.car import Car
from fleetbook.models.employee import Role
from fleetbook.services.auth_service import AccountKind, AuthService
from fleetbook.services.store import DocumentStore


EDITABLE_FIELDS = ("model", "plate", "seats")


class CarService:
    """Service for managing the company's cars."""

    @staticmethod
    def list_cars(token: str) -> List[Dict[str, Any]]:
        """List every car, ordered by model name. Any signed-in user may list."""
        AuthService.require_role(token, [Role.ADMIN.value, Role.EMPLOYEE.value, AccountKind.DRIVER.value])
        cars = DocumentStore.list("cars")
        cars.sort(key=lambda c: (c.get("model") or "").lower())
        return cars

    @staticmethod
    def get_car(car_id: str) -> Car:
        """
        Get a car by its ID.

        Raises:
            NotFoundError: If no car has this ID
        """
        return Car.from_record(DocumentStore.get("cars", car_id))

    @staticmethod
    def add_car(token: str, model: str, plate: str, seats: int = 5) -> Dict[str, Any]:
        """
        Add a car to the fleet (admin only).

        Raises:
            ValidationError: If a field is missing or the plate is taken
            AuthError: If the caller is not an admin
        """
        AuthService.require_role(token, [Role.ADMIN.value])
        CarService._validate(model, plate, seats)

        if DocumentStore.query("cars", plate=plate.strip()):
            raise ValidationError(f"A car with plate {plate} is already registered.")

        return DocumentStore.create("cars", {
            "model": model.strip(),
            "plate": plate.strip(),
            "seats": int(seats),
            "driverId": None,
            "availableToday": True,
            "unavailableSince": None,
        })

    @staticmethod
    def update_car(token: str, car_id: str, update_data: Dict[str, Any]) -> Dict[str, Any]:
        """Update a car's model, plate or seats (admin only). Other fields are ignored."""
        AuthService.require_role(token, [Role.ADMIN.value])
        current = CarService.get_car(car_id)

        fields = {k: v for k, v in update_data.items() if k in EDITABLE_FIELDS and v is not None}
        if not fields:
            raise ValidationError("No car fields to update.")

        CarService._validate(
            fields.get("model", current.model),
            fields.get("plate", current.plate),
            fields.get("seats", current.seats),
        )
        return DocumentStore.update("cars", car_id, fields)

    @staticmethod
    def delete_car(token: str, car_id: str) -> None:
        """
        Delete a car (admin only).

        Bookings of the car are kept; they are never deleted by the booking core.
        """
        AuthService.require_role(token, [Role.ADMIN.value])
        DocumentStore.delete("cars", car_id)

    @staticmethod
    def set_availability(token: str, car_id: str, available: bool,
                         today: Optional[date] = None) -> Dict[str, Any]:
        """
        Mark a car available or unavailable for today (admin only).

        Marking a car unavailable records today's date; the block lapses on
        its own once the day is over.
        """
        AuthService.require_role(token, [Role.ADMIN.value])
        CarService.get_car(car_id)

        today = today or clock.today()
        return DocumentStore.update("cars", car_id, {
            "availableToday": available,
            "unavailableSince": None if available else today.isoformat(),
        })

    @staticmethod
    def _validate(model: str, plate: str, seats: Any) -> None:
        if not model or not str(model).strip():
            raise ValidationError("Car model is required.")
        if not plate or not str(plate).strip():
            raise ValidationError("Car plate is required.")
        try:
            seats = int(seats)
        except (TypeError, ValueError):
            raise ValidationError(f"Invalid seat count: {seats!r}")
        if seats < 1:
            raise ValidationError("A car needs at least one seat.")
