"""Driver management service for the FleetBook application."""

import logging
from typing import Any, Dict, List, Optional

from fleetbook.core.errors import NotFoundError, ValidationError
from fleetbook.models.driver import Driver
from fleetbook.models.employee import Role
from fleetbook.services.auth_service import AuthService
from fleetbook.services.car_service import CarService
from fleetbook.services.store import DocumentStore

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("name", "email", "phone", "license", "carId")


class DriverService:
    """Service for managing drivers and their car assignments (admin only)."""

    @staticmethod
    def list_drivers(token: str) -> List[Dict[str, Any]]:
        AuthService.require_role(token, [Role.ADMIN.value])
        drivers = DocumentStore.list("drivers")
        drivers.sort(key=lambda d: (d.get("name") or "").lower())
        return drivers

    @staticmethod
    def get_driver(driver_id: str) -> Driver:
        return Driver.from_record(DocumentStore.get("drivers", driver_id))

    @staticmethod
    def add_driver(token: str, name: str, email: str, phone: str = "", license: str = "",
                   car_id: Optional[str] = None) -> Dict[str, Any]:
        """
        Add a driver, optionally assigning a car.

        Raises:
            ValidationError: If name or email is missing or the email is taken
            NotFoundError: If the car does not exist
        """
        AuthService.require_role(token, [Role.ADMIN.value])
        if not name or not name.strip():
            raise ValidationError("Driver name is required.")
        if not email or "@" not in email:
            raise ValidationError("A valid driver email is required.")

        email = email.strip().lower()
        if DocumentStore.query("drivers", email=email):
            raise ValidationError(f"A driver with email {email} already exists.")
        if car_id:
            CarService.get_car(car_id)

        driver = DocumentStore.create("drivers", {
            "name": name.strip(),
            "email": email,
            "phone": phone,
            "license": license,
            "carId": car_id or None,
        })
        if car_id:
            DriverService._assign_car(driver["id"], None, car_id)
        return driver

    @staticmethod
    def update_driver(token: str, driver_id: str, update_data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Update a driver. Changing ``carId`` moves the car assignment too.

        Pass ``carId=""`` to unassign the driver's car.
        """
        AuthService.require_role(token, [Role.ADMIN.value])
        current = DriverService.get_driver(driver_id)

        fields = {k: v for k, v in update_data.items() if k in EDITABLE_FIELDS and v is not None}
        if not fields:
            raise ValidationError("No driver fields to update.")
        if "email" in fields:
            fields["email"] = fields["email"].strip().lower()
        if "carId" in fields:
            fields["carId"] = fields["carId"] or None
            if fields["carId"]:
                CarService.get_car(fields["carId"])

        updated = DocumentStore.update("drivers", driver_id, fields)
        if "carId" in fields and fields["carId"] != current.car_id:
            DriverService._assign_car(driver_id, current.car_id, fields["carId"])
        return updated

    @staticmethod
    def delete_driver(token: str, driver_id: str) -> None:
        """Delete a driver and clear the assignment on their car."""
        AuthService.require_role(token, [Role.ADMIN.value])
        driver = DriverService.get_driver(driver_id)
        DocumentStore.delete("drivers", driver_id)
        DriverService._assign_car(driver_id, driver.car_id, None)

    @staticmethod
    def _assign_car(driver_id: str, old_car_id: Optional[str], new_car_id: Optional[str]) -> None:
        """Keep ``cars.driverId`` in step with ``drivers.carId``."""
        if old_car_id:
            try:
                old_car = CarService.get_car(old_car_id)
                if old_car.driver_id == driver_id:
                    DocumentStore.update("cars", old_car_id, {"driverId": None})
            except NotFoundError:
                logger.warning(f"Driver {driver_id} was assigned to missing car {old_car_id}")
        if new_car_id:
            DocumentStore.update("cars", new_car_id, {"driverId": driver_id})
