"""Booking service for the FleetBook application.

Ties the pure booking core (validation, availability gate, conflict
checker, lifecycle) to the document store and the signed-in principal.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from fleetbook.core import clock, lifecycle
from fleetbook.core.availability import is_bookable
from fleetbook.core.conflicts import check_conflict
from fleetbook.core.errors import PermissionDeniedError, StorageError, ValidationError
from fleetbook.core.identity import resolve_display_name
from fleetbook.core.timerange import Instant, parse_instant
from fleetbook.core.validators import validate_booking_window
from fleetbook.models.booking import Booking, BookingStatus
from fleetbook.models.car import Car
from fleetbook.models.employee import Role
from fleetbook.services.auth_service import AccountKind, AuthService
from fleetbook.services.car_service import CarService
from fleetbook.services.employee_service import EmployeeService
from fleetbook.services.notification_service import NotificationService
from fleetbook.services.store import DocumentStore

logger = logging.getLogger(__name__)

BOOKER_ROLES = [Role.ADMIN.value, Role.EMPLOYEE.value]


class BookingService:
    """Service for creating bookings and driving them through their lifecycle."""

    @staticmethod
    def create_booking(token: str, car_id: str, start: Instant, end: Instant,
                       purpose: str = "", on_behalf_of: Optional[str] = None,
                       now: Optional[datetime] = None) -> Dict[str, Any]:
        """
        Book a car for a time window.

        Args:
            token: Session token of the requester
            car_id: ID of the car to book
            start: Start of the window (datetime or ISO string)
            end: End of the window (datetime or ISO string)
            purpose: Free-text purpose of the trip
            on_behalf_of: Email of the employee to book for (admins only)
            now: Current time (defaults to the clock)

        Returns:
            Dict: The stored booking record

        Raises:
            ValidationError: If the window is malformed or in the past
            AvailabilityError: If the car is blocked for today
            ConflictError: If the window overlaps an active booking of the car
            PermissionDeniedError: If a non-admin books for someone else
            NotFoundError: If the car does not exist
        """
        principal = AuthService.require_role(token, BOOKER_ROLES)
        now = BookingService._now(now)

        start_at, end_at = validate_booking_window(start, end, now)

        car = CarService.get_car(car_id)
        is_bookable(car, start_at, end_at, now.date()).raise_for_rejection()

        existing = BookingService._active_bookings_for_car(car_id)
        check_conflict(start_at, end_at, existing).raise_for_rejection()

        requester = BookingService._requester(principal, on_behalf_of)
        record = DocumentStore.create("bookings", {
            "carId": car_id,
            "userId": requester["id"],
            "userName": requester["name"],
            "userEmail": requester["email"],
            "bookedBy": requester.get("bookedBy"),
            "startDate": start_at.isoformat(),
            "endDate": end_at.isoformat(),
            "purpose": purpose or "",
            "status": BookingStatus.ACTIVE.value,
            "tripStarted": False,
            "createdAt": now.isoformat(),
        })
        logger.info(f"Booked car {car_id} for {requester['email']} "
                    f"from {start_at.isoformat()} to {end_at.isoformat()}")

        booking = Booking.from_record(record)
        BookingService._notify(NotificationService.notify_new_trip, booking, car)
        return record

    @staticmethod
    def start_trip(token: str, booking_id: str, odometer: Any,
                   now: Optional[datetime] = None) -> Dict[str, Any]:
        """
        Start the trip of one of the caller's reserved bookings.

        Raises:
            ValidationError: If the odometer reading is invalid
            IllegalTransitionError: If the booking is not reserved
            PermissionDeniedError: If the booking belongs to someone else
        """
        principal = AuthService.require_role(token, BOOKER_ROLES)
        booking = BookingService._get_booking(booking_id)
        BookingService._require_owner(principal, booking)

        started = lifecycle.start_trip(booking, odometer, BookingService._now(now))
        record = DocumentStore.update("bookings", booking.id, {
            "tripStarted": True,
            "tripStartTime": started.trip_start_time.isoformat(),
            "startMeterReading": started.start_meter_reading,
        })

        BookingService._notify(NotificationService.notify_trip_started, started)
        return record

    @staticmethod
    def end_trip(token: str, booking_id: str, odometer: Any,
                 now: Optional[datetime] = None) -> Dict[str, Any]:
        """
        End a trip in progress and record the distance travelled.

        An end reading below the start reading is rejected and nothing is
        written.

        Raises:
            ValidationError: If the odometer reading is invalid or too low
            IllegalTransitionError: If the trip is not in progress
            PermissionDeniedError: If the booking belongs to someone else
        """
        principal = AuthService.require_role(token, BOOKER_ROLES)
        booking = BookingService._get_booking(booking_id)
        BookingService._require_owner(principal, booking)

        ended = lifecycle.end_trip(booking, odometer, BookingService._now(now))
        record = DocumentStore.update("bookings", booking.id, {
            "status": ended.status.value,
            "tripEndTime": ended.trip_end_time.isoformat(),
            "endMeterReading": ended.end_meter_reading,
            "distanceTraveled": ended.distance_traveled,
        })

        BookingService._notify(NotificationService.notify_trip_ended, ended)
        return record

    @staticmethod
    def cancel_booking(token: str, booking_id: str) -> Dict[str, Any]:
        """
        Cancel a reserved booking. Owners and admins may cancel.

        Raises:
            IllegalTransitionError: If the trip already started or the booking is closed
            PermissionDeniedError: If the caller is neither owner nor admin
        """
        principal = AuthService.require_role(token, BOOKER_ROLES)
        booking = BookingService._get_booking(booking_id)
        if principal["role"] != Role.ADMIN.value:
            BookingService._require_owner(principal, booking)

        cancelled = lifecycle.cancel(booking)
        logger.info(f"Booking {booking.id} cancelled by {principal['email']}")
        return DocumentStore.update("bookings", booking.id, {"status": cancelled.status.value})

    @staticmethod
    def get_user_bookings(token: str) -> List[Dict[str, Any]]:
        """Get the caller's own bookings, latest start first."""
        principal = AuthService.require_role(token, BOOKER_ROLES)
        bookings = DocumentStore.query("bookings", userId=principal["id"])
        bookings.sort(key=lambda b: b.get("startDate") or "", reverse=True)
        return bookings

    @staticmethod
    def get_all_bookings(token: str) -> List[Dict[str, Any]]:
        """Get every booking, newest first (admin only)."""
        AuthService.require_role(token, [Role.ADMIN.value])
        bookings = DocumentStore.list("bookings")
        bookings.sort(key=lambda b: b.get("createdAt") or "", reverse=True)
        return bookings

    @staticmethod
    def get_driver_trips(token: str) -> List[Dict[str, Any]]:
        """
        Get the active trips of the signed-in driver's car, earliest first.

        Drivers without a car have no trips.
        """
        principal = AuthService.require_role(token, [AccountKind.DRIVER.value])
        car_id = principal["driver"].car_id
        if not car_id:
            return []

        trips = DocumentStore.query("bookings", carId=car_id, status=BookingStatus.ACTIVE.value)
        trips.sort(key=lambda b: b.get("startDate") or "")
        return trips

    @staticmethod
    def _now(now: Optional[datetime]) -> datetime:
        """The injected time as naive local time, or the clock."""
        return parse_instant(now, "now") if now else clock.now()

    @staticmethod
    def _get_booking(booking_id: str) -> Booking:
        return Booking.from_record(DocumentStore.get("bookings", booking_id))

    @staticmethod
    def _active_bookings_for_car(car_id: str) -> List[Booking]:
        bookings = []
        for record in DocumentStore.query("bookings", carId=car_id, status=BookingStatus.ACTIVE.value):
            try:
                bookings.append(Booking.from_record(record))
            except ValidationError as e:
                logger.warning(f"Ignoring malformed booking {record.get('id')} in conflict check: {e}")
        return bookings

    @staticmethod
    def _require_owner(principal: Dict[str, Any], booking: Booking) -> None:
        owns = booking.user_id == principal["id"] or (
            booking.user_email and booking.user_email.lower() == principal["email"]
        )
        if not owns:
            raise PermissionDeniedError("You can only manage your own bookings.")

    @staticmethod
    def _requester(principal: Dict[str, Any], on_behalf_of: Optional[str]) -> Dict[str, Any]:
        """Who the booking is for, plus ``bookedBy`` when an admin books for someone."""
        if not on_behalf_of or on_behalf_of.strip().lower() == principal["email"]:
            return {"id": principal["id"], "name": principal["name"], "email": principal["email"]}

        if principal["role"] != Role.ADMIN.value:
            raise PermissionDeniedError("Only admins can book on behalf of another employee.")

        employee = EmployeeService.find_by_email(on_behalf_of)
        if employee is None:
            raise ValidationError(f"No employee found with email {on_behalf_of}.")

        email = employee.email.lower()
        return {
            "id": employee.id or email,
            "name": resolve_display_name(name=employee.name, email=email),
            "email": email,
            "bookedBy": {
                "id": principal["id"],
                "name": principal["name"],
                "email": principal["email"],
            },
        }

    @staticmethod
    def _notify(send, booking: Booking, car: Optional[Car] = None) -> None:
        """Send a driver notification after a successful write. Failures are only logged."""
        try:
            send(booking, car or CarService.get_car(booking.car_id))
        except StorageError as e:
            logger.warning(f"Could not notify driver about booking {booking.id}: {str(e)}")
