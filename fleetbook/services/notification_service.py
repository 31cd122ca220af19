"""Driver notification service for the FleetBook application."""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from fleetbook.core import clock
from fleetbook.core.errors import PermissionDeniedError, ValidationError
from fleetbook.core.scheduler import select_due_bookings
from fleetbook.core.snapshots import FleetSnapshot
from fleetbook.core.timerange import parse_instant
from fleetbook.models.booking import Booking
from fleetbook.models.car import Car
from fleetbook.models.notification import NotificationType
from fleetbook.services.auth_service import AccountKind, AuthService
from fleetbook.services.store import DocumentStore

logger = logging.getLogger(__name__)

INBOX_LIMIT = 20


class NotificationService:
    """Service for sending and reading driver notifications."""

    @staticmethod
    def send_driver_notification(driver_id: str, notification_type: NotificationType,
                                 title: str, message: str, trip_id: Optional[str] = None,
                                 now: Optional[datetime] = None) -> Dict[str, Any]:
        """
        Store a notification for a driver.

        Args:
            driver_id: ID of the target driver
            notification_type: Kind of notification
            title: Short title
            message: Notification body
            trip_id: ID of the related booking
            now: Creation time (defaults to the clock)

        Returns:
            Dict: The stored notification record
        """
        record = DocumentStore.create("notifications", {
            "driverId": driver_id,
            "tripId": trip_id,
            "type": notification_type.value,
            "title": title,
            "message": message,
            "read": False,
            "shown": False,
            "createdAt": (now or clock.now()).isoformat(),
        })
        logger.info(f"Sent {notification_type.value} notification to driver {driver_id}")
        return record

    @staticmethod
    def notify_new_trip(booking: Booking, car: Car) -> Optional[Dict[str, Any]]:
        """Tell the car's driver about a new booking. No-op when the car has no driver."""
        if not car.driver_id:
            logger.info(f"No driver assigned to car {car.id}, skipping new trip notification")
            return None

        when = booking.start.strftime("%a, %b %d %H:%M")
        return NotificationService.send_driver_notification(
            car.driver_id,
            NotificationType.NEW_TRIP,
            "New Trip Assigned!",
            f"{booking.user_name} booked {car.model} for {when}",
            trip_id=booking.id,
        )

    @staticmethod
    def notify_trip_starting_soon(booking: Booking, driver_id: str,
                                  now: Optional[datetime] = None) -> Dict[str, Any]:
        return NotificationService.send_driver_notification(
            driver_id,
            NotificationType.STARTING_SOON,
            "Trip Starting Soon!",
            f"Trip with {booking.user_name} starts at {booking.start.strftime('%H:%M')}. Be ready!",
            trip_id=booking.id,
            now=now,
        )

    @staticmethod
    def notify_trip_started(booking: Booking, car: Car) -> Optional[Dict[str, Any]]:
        if not car.driver_id:
            return None

        return NotificationService.send_driver_notification(
            car.driver_id,
            NotificationType.TRIP_STARTED,
            "Trip Started!",
            f"{booking.user_name} has started the trip. Drive safely!",
            trip_id=booking.id,
        )

    @staticmethod
    def notify_trip_ended(booking: Booking, car: Car) -> Optional[Dict[str, Any]]:
        if not car.driver_id:
            return None

        distance = f"{booking.distance_traveled:.2f}" if booking.distance_traveled is not None else "N/A"
        return NotificationService.send_driver_notification(
            car.driver_id,
            NotificationType.TRIP_ENDED,
            "Trip Completed!",
            f"Trip with {booking.user_name} ended. Distance: {distance} km",
            trip_id=booking.id,
        )

    @staticmethod
    def sweep_upcoming_trips(now: Optional[datetime] = None) -> List[Dict[str, Any]]:
        """
        Send "starting soon" notifications for trips starting in about an hour.

        Run periodically (every 10 minutes by default) and never concurrently
        with itself. A booking that already has a "starting soon"
        notification is skipped, so repeated sweeps notify at most once.

        Args:
            now: Current time (defaults to the clock)

        Returns:
            List[Dict]: The notifications created by this sweep

        Raises:
            StorageError: If reading bookings or writing notifications fails
        """
        now = parse_instant(now, "now") if now else clock.now()

        bookings = []
        for record in DocumentStore.query("bookings", status="active", tripStarted=False):
            try:
                bookings.append(Booking.from_record(record))
            except ValidationError as e:
                logger.warning(f"Skipping malformed booking {record.get('id')}: {e}")

        already_notified = {
            record.get("tripId")
            for record in DocumentStore.query("notifications", type=NotificationType.STARTING_SOON.value)
        }

        fleet = FleetSnapshot()
        for collection in ("cars", "drivers"):
            fleet.replace(collection, DocumentStore.snapshot(collection))

        created = []
        for booking in select_due_bookings(bookings, now, already_notified):
            driver = fleet.driver_for_car(booking.car_id)
            if driver is None:
                logger.info(f"No driver for car {booking.car_id}, skipping booking {booking.id}")
                continue

            created.append(NotificationService.notify_trip_starting_soon(booking, driver.id, now=now))

        logger.info(f"Trip sweep at {now.isoformat()}: {len(bookings)} pending, {len(created)} notified")
        return created

    @staticmethod
    def get_notifications(token: str, limit: int = INBOX_LIMIT) -> List[Dict[str, Any]]:
        """
        Get the signed-in driver's newest notifications.

        Returns:
            List[Dict]: Up to ``limit`` notifications, newest first
        """
        driver = AuthService.require_role(token, [AccountKind.DRIVER.value])
        notifications = DocumentStore.query("notifications", driverId=driver["id"])
        notifications.sort(key=lambda n: n.get("createdAt") or "", reverse=True)
        return notifications[:limit]

    @staticmethod
    def unread_count(token: str) -> int:
        return sum(1 for n in NotificationService.get_notifications(token) if not n.get("read"))

    @staticmethod
    def mark_as_read(token: str, notification_id: str) -> Dict[str, Any]:
        """
        Mark one of the driver's notifications as read.

        Raises:
            PermissionDeniedError: If the notification belongs to another driver
        """
        driver = AuthService.require_role(token, [AccountKind.DRIVER.value])
        notification = DocumentStore.get("notifications", notification_id)

        if notification.get("driverId") != driver["id"]:
            raise PermissionDeniedError("You can only manage your own notifications.")

        return DocumentStore.update("notifications", notification_id, {"read": True})

    @staticmethod
    def mark_all_as_read(token: str) -> int:
        """Mark every unread notification of the driver as read. Returns how many changed."""
        driver = AuthService.require_role(token, [AccountKind.DRIVER.value])
        unread = DocumentStore.query("notifications", driverId=driver["id"], read=False)
        for notification in unread:
            DocumentStore.update("notifications", notification["id"], {"read": True})
        return len(unread)

    @staticmethod
    def claim_undelivered(token: str) -> List[Dict[str, Any]]:
        """
        Return unread notifications not yet delivered to the device, and
        mark them as delivered so each is shown once.
        """
        pending = [
            n for n in NotificationService.get_notifications(token)
            if not n.get("read") and not n.get("shown")
        ]
        for notification in pending:
            DocumentStore.update("notifications", notification["id"], {"shown": True})
        return pending
