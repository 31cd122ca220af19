"""Entity models for the FleetBook application."""
from fleetbook.models.car import Car
from fleetbook.models.booking import Booking, BookingState, BookingStatus, Delegate
from fleetbook.models.driver import Driver
from fleetbook.models.employee import Employee, Role
from fleetbook.models.notification import Notification, NotificationType


__all__ = [
    'Car',
    'Booking',
    'BookingState',
    'BookingStatus',
    'Delegate',
    'Driver',
    'Employee',
    'Role',
    'Notification',
    'NotificationType',
]
