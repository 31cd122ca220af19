import unittest
from datetime import date, datetime

from fleetbook.core.errors import ValidationError
from fleetbook.models import Booking, BookingStatus, Car, Delegate, Driver, Employee, Notification, Role
from fleetbook.models.notification import NotificationType


class TestCarRecord(unittest.TestCase):

    def test_defaults_for_legacy_records(self):
        car = Car.from_record({"id": "c1", "model": "Corolla", "plate": "KAA 001"})
        self.assertTrue(car.available_today)
        self.assertIsNone(car.unavailable_since)
        self.assertEqual(car.seats, 5)

    def test_round_trip_keeps_block_date(self):
        record = {"id": "c1", "model": "Corolla", "plate": "KAA 001", "seats": 4, "driverId": "d1",
                  "availableToday": False, "unavailableSince": "2030-05-01"}
        car = Car.from_record(record)
        self.assertEqual(car.unavailable_since, date(2030, 5, 1))
        self.assertEqual(car.to_record(), record)

    def test_missing_id(self):
        with self.assertRaises(ValidationError):
            Car.from_record({"model": "Corolla"})


class TestBookingRecord(unittest.TestCase):

    def setUp(self):
        self.record = {
            "id": "b1",
            "carId": "c1",
            "userId": "e1",
            "userName": "Ann",
            "userEmail": "ann@example.com",
            "bookedBy": {"id": "e9", "name": "Admin", "email": "admin@example.com"},
            "startDate": "2030-05-01T09:00",
            "endDate": "2030-05-01T12:00",
            "purpose": "Client visit",
            "status": "completed",
            "tripStarted": True,
            "distanceTraveled": "120.50",
        }

    def test_from_record(self):
        booking = Booking.from_record(self.record)
        self.assertEqual(booking.start, datetime(2030, 5, 1, 9))
        self.assertIs(booking.status, BookingStatus.COMPLETED)
        self.assertEqual(booking.booked_by, Delegate("e9", "Admin", "admin@example.com"))
        self.assertEqual(booking.distance_traveled, 120.5)

    def test_missing_required_field(self):
        del self.record["startDate"]
        with self.assertRaises(ValidationError):
            Booking.from_record(self.record)

    def test_unknown_status(self):
        self.record["status"] = "pending"
        with self.assertRaises(ValidationError):
            Booking.from_record(self.record)

    def test_to_record_uses_wire_names(self):
        record = Booking.from_record(self.record).to_record()
        self.assertEqual(record["startDate"], "2030-05-01T09:00:00")
        self.assertEqual(record["bookedBy"]["email"], "admin@example.com")
        self.assertEqual(record["status"], "completed")


class TestPeopleRecords(unittest.TestCase):

    def test_driver_email_is_lowercased(self):
        driver = Driver.from_record({"id": "d1", "name": "Dan", "email": "Dan@Example.com", "carId": ""})
        self.assertEqual(driver.email, "dan@example.com")
        self.assertIsNone(driver.car_id)
        self.assertEqual(driver.to_record()["carId"], None)

    def test_unknown_role_falls_back_to_employee(self):
        employee = Employee.from_record({"id": "e1", "name": "Ann", "email": "a@x.com", "role": "owner"})
        self.assertIs(employee.role, Role.EMPLOYEE)
        self.assertFalse(Employee.from_record({"name": "M", "email": "m@x.com", "role": "manager"}).is_admin)

    def test_employee_record_round_trip(self):
        record = {"id": "e1", "name": "Ann", "email": "ann@example.com", "role": "admin",
                  "department": "Finance", "createdAt": "2030-01-01T00:00:00"}
        self.assertEqual(Employee.from_record(record).to_record(), record)

    def test_notification_record(self):
        record = {"id": "n1", "driverId": "d1", "tripId": "b1", "type": "starting_soon",
                  "title": "Trip Starting Soon!", "message": "Be ready", "read": False,
                  "shown": True, "createdAt": "2030-05-01T08:00:00"}
        notification = Notification.from_record(record)
        self.assertIs(notification.type, NotificationType.STARTING_SOON)
        self.assertEqual(notification.to_record(), record)

    def test_notification_with_unknown_type(self):
        with self.assertRaises(ValidationError) as ctx:
            Notification.from_record({"id": "n1", "driverId": "d1", "type": "info"})
        self.assertIn("Unknown notification type", str(ctx.exception))

    def test_notification_missing_driver(self):
        with self.assertRaises(ValidationError):
            Notification.from_record({"id": "n1", "type": "new_trip", "title": "New Trip Assigned!"})


if __name__ == '__main__':
    unittest.main()
