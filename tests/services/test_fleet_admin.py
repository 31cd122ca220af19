import unittest
from datetime import date

import pytest

from fleetbook.core.errors import NotFoundError, ValidationError
from fleetbook.services.auth_service import AuthError
from fleetbook.services.car_service import CarService
from fleetbook.services.driver_service import DriverService
from fleetbook.services.employee_service import EmployeeService


class TestCarService(unittest.TestCase):
    """Test suite for car management."""

    @pytest.fixture(autouse=True)
    def _fleet(self, fleet):
        self.fleet = fleet
        self.store = fleet["store"]

    def test_list_cars_for_any_role(self):
        for who in ("admin", "ann", "driver"):
            models = [c["model"] for c in CarService.list_cars(self.fleet[who])]
            self.assertEqual(models, ["Corolla", "Prius"])

    def test_add_car(self):
        car = CarService.add_car(self.fleet["admin"], " Golf ", "KAA 003", 4)
        stored = self.store.get("cars", car["id"])
        self.assertEqual(stored["model"], "Golf")
        self.assertTrue(stored["availableToday"])
        self.assertIsNone(stored["driverId"])

    def test_add_car_duplicate_plate(self):
        with self.assertRaises(ValidationError):
            CarService.add_car(self.fleet["admin"], "Golf", "KAA 001")

    def test_add_car_invalid_seats(self):
        with self.assertRaises(ValidationError):
            CarService.add_car(self.fleet["admin"], "Golf", "KAA 003", 0)

    def test_add_car_requires_admin(self):
        with self.assertRaises(AuthError):
            CarService.add_car(self.fleet["ann"], "Golf", "KAA 003")

    def test_update_car_ignores_other_fields(self):
        CarService.update_car(self.fleet["admin"], "c1", {"seats": 7, "driverId": "x", "availableToday": False})
        stored = self.store.get("cars", "c1")
        self.assertEqual(stored["seats"], 7)
        self.assertEqual(stored["driverId"], "d1")
        self.assertTrue(stored["availableToday"])

    def test_update_missing_car(self):
        with self.assertRaises(NotFoundError):
            CarService.update_car(self.fleet["admin"], "nope", {"seats": 7})

    def test_set_availability(self):
        CarService.set_availability(self.fleet["admin"], "c1", False, today=date(2030, 5, 1))
        stored = self.store.get("cars", "c1")
        self.assertFalse(stored["availableToday"])
        self.assertEqual(stored["unavailableSince"], "2030-05-01")

        CarService.set_availability(self.fleet["admin"], "c1", True)
        stored = self.store.get("cars", "c1")
        self.assertTrue(stored["availableToday"])
        self.assertIsNone(stored["unavailableSince"])

    def test_delete_car(self):
        CarService.delete_car(self.fleet["admin"], "c2")
        self.assertEqual([c["id"] for c in self.store.records("cars")], ["c1"])


class TestDriverService(unittest.TestCase):
    """Test suite for driver management and car assignment."""

    @pytest.fixture(autouse=True)
    def _fleet(self, fleet):
        self.admin = fleet["admin"]
        self.store = fleet["store"]

    def test_add_driver_with_car(self):
        driver = DriverService.add_driver(self.admin, "Eve Njeri", "EVE@example.com", "0711", "L2", car_id="c2")
        self.assertEqual(self.store.get("drivers", driver["id"])["email"], "eve@example.com")
        self.assertEqual(self.store.get("cars", "c2")["driverId"], driver["id"])

    def test_add_driver_duplicate_email(self):
        with self.assertRaises(ValidationError):
            DriverService.add_driver(self.admin, "Dan Again", "dan@example.com")

    def test_add_driver_unknown_car(self):
        with self.assertRaises(NotFoundError):
            DriverService.add_driver(self.admin, "Eve", "eve@example.com", car_id="nope")
        self.assertEqual(len(self.store.records("drivers")), 1)

    def test_reassigning_a_car_clears_the_old_one(self):
        DriverService.update_driver(self.admin, "d1", {"carId": "c2"})
        self.assertIsNone(self.store.get("cars", "c1")["driverId"])
        self.assertEqual(self.store.get("cars", "c2")["driverId"], "d1")
        self.assertEqual(self.store.get("drivers", "d1")["carId"], "c2")

    def test_unassign_car(self):
        DriverService.update_driver(self.admin, "d1", {"carId": ""})
        self.assertIsNone(self.store.get("cars", "c1")["driverId"])
        self.assertIsNone(self.store.get("drivers", "d1")["carId"])

    def test_delete_driver_clears_car(self):
        DriverService.delete_driver(self.admin, "d1")
        self.assertEqual(self.store.records("drivers"), [])
        self.assertIsNone(self.store.get("cars", "c1")["driverId"])

    def test_list_drivers(self):
        DriverService.add_driver(self.admin, "Abel", "abel@example.com")
        self.assertEqual([d["name"] for d in DriverService.list_drivers(self.admin)], ["Abel", "Dan Kamau"])


class TestEmployeeService(unittest.TestCase):
    """Test suite for employee profiles."""

    @pytest.fixture(autouse=True)
    def _fleet(self, fleet):
        self.fleet = fleet
        self.admin = fleet["admin"]

    def test_list_sorted_by_name(self):
        names = [e["name"] for e in EmployeeService.list_employees(self.admin)]
        self.assertEqual(names, ["Ann Wanjiru", "Bob Otieno", "Grace Admin"])

    def test_add_employee(self):
        employee = EmployeeService.add_employee(self.admin, "Carol", "Carol@example.com", department="Sales")
        self.assertEqual(employee["email"], "carol@example.com")
        self.assertEqual(EmployeeService.find_by_email("CAROL@example.com").department, "Sales")

    def test_duplicate_email(self):
        with self.assertRaises(ValidationError):
            EmployeeService.add_employee(self.admin, "Ann Two", "ann@example.com")

    def test_invalid_role(self):
        with self.assertRaises(ValidationError):
            EmployeeService.add_employee(self.admin, "Carol", "carol@example.com", role="owner")

    def test_promote_to_admin(self):
        EmployeeService.update_employee(self.admin, "e-ann", {"role": "admin"})
        self.assertTrue(EmployeeService.find_by_email("ann@example.com").is_admin)

    def test_requires_admin(self):
        with self.assertRaises(AuthError):
            EmployeeService.list_employees(self.fleet["ann"])

    def test_delete_employee(self):
        EmployeeService.delete_employee(self.admin, "e-bob")
        self.assertIsNone(EmployeeService.find_by_email("bob@example.com"))
