import os
import unittest
from datetime import datetime
from unittest.mock import patch

import bcrypt
import pytest
from click.testing import CliRunner

from fleetbook import config
from fleetbook.cli_module.cli import cli
from fleetbook.cli_module.utils import get_token, save_token

NOW = datetime(2030, 5, 1, 8, 0)


class CliTestCase(unittest.TestCase):

    @pytest.fixture(autouse=True)
    def _environment(self, fleet, tmp_path, monkeypatch, token_for):
        monkeypatch.setattr(config, "CONFIG_DIR", str(tmp_path / "session"))
        monkeypatch.setattr(config, "CONFIG_FILE", str(tmp_path / "session" / "config.json"))
        self.fleet = fleet
        self.store = fleet["store"]
        self.token_for = token_for
        self.runner = CliRunner()

    def invoke(self, *args, signed_in_as=None, input=None):
        if signed_in_as:
            save_token(self.fleet[signed_in_as])
        with patch("fleetbook.core.clock.now", return_value=NOW):
            return self.runner.invoke(cli, list(args), input=input)


class TestAuthCommands(CliTestCase):
    """Test suite for auth commands."""

    def test_signin_saves_session(self):
        password = bcrypt.hashpw(b"secret123", bcrypt.gensalt(rounds=4)).decode("utf-8")
        self.store.seed("accounts", {"id": "a1", "email": "ann@example.com", "password": password,
                                     "kind": "employee"})

        result = self.invoke("auth", "signin", "--email", "ann@example.com", "--password", "secret123")

        self.assertEqual(result.exit_code, 0)
        self.assertIn("Welcome back, Ann Wanjiru!", result.output)
        self.assertIsNotNone(get_token())

        result = self.invoke("auth", "whoami")
        self.assertIn("Signed in as: Ann Wanjiru", result.output)

        result = self.invoke("auth", "signout")
        self.assertIn("You have been signed out.", result.output)
        self.assertIsNone(get_token())

    def test_signin_with_wrong_password(self):
        result = self.invoke("auth", "signin", "--email", "ann@example.com", "--password", "nope")
        self.assertIn("Invalid email or password", result.output)
        self.assertIsNone(get_token())

    def test_commands_require_session(self):
        result = self.invoke("car", "list")
        self.assertIn("You are not signed in", result.output)

    def test_role_is_enforced(self):
        result = self.invoke("admin", "bookings", signed_in_as="ann")
        self.assertIn("Access denied", result.output)


class TestBookingCommands(CliTestCase):
    """Test suite for booking commands."""

    def test_create_and_list(self):
        result = self.invoke("booking", "create", "c1", "--start", "2030-05-01T10:00",
                             "--end", "2030-05-01T12:00", "--purpose", "Client visit", signed_in_as="ann")
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("Car booked successfully!", result.output)

        result = self.invoke("booking", "list")
        self.assertIn("Client visit", result.output)
        self.assertIn("2030-05-01 10:00", result.output)

    def test_conflict_is_reported(self):
        self.invoke("booking", "create", "c1", "--start", "2030-05-01T10:00",
                    "--end", "2030-05-01T12:00", signed_in_as="ann")
        result = self.invoke("booking", "create", "c1", "--start", "2030-05-01T11:00",
                             "--end", "2030-05-01T13:00", signed_in_as="bob")
        self.assertIn("Error: This time slot conflicts with an existing booking", result.output)
        self.assertEqual(len(self.store.records("bookings")), 1)

    def test_trip_round(self):
        self.invoke("booking", "create", "c1", "--start", "2030-05-01T10:00",
                    "--end", "2030-05-01T12:00", signed_in_as="ann")
        booking_id = self.store.records("bookings")[0]["id"]

        result = self.invoke("booking", "start", booking_id, "--odometer", "1000")
        self.assertIn("Trip started", result.output)

        result = self.invoke("booking", "end", booking_id, "--odometer", "990")
        self.assertIn("Error: End reading (990 km) cannot be less than start reading (1000 km).", result.output)

        result = self.invoke("booking", "end", booking_id, "--odometer", "1120")
        self.assertIn("Distance traveled: 120.00 km", result.output)

    def test_cancel(self):
        self.invoke("booking", "create", "c1", "--start", "2030-05-01T10:00",
                    "--end", "2030-05-01T12:00", signed_in_as="ann")
        booking_id = self.store.records("bookings")[0]["id"]

        result = self.invoke("booking", "cancel", booking_id)
        self.assertIn(f"Booking {booking_id} cancelled.", result.output)
        self.assertEqual(self.store.get("bookings", booking_id)["status"], "cancelled")


class TestCarAndAdminCommands(CliTestCase):
    """Test suite for car and admin commands."""

    def test_car_list(self):
        result = self.invoke("car", "list", signed_in_as="driver")
        self.assertIn("Corolla", result.output)
        self.assertIn("KAA 002", result.output)

    def test_car_list_ignores_yesterdays_block(self):
        self.store.seed("cars", {"id": "c3", "model": "Axio", "plate": "KAA 003",
                                 "availableToday": False, "unavailableSince": "2030-04-30"})
        result = self.invoke("car", "list", signed_in_as="ann")
        rows = {line.split("|")[3].strip(): line for line in result.output.splitlines() if "KAA" in line}
        self.assertIn("| Yes", rows["KAA 003"])

        self.invoke("car", "availability", "c2", "--unavailable", signed_in_as="admin")
        result = self.invoke("car", "list")
        rows = {line.split("|")[3].strip(): line for line in result.output.splitlines() if "KAA" in line}
        self.assertIn("| No", rows["KAA 002"])
        self.assertIn("| Yes", rows["KAA 001"])

    def test_mark_car_unavailable_then_book_today(self):
        result = self.invoke("car", "availability", "c2", "--unavailable", signed_in_as="admin")
        self.assertIn("Prius is now unavailable today.", result.output)
        self.assertEqual(self.store.get("cars", "c2")["unavailableSince"], "2030-05-01")

        result = self.invoke("booking", "create", "c2", "--start", "2030-05-01T14:00",
                             "--end", "2030-05-01T16:00", signed_in_as="ann")
        self.assertIn("Error: Prius (KAA 002) is not available today.", result.output)

    def test_book_on_behalf(self):
        result = self.invoke("booking", "create", "c1", "--start", "2030-05-01T10:00",
                             "--end", "2030-05-01T12:00", "--for", "bob@example.com", signed_in_as="admin")
        self.assertIn("For: Bob Otieno", result.output)

        result = self.invoke("admin", "bookings")
        self.assertIn("Bob Otieno (by Grace Admin)", result.output)

    def test_stats(self):
        result = self.invoke("admin", "stats", signed_in_as="admin")
        self.assertIn("Total cars: 2", result.output)
        self.assertIn("Available cars: 2", result.output)
        self.assertIn("Total drivers: 1", result.output)

    def test_add_employee_and_account(self):
        result = self.invoke("admin", "employees", "add", "--name", "Carol", "--email", "carol@example.com",
                             signed_in_as="admin")
        self.assertIn("Employee Carol added", result.output)

        result = self.invoke("admin", "accounts", "create", "--email", "carol@example.com",
                             "--kind", "employee", input="pass1234\npass1234\n")
        self.assertIn("Account created for carol@example.com (employee).", result.output)
        self.assertEqual(len(self.store.records("accounts")), 1)

    def test_delete_driver_needs_confirmation(self):
        result = self.invoke("admin", "drivers", "delete", "d1", signed_in_as="admin", input="n\n")
        self.assertNotEqual(result.exit_code, 0)
        self.assertEqual(len(self.store.records("drivers")), 1)

        result = self.invoke("admin", "drivers", "delete", "d1", "--yes")
        self.assertIn("Driver d1 deleted.", result.output)
        self.assertIsNone(self.store.get("cars", "c1")["driverId"])


class TestDriverCommands(CliTestCase):
    """Test suite for driver commands."""

    @pytest.fixture(autouse=True)
    def _upcoming_trip(self, _environment):
        self.invoke("booking", "create", "c1", "--start", "2030-05-01T08:55",
                    "--end", "2030-05-01T10:00", signed_in_as="ann")

    def test_trips(self):
        result = self.invoke("driver", "trips", signed_in_as="driver")
        self.assertIn("Ann Wanjiru", result.output)
        self.assertIn("starting soon", result.output)

    def test_sweep_then_notifications(self):
        result = self.invoke("driver", "sweep")
        self.assertIn("Sent 1 starting-soon notification(s).", result.output)
        result = self.invoke("driver", "sweep")
        self.assertIn("Sent 0 starting-soon notification(s).", result.output)

        result = self.invoke("driver", "notifications", signed_in_as="driver")
        self.assertIn("2 notification(s), 2 unread", result.output)
        self.assertIn("Trip Starting Soon!", result.output)

        result = self.invoke("driver", "read", "--all")
        self.assertIn("Marked 2 notification(s) as read.", result.output)

    def test_read_needs_an_id(self):
        result = self.invoke("driver", "read", signed_in_as="driver")
        self.assertIn("Give a notification ID or use --all.", result.output)

    def test_malformed_notification_is_skipped(self):
        self.store.seed("notifications", {"id": "n-bad", "driverId": "d1", "type": "info",
                                          "title": "Legacy", "message": "?", "createdAt": "2030-05-01T07:00:00"})

        result = self.invoke("driver", "notifications", signed_in_as="driver")

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIsNone(result.exception)
        self.assertIn("1 notification(s), 1 unread", result.output)
        self.assertIn("New Trip Assigned!", result.output)
        self.assertNotIn("Legacy", result.output)

    def test_new_notifications_are_shown_once(self):
        result = self.invoke("driver", "notifications", "--new", signed_in_as="driver")
        self.assertIn("New Trip Assigned!", result.output)
        result = self.invoke("driver", "notifications", "--new")
        self.assertIn("No notifications.", result.output)


class TestSessionFile(CliTestCase):

    def test_corrupt_session_file(self):
        os.makedirs(config.CONFIG_DIR, exist_ok=True)
        with open(config.CONFIG_FILE, "w") as f:
            f.write("{not json")
        self.assertIsNone(get_token())
