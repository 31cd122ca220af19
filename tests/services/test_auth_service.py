import unittest
from datetime import datetime, timedelta

import bcrypt
import jwt
import pytest

from fleetbook import config
from fleetbook.services.auth_service import AuthError, AuthService


def hashed(password):
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=4)).decode("utf-8")


class TestSignIn(unittest.TestCase):
    """Test suite for sign-in and session tokens."""

    @pytest.fixture(autouse=True)
    def _fleet(self, fleet, token_for):
        self.fleet = fleet
        self.token_for = token_for
        fleet["store"].seed(
            "accounts",
            {"id": "a1", "email": "ann@example.com", "password": hashed("secret123"), "kind": "employee"},
            {"id": "a2", "email": "dan@example.com", "password": hashed("drive123"), "kind": "driver"},
            {"id": "a3", "email": "ghost@example.com", "password": hashed("boo12345"), "kind": "driver"},
        )

    def test_employee_sign_in(self):
        result = AuthService.sign_in("Ann@Example.com", "secret123")
        principal = result["principal"]
        self.assertEqual(principal["id"], "e-ann")
        self.assertEqual(principal["role"], "employee")
        self.assertEqual(principal["name"], "Ann Wanjiru")

        payload = jwt.decode(result["token"], config.JWT_SECRET, algorithms=[config.JWT_ALGORITHM])
        self.assertEqual(payload["email"], "ann@example.com")
        self.assertEqual(payload["kind"], "employee")

    def test_driver_sign_in(self):
        principal = AuthService.sign_in("dan@example.com", "drive123")["principal"]
        self.assertEqual(principal["role"], "driver")
        self.assertEqual(principal["id"], "d1")
        self.assertEqual(principal["driver"].car_id, "c1")

    def test_wrong_password_and_unknown_email_look_the_same(self):
        with self.assertRaises(AuthError) as wrong:
            AuthService.sign_in("ann@example.com", "nope")
        with self.assertRaises(AuthError) as unknown:
            AuthService.sign_in("who@example.com", "secret123")
        self.assertEqual(str(wrong.exception), str(unknown.exception))

    def test_driver_account_without_driver_record(self):
        with self.assertRaises(AuthError):
            AuthService.sign_in("ghost@example.com", "boo12345")

    def test_account_without_profile_is_unknown_employee(self):
        principal = AuthService.verify_token(self.token_for("new@example.com"))
        self.assertEqual(principal["name"], "Unknown User")
        self.assertEqual(principal["id"], "new@example.com")
        self.assertEqual(principal["role"], "employee")

    def test_manager_counts_as_employee(self):
        self.assertEqual(AuthService.verify_token(self.fleet["bob"])["role"], "employee")

    def test_expired_token(self):
        past = datetime.utcnow() - timedelta(hours=2)
        token = jwt.encode({"email": "ann@example.com", "kind": "employee", "exp": past, "iat": past},
                           config.JWT_SECRET, algorithm=config.JWT_ALGORITHM)
        with self.assertRaises(AuthError):
            AuthService.verify_token(token)

    def test_tampered_token(self):
        token = jwt.encode({"email": "admin@example.com", "kind": "employee"}, "wrong-secret",
                           algorithm=config.JWT_ALGORITHM)
        with self.assertRaises(AuthError):
            AuthService.verify_token(token)

    def test_require_role(self):
        self.assertEqual(AuthService.require_role(self.fleet["admin"], ["admin"])["id"], "e-admin")
        with self.assertRaises(AuthError):
            AuthService.require_role(self.fleet["ann"], ["admin"])


class TestRegisterAccount(unittest.TestCase):
    """Test suite for admin account creation."""

    @pytest.fixture(autouse=True)
    def _fleet(self, fleet):
        self.fleet = fleet
        self.store = fleet["store"]

    def test_admin_creates_account(self):
        account = AuthService.register_account(self.fleet["admin"], "Carol@Example.com", "pass1234")

        self.assertNotIn("password", account)
        stored = self.store.records("accounts")[0]
        self.assertEqual(stored["email"], "carol@example.com")
        self.assertTrue(bcrypt.checkpw(b"pass1234", stored["password"].encode("utf-8")))

        self.assertEqual(AuthService.sign_in("carol@example.com", "pass1234")["principal"]["name"], "Unknown User")

    def test_duplicate_email(self):
        AuthService.register_account(self.fleet["admin"], "carol@example.com", "pass1234")
        with self.assertRaises(AuthError):
            AuthService.register_account(self.fleet["admin"], "carol@example.com", "other123")

    def test_invalid_kind(self):
        with self.assertRaises(AuthError):
            AuthService.register_account(self.fleet["admin"], "carol@example.com", "pass1234", kind="robot")

    def test_non_admin_cannot_create_accounts(self):
        with self.assertRaises(AuthError):
            AuthService.register_account(self.fleet["ann"], "carol@example.com", "pass1234")
        self.assertEqual(self.store.records("accounts"), [])
