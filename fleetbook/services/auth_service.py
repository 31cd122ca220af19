"""Authentication service for the FleetBook application.

Accounts live in the ``accounts`` collection with a bcrypt password hash.
Signing in yields a JWT session token carrying the account email and kind
(``employee`` or ``driver``). Employee roles come from the ``employees``
collection, looked up by that email.
"""

import logging
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Dict, List

import bcrypt
import jwt

from fleetbook import config
from fleetbook.core.identity import resolve_profile
from fleetbook.models.driver import Driver
from fleetbook.models.employee import Employee, Role
from fleetbook.services.store import DocumentStore

logger = logging.getLogger(__name__)


class AccountKind(Enum):
    """Kinds of accounts that can sign in."""
    EMPLOYEE = "employee"
    DRIVER = "driver"


class AuthError(Exception):
    """Custom exception for authentication errors."""
    pass


class AuthService:
    """Service for handling sign-in and session tokens."""

    @staticmethod
    def _hash_password(password: str) -> str:
        """
        Hash a password using bcrypt.

        Args:
            password: Plain text password

        Returns:
            str: Hashed password
        """
        return bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt()).decode('utf-8')

    @staticmethod
    def _verify_password(plain_password: str, hashed_password: str) -> bool:
        if not hashed_password:
            return False

        try:
            return bcrypt.checkpw(plain_password.encode('utf-8'), hashed_password.encode('utf-8'))
        except ValueError as e:
            logger.error(f"Password verification error: {str(e)}")
            return False

    @staticmethod
    def _generate_jwt(email: str, kind: str) -> str:
        now = datetime.utcnow()
        payload = {
            "email": email,
            "kind": kind,
            "exp": now + timedelta(hours=config.JWT_EXPIRATION_HOURS),
            "iat": now,
        }
        return jwt.encode(payload, config.JWT_SECRET, algorithm=config.JWT_ALGORITHM)

    @staticmethod
    def _verify_jwt(token: str) -> Dict[str, Any]:
        """
        Verify a JWT token and return its payload.

        Raises:
            AuthError: If token is invalid or expired
        """
        try:
            return jwt.decode(token, config.JWT_SECRET, algorithms=[config.JWT_ALGORITHM])
        except jwt.PyJWTError as e:
            raise AuthError(f"Invalid token: {str(e)}")

    @staticmethod
    def sign_in(email: str, password: str) -> Dict[str, Any]:
        """
        Sign in with email and password.

        Args:
            email: Account email
            password: Account password

        Returns:
            Dict: ``token`` and the resolved ``principal``

        Raises:
            AuthError: If the credentials are wrong
            StorageError: If the account lookup fails
        """
        email = (email or "").strip().lower()
        accounts = DocumentStore.query("accounts", email=email)

        # Same message for unknown email and wrong password
        if not accounts or not AuthService._verify_password(password, accounts[0].get("password")):
            raise AuthError("Invalid email or password")

        account = accounts[0]
        kind = account.get("kind") or AccountKind.EMPLOYEE.value
        token = AuthService._generate_jwt(email, kind)
        logger.info(f"Signed in {kind} account {email}")

        return {
            "token": token,
            "principal": AuthService._principal(email, kind),
        }

    @staticmethod
    def register_account(token: str, email: str, password: str,
                         kind: str = AccountKind.EMPLOYEE.value) -> Dict[str, Any]:
        """
        Create a sign-in account (admin only).

        Returns:
            Dict: The account record without its password hash

        Raises:
            AuthError: If the caller is not an admin, the kind is unknown
                or the email is taken
        """
        AuthService.require_role(token, [Role.ADMIN.value])

        try:
            kind = AccountKind(kind).value
        except ValueError:
            raise AuthError(f"Invalid account kind. Choose from: {', '.join(k.value for k in AccountKind)}")

        email = (email or "").strip().lower()
        if not email or not password:
            raise AuthError("Email and password are required")
        if DocumentStore.query("accounts", email=email):
            raise AuthError(f"An account with email {email} already exists")

        account = DocumentStore.create("accounts", {
            "email": email,
            "password": AuthService._hash_password(password),
            "kind": kind,
            "createdAt": datetime.now().isoformat(),
        })
        account.pop("password", None)
        return account

    @staticmethod
    def verify_token(token: str) -> Dict[str, Any]:
        """
        Verify a token and return the signed-in principal.

        The principal is a dict with ``email``, ``kind``, and either
        ``profile`` (employees) or ``driver`` (drivers).

        Raises:
            AuthError: If the token is invalid or the driver record is gone
        """
        payload = AuthService._verify_jwt(token)
        email = payload.get("email")
        if not email:
            raise AuthError("Invalid token payload")
        return AuthService._principal(email, payload.get("kind") or AccountKind.EMPLOYEE.value)

    @staticmethod
    def require_role(token: str, roles: List[str]) -> Dict[str, Any]:
        """
        Verify that the principal has one of the given roles.

        ``roles`` may contain employee roles (``admin``, ``employee``) and
        ``driver``. Managers count as employees.

        Raises:
            AuthError: If the principal's role is not allowed
        """
        principal = AuthService.verify_token(token)
        if principal["role"] not in roles:
            raise AuthError(f"Access denied. This action requires one of these roles: {', '.join(roles)}")
        return principal

    @staticmethod
    def _principal(email: str, kind: str) -> Dict[str, Any]:
        if kind == AccountKind.DRIVER.value:
            drivers = DocumentStore.query("drivers", email=email)
            if not drivers:
                raise AuthError(f"No driver found with email {email}")
            driver = Driver.from_record(drivers[0])
            return {
                "id": driver.id,
                "email": email,
                "kind": kind,
                "role": AccountKind.DRIVER.value,
                "name": driver.name,
                "driver": driver,
            }

        profile = resolve_profile(
            email, [Employee.from_record(r) for r in DocumentStore.query("employees", email=email)]
        )
        return {
            # Accounts without a profile are keyed by their email
            "id": profile.id or email,
            "email": email,
            "kind": kind,
            "role": Role.ADMIN.value if profile.is_admin else Role.EMPLOYEE.value,
            "name": profile.name,
            "profile": profile,
        }
