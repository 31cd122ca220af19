"""Utility functions for the CLI interface."""

from functools import wraps
import os
import json
from typing import Optional, List

import click

from fleetbook import config
from fleetbook.core.errors import BookingError, StorageError
from fleetbook.services.auth_service import AuthService, AuthError

# Errors a command reports as "Error: <reason>" instead of a traceback
CLI_ERRORS = (BookingError, StorageError, AuthError)

DATETIME_FORMAT = "%Y-%m-%d %H:%M"


def save_token(token: str) -> None:
    """Save session token to the config file."""
    if not os.path.exists(config.CONFIG_DIR):
        os.makedirs(config.CONFIG_DIR)

    with open(config.CONFIG_FILE, 'w') as f:
        json.dump({"token": token}, f)


def get_token() -> Optional[str]:
    """Get session token from the config file."""
    if not os.path.exists(config.CONFIG_FILE):
        return None

    try:
        with open(config.CONFIG_FILE, 'r') as f:
            return json.load(f).get("token")
    except json.JSONDecodeError:
        return None


def clear_token() -> bool:
    """Remove the stored session. Returns False if there was none."""
    if not os.path.exists(config.CONFIG_FILE):
        return False
    os.remove(config.CONFIG_FILE)
    return True


def require_role(roles: List[str]):
    """
    Decorator to require a signed-in principal with one of ``roles``.

    The session token is passed to the command as its first argument.
    """
    def decorator(f):
        @wraps(f)
        def wrapped(*args, **kwargs):
            token = get_token()
            if not token:
                click.echo("You are not signed in. Please sign in first.", err=True)
                return

            try:
                AuthService.require_role(token, roles)
            except AuthError as e:
                click.echo(f"Access denied: {str(e)}", err=True)
                return
            except StorageError as e:
                click.echo(f"Error: {str(e)}", err=True)
                return

            return f(token, *args, **kwargs)
        return wrapped
    return decorator


def format_instant(value: Optional[str]) -> str:
    """Shorten an ISO timestamp for table output."""
    if not value:
        return "-"
    return value.replace("T", " ")[:16]
