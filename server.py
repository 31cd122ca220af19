#!/usr/bin/env python3
"""
Management script for the FleetBook JSON document store.
"""

import os
import sys
import subprocess
import signal
import time
import json
from datetime import datetime
from uuid import uuid4

import bcrypt
import click

from store_server import EMPTY_DB

BASE_DIR = os.path.dirname(os.path.abspath(__file__))
PID_FILE = os.path.join(BASE_DIR, 'server.pid')
DB_PATH = os.path.join(BASE_DIR, 'data', 'db.json')
STARTUP_GRACE_SECONDS = 1


def _read_db():
    with open(DB_PATH, 'r') as f:
        return json.load(f)


def _write_db(data):
    os.makedirs(os.path.dirname(DB_PATH), exist_ok=True)
    with open(DB_PATH, 'w') as f:
        json.dump(data, f, indent=2)


def _recorded_pid():
    """PID stored by ``start``, or None when there is no usable PID file."""
    if not os.path.exists(PID_FILE):
        return None
    with open(PID_FILE, 'r') as f:
        raw = f.read().strip()
    if not raw.isdigit():
        click.echo(f"Discarding invalid PID file contents: {raw!r}", err=True)
        os.remove(PID_FILE)
        return None
    return int(raw)


def _alive(pid):
    try:
        os.kill(pid, 0)
    except OSError:
        return False
    return True


@click.group()
def cli():
    """FleetBook store management CLI."""
    pass


@cli.command()
@click.option('--port', default=3000, help='Port to serve the store on')
def start(port):
    """Start the JSON document store in the background."""
    pid = _recorded_pid()
    if pid is not None and _alive(pid):
        click.echo(f"Store already running (PID {pid}).")
        return
    if pid is not None:
        os.remove(PID_FILE)

    if not os.path.exists(DB_PATH):
        click.echo(f"No database at {DB_PATH}, creating an empty one.")
        _write_db(EMPTY_DB)

    env = dict(os.environ, FLEETBOOK_DB_FILE=DB_PATH, FLEETBOOK_STORE_PORT=str(port))
    try:
        process = subprocess.Popen(
            [sys.executable, os.path.join(BASE_DIR, 'store_server.py')],
            env=env,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
        )
    except OSError as e:
        click.echo(f"Could not launch the store: {str(e)}", err=True)
        return

    time.sleep(STARTUP_GRACE_SECONDS)
    if process.poll() is not None:
        _, stderr = process.communicate()
        click.echo(f"Store exited during startup:\n{stderr.decode('utf-8')}", err=True)
        return

    with open(PID_FILE, 'w') as f:
        f.write(str(process.pid))
    click.echo(f"Store listening on http://localhost:{port} (PID {process.pid}, database {DB_PATH})")


@cli.command()
def stop():
    """Stop the JSON document store."""
    pid = _recorded_pid()
    if pid is None:
        click.echo("Store is not running.")
        return

    if _alive(pid):
        os.kill(pid, signal.SIGTERM)
        time.sleep(STARTUP_GRACE_SECONDS)
        if _alive(pid):
            os.kill(pid, signal.SIGKILL)
        click.echo(f"Store stopped (PID {pid}).")
    else:
        click.echo(f"No process with PID {pid}; clearing the stale PID file.")
    os.remove(PID_FILE)


@cli.command()
def status():
    """Report whether the JSON document store is running."""
    pid = _recorded_pid()
    if pid is None:
        click.echo("Store is not running.")
    elif _alive(pid):
        click.echo(f"Store is running (PID {pid}).")
    else:
        click.echo(f"Store is not running; PID file points at dead process {pid}.")


@cli.command()
def reset():
    """Empty every collection, keeping a backup of the old database."""
    if not os.path.exists(DB_PATH):
        click.echo(f"Database file not found: {DB_PATH}")
        return

    backup_path = f"{DB_PATH}.bak"
    try:
        os.replace(DB_PATH, backup_path)
        _write_db(EMPTY_DB)
        click.echo(f"Database reset. Backup created at {backup_path}")
    except OSError as e:
        click.echo(f"Error resetting database: {str(e)}", err=True)


@cli.command(name="create-admin")
@click.option("--name", prompt=True, help="Admin name")
@click.option("--email", prompt=True, help="Admin email")
@click.option("--password", prompt=True, hide_input=True, confirmation_prompt=True, help="Admin password")
def create_admin(name, email, password):
    """Create the first admin account and profile directly in the database."""
    db = _read_db() if os.path.exists(DB_PATH) else json.loads(json.dumps(EMPTY_DB))
    email = email.strip().lower()

    if any(a.get("email") == email for a in db.setdefault("accounts", [])):
        click.echo(f"An account with email {email} already exists.", err=True)
        return

    now = datetime.now().isoformat()
    db["accounts"].append({
        "id": str(uuid4()),
        "email": email,
        "password": bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt()).decode('utf-8'),
        "kind": "employee",
        "createdAt": now,
    })
    db.setdefault("employees", []).append({
        "id": str(uuid4()),
        "name": name.strip(),
        "email": email,
        "role": "admin",
        "department": None,
        "createdAt": now,
    })
    _write_db(db)
    click.echo(f"Admin {name} created. Sign in with 'fleetbook auth signin'.")


if __name__ == '__main__':
    cli()
