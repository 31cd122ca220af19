"""Authentication commands for the FleetBook CLI."""

import click

from fleetbook.core.errors import StorageError
from fleetbook.services.auth_service import AuthService, AuthError, AccountKind
from fleetbook.cli_module.utils import save_token, get_token, clear_token


@click.group(name="auth")
def auth_group():
    """Authentication commands."""
    pass


@auth_group.command()
@click.option("--email", prompt=True, help="Your email address")
@click.option("--password", prompt=True, hide_input=True, help="Your password")
def signin(email, password):
    """Sign in with your credentials."""
    try:
        result = AuthService.sign_in(email, password)
        save_token(result["token"])
        principal = result["principal"]
        click.echo(f"Welcome back, {principal['name']}!")

        if principal["kind"] == AccountKind.DRIVER.value:
            click.echo("You are signed in as a driver.")
        elif principal["role"] == "admin":
            click.echo("You are signed in as an admin.")
        else:
            click.echo("You are signed in as an employee.")
    except (AuthError, StorageError) as e:
        click.echo(f"Error during signin: {str(e)}", err=True)


@auth_group.command()
def signout():
    """Sign out from the application."""
    if clear_token():
        click.echo("You have been signed out.")
    else:
        click.echo("You were not signed in.")


@auth_group.command()
def whoami():
    """Show the signed-in account."""
    token = get_token()

    if not token:
        click.echo("You are not signed in.", err=True)
        return

    try:
        principal = AuthService.verify_token(token)
        click.echo(f"Signed in as: {principal['name']}")
        click.echo(f"Email: {principal['email']}")
        click.echo(f"Role: {principal['role'].capitalize()}")

        if principal["kind"] == AccountKind.DRIVER.value:
            driver = principal["driver"]
            click.echo(f"Phone: {driver.phone or 'Not provided'}")
            click.echo(f"Assigned car: {driver.car_id or 'None'}")
        elif principal["profile"].department:
            click.echo(f"Department: {principal['profile'].department}")

    except AuthError as e:
        click.echo(f"Session error: {str(e)}", err=True)
        click.echo("Please sign in again.")
    except StorageError as e:
        click.echo(f"Error: {str(e)}", err=True)
