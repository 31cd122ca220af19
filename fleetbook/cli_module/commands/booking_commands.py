"""Booking commands for the FleetBook CLI."""

import click
from tabulate import tabulate

from fleetbook.models.employee import Role
from fleetbook.services.booking_service import BookingService
from fleetbook.cli_module.utils import CLI_ERRORS, format_instant, require_role

BOOKER_ROLES = [Role.ADMIN.value, Role.EMPLOYEE.value]


@click.group(name="booking")
def booking_group():
    """Car booking commands."""
    pass


@booking_group.command()
@click.argument("car_id")
@click.option("--start", prompt=True, help="Start time, e.g. 2025-03-01T09:00")
@click.option("--end", prompt=True, help="End time, e.g. 2025-03-01T12:00")
@click.option("--purpose", default="", help="Purpose of the trip")
@click.option("--for", "on_behalf_of", help="Employee email to book for (admins only)")
@require_role(BOOKER_ROLES)
def create(token, car_id, start, end, purpose, on_behalf_of):
    """Book a car for a time window."""
    try:
        booking = BookingService.create_booking(
            token, car_id, start, end, purpose=purpose, on_behalf_of=on_behalf_of
        )
        click.echo("Car booked successfully!")
        click.echo(f"Booking ID: {booking['id']}")
        click.echo(f"For: {booking['userName']}")
        click.echo(f"From: {format_instant(booking['startDate'])}")
        click.echo(f"To: {format_instant(booking['endDate'])}")
    except CLI_ERRORS as e:
        click.echo(f"Error: {str(e)}", err=True)


@booking_group.command(name="list")
@require_role(BOOKER_ROLES)
def list_bookings(token):
    """List your bookings."""
    try:
        bookings = BookingService.get_user_bookings(token)

        if not bookings:
            click.echo("You have no bookings.")
            return

        table_data = [
            [
                b.get("id", ""),
                b.get("carId", ""),
                format_instant(b.get("startDate")),
                format_instant(b.get("endDate")),
                _status_label(b),
                b.get("purpose") or "",
            ]
            for b in bookings
        ]
        click.echo(tabulate(
            table_data,
            headers=["ID", "Car", "Start", "End", "Status", "Purpose"],
            tablefmt="grid"
        ))
    except CLI_ERRORS as e:
        click.echo(f"Error: {str(e)}", err=True)


@booking_group.command()
@click.argument("booking_id")
@click.option("--odometer", prompt="Odometer reading (km)", help="Odometer reading at the start (km)")
@require_role(BOOKER_ROLES)
def start(token, booking_id, odometer):
    """Start the trip of a booking."""
    try:
        BookingService.start_trip(token, booking_id, odometer)
        click.echo("Trip started. Drive safely!")
    except CLI_ERRORS as e:
        click.echo(f"Error: {str(e)}", err=True)


@booking_group.command()
@click.argument("booking_id")
@click.option("--odometer", prompt="Odometer reading (km)", help="Odometer reading at the end (km)")
@require_role(BOOKER_ROLES)
def end(token, booking_id, odometer):
    """End the trip of a booking."""
    try:
        booking = BookingService.end_trip(token, booking_id, odometer)
        click.echo("Trip completed!")
        distance = booking.get("distanceTraveled")
        if distance is not None:
            click.echo(f"Distance traveled: {float(distance):.2f} km")
    except CLI_ERRORS as e:
        click.echo(f"Error: {str(e)}", err=True)


@booking_group.command()
@click.argument("booking_id")
@require_role(BOOKER_ROLES)
def cancel(token, booking_id):
    """Cancel a booking that has not started."""
    try:
        BookingService.cancel_booking(token, booking_id)
        click.echo(f"Booking {booking_id} cancelled.")
    except CLI_ERRORS as e:
        click.echo(f"Error: {str(e)}", err=True)


def _status_label(booking):
    if booking.get("status") == "active" and booking.get("tripStarted"):
        return "in trip"
    return booking.get("status", "")
