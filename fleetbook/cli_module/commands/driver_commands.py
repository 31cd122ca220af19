"""Driver commands for the FleetBook CLI."""

import logging
import time

import click
from tabulate import tabulate

from fleetbook import config
from fleetbook.core import clock
from fleetbook.core.errors import ValidationError
from fleetbook.core.snapshots import trip_status
from fleetbook.models.booking import Booking
from fleetbook.models.notification import Notification
from fleetbook.services.auth_service import AccountKind
from fleetbook.services.booking_service import BookingService
from fleetbook.services.notification_service import NotificationService
from fleetbook.cli_module.utils import CLI_ERRORS, format_instant, require_role

logger = logging.getLogger(__name__)

DRIVER_ONLY = [AccountKind.DRIVER.value]


@click.group(name="driver")
def driver_group():
    """Driver commands."""
    pass


@driver_group.command()
@require_role(DRIVER_ONLY)
def trips(token):
    """Show the upcoming trips of your car."""
    try:
        records = BookingService.get_driver_trips(token)

        if not records:
            click.echo("No upcoming trips.")
            return

        now = clock.now()
        table_data = []
        for record in records:
            booking = Booking.from_record(record)
            table_data.append([
                booking.id,
                booking.user_name,
                format_instant(record.get("startDate")),
                format_instant(record.get("endDate")),
                trip_status(booking, now).replace("_", " "),
                booking.purpose,
            ])
        click.echo(tabulate(
            table_data,
            headers=["ID", "Passenger", "Start", "End", "Status", "Purpose"],
            tablefmt="grid"
        ))
    except CLI_ERRORS as e:
        click.echo(f"Error: {str(e)}", err=True)


@driver_group.command()
@click.option("--new", "only_new", is_flag=True, help="Only show notifications not yet shown")
@require_role(DRIVER_ONLY)
def notifications(token, only_new):
    """Show your notifications."""
    try:
        if only_new:
            items = NotificationService.claim_undelivered(token)
        else:
            items = NotificationService.get_notifications(token)

        parsed = []
        for record in items:
            try:
                parsed.append(Notification.from_record(record))
            except ValidationError as e:
                logger.warning(f"Skipping malformed notification {record.get('id')}: {e}")
        items = parsed

        if not items:
            click.echo("No notifications.")
            return

        unread = sum(1 for n in items if not n.read)
        click.echo(f"{len(items)} notification(s), {unread} unread:")
        for n in items:
            marker = " " if n.read else "*"
            click.echo(f"{marker} [{format_instant(n.created_at)}] {n.title}")
            click.echo(f"    {n.message} (ID: {n.id})")
    except CLI_ERRORS as e:
        click.echo(f"Error: {str(e)}", err=True)


@driver_group.command()
@click.argument("notification_id", required=False)
@click.option("--all", "mark_all", is_flag=True, help="Mark every notification as read")
@require_role(DRIVER_ONLY)
def read(token, notification_id, mark_all):
    """Mark a notification (or all of them) as read."""
    if not notification_id and not mark_all:
        click.echo("Give a notification ID or use --all.", err=True)
        return

    try:
        if mark_all:
            count = NotificationService.mark_all_as_read(token)
            click.echo(f"Marked {count} notification(s) as read.")
        else:
            NotificationService.mark_as_read(token, notification_id)
            click.echo("Notification marked as read.")
    except CLI_ERRORS as e:
        click.echo(f"Error: {str(e)}", err=True)


@driver_group.command()
@click.option("--every", type=int, default=None,
              help=f"Repeat every N seconds (e.g. {config.SWEEP_INTERVAL_SECONDS}) until interrupted")
def sweep(every):
    """Send "starting soon" notifications for trips starting in about an hour."""
    while True:
        try:
            created = NotificationService.sweep_upcoming_trips()
            click.echo(f"Sent {len(created)} starting-soon notification(s).")
        except CLI_ERRORS as e:
            click.echo(f"Error: {str(e)}", err=True)
            if every is None:
                return

        if every is None:
            return
        # Sweeps run one after another, never overlapping
        time.sleep(every)
