"""Main CLI entry point for FleetBook application."""

import click

from fleetbook import config

CONTEXT_SETTINGS = {
    "help_option_names": ["-h", "--help"],
    "max_content_width": 120,
    "show_default": True
}

from fleetbook.cli_module.commands import (
    admin_group,
    auth_group,
    booking_group,
    car_group,
    driver_group,
)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.option("--log-level", default=None, help="Logging level (defaults to FLEETBOOK_LOG_LEVEL)")
def cli(log_level):
    """FleetBook CLI for booking company cars."""
    config.setup_logging(log_level.upper() if log_level else None)


cli.add_command(auth_group)
cli.add_command(car_group)
cli.add_command(booking_group)
cli.add_command(driver_group)
cli.add_command(admin_group)


def main():
    """Entry point for the application."""
    cli()


if __name__ == '__main__':
    main()
