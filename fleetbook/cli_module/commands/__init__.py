"""Command modules for the FleetBook CLI."""

from fleetbook.cli_module.commands.auth_commands import auth_group
from fleetbook.cli_module.commands.car_commands import car_group
from fleetbook.cli_module.commands.booking_commands import booking_group
from fleetbook.cli_module.commands.driver_commands import driver_group
from fleetbook.cli_module.commands.admin_commands import admin_group

__all__ = [
    'auth_group',
    'car_group',
    'booking_group',
    'driver_group',
    'admin_group',
]
