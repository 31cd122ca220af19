"""Admin commands for the FleetBook CLI."""

import click
from tabulate import tabulate

from fleetbook.core import clock
from fleetbook.core.identity import booking_display_name, index_by_email, index_by_id
from fleetbook.core.snapshots import COLLECTIONS, FleetSnapshot
from fleetbook.models.employee import Employee, Role
from fleetbook.services.auth_service import AccountKind, AuthService
from fleetbook.services.booking_service import BookingService
from fleetbook.services.driver_service import DriverService
from fleetbook.services.employee_service import EmployeeService
from fleetbook.services.store import DocumentStore
from fleetbook.cli_module.utils import CLI_ERRORS, format_instant, require_role

ADMIN_ONLY = [Role.ADMIN.value]


@click.group(name="admin")
def admin_group():
    """Admin commands."""
    pass


def _load_snapshot() -> FleetSnapshot:
    snapshot = FleetSnapshot()
    for collection in COLLECTIONS:
        snapshot.replace(collection, DocumentStore.snapshot(collection))
    return snapshot


@admin_group.command()
@require_role(ADMIN_ONLY)
def stats(token):
    """Show fleet dashboard counters."""
    try:
        counters = _load_snapshot().stats(clock.now())
        click.echo(f"Total cars: {counters['total_cars']}")
        click.echo(f"Available cars: {counters['available_cars']}")
        click.echo(f"Active bookings: {counters['active_bookings']}")
        click.echo(f"Total drivers: {counters['total_drivers']}")
    except CLI_ERRORS as e:
        click.echo(f"Error: {str(e)}", err=True)


@admin_group.command()
@click.option("--status", type=click.Choice(["active", "completed", "cancelled"]),
              help="Only show bookings with this status")
@require_role(ADMIN_ONLY)
def bookings(token, status):
    """List all bookings, newest first."""
    try:
        records = BookingService.get_all_bookings(token)
        if status:
            records = [b for b in records if b.get("status") == status]

        if not records:
            click.echo("No bookings found.")
            return

        employees = [Employee.from_record(r) for r in DocumentStore.list("employees")]
        by_id, by_email = index_by_id(employees), index_by_email(employees)

        table_data = []
        for b in records:
            requester = booking_display_name(b, by_id, by_email)
            if b.get("bookedBy"):
                requester += f" (by {b['bookedBy'].get('name', '')})"
            distance = b.get("distanceTraveled")
            table_data.append([
                b.get("id", ""),
                b.get("carId", ""),
                requester,
                format_instant(b.get("startDate")),
                format_instant(b.get("endDate")),
                b.get("status", ""),
                f"{float(distance):.2f}" if distance not in (None, "") else "-",
            ])

        click.echo(f"\nTotal bookings: {len(records)}")
        click.echo(tabulate(
            table_data,
            headers=["ID", "Car", "Requester", "Start", "End", "Status", "Distance (km)"],
            tablefmt="grid"
        ))
    except CLI_ERRORS as e:
        click.echo(f"Error: {str(e)}", err=True)


@admin_group.group(name="drivers")
def drivers_group():
    """Manage drivers."""
    pass


@drivers_group.command(name="list")
@require_role(ADMIN_ONLY)
def list_drivers(token):
    """List all drivers."""
    try:
        drivers = DriverService.list_drivers(token)
        if not drivers:
            click.echo("No drivers registered.")
            return

        table_data = [
            [d.get("id", ""), d.get("name", ""), d.get("email", ""), d.get("phone", ""),
             d.get("license", ""), d.get("carId") or "-"]
            for d in drivers
        ]
        click.echo(tabulate(
            table_data,
            headers=["ID", "Name", "Email", "Phone", "License", "Car"],
            tablefmt="grid"
        ))
    except CLI_ERRORS as e:
        click.echo(f"Error: {str(e)}", err=True)


@drivers_group.command(name="add")
@click.option("--name", prompt=True, help="Driver name")
@click.option("--email", prompt=True, help="Driver email")
@click.option("--phone", default="", help="Phone number")
@click.option("--license", default="", help="Driver's license number")
@click.option("--car", "car_id", default=None, help="ID of the car to assign")
@require_role(ADMIN_ONLY)
def add_driver(token, name, email, phone, license, car_id):
    """Add a driver."""
    try:
        driver = DriverService.add_driver(token, name, email, phone, license, car_id)
        click.echo(f"Driver {driver['name']} added (ID: {driver['id']}).")
    except CLI_ERRORS as e:
        click.echo(f"Error: {str(e)}", err=True)


@drivers_group.command(name="update")
@click.argument("driver_id")
@click.option("--name", help="Update name")
@click.option("--email", help="Update email")
@click.option("--phone", help="Update phone number")
@click.option("--license", help="Update license number")
@click.option("--car", "car_id", help="Assign a car (empty string to unassign)")
@require_role(ADMIN_ONLY)
def update_driver(token, driver_id, name, email, phone, license, car_id):
    """Update a driver."""
    update_data = {"name": name, "email": email, "phone": phone, "license": license, "carId": car_id}
    if all(value is None for value in update_data.values()):
        click.echo("No update information provided. Use the options to specify what to update.")
        return

    try:
        DriverService.update_driver(token, driver_id, update_data)
        click.echo(f"Driver {driver_id} updated.")
    except CLI_ERRORS as e:
        click.echo(f"Error: {str(e)}", err=True)


@drivers_group.command(name="delete")
@click.argument("driver_id")
@click.confirmation_option(prompt="Are you sure you want to delete this driver?")
@require_role(ADMIN_ONLY)
def delete_driver(token, driver_id):
    """Delete a driver."""
    try:
        DriverService.delete_driver(token, driver_id)
        click.echo(f"Driver {driver_id} deleted.")
    except CLI_ERRORS as e:
        click.echo(f"Error: {str(e)}", err=True)


@admin_group.group(name="employees")
def employees_group():
    """Manage employee profiles."""
    pass


@employees_group.command(name="list")
@require_role(ADMIN_ONLY)
def list_employees(token):
    """List employees by name."""
    try:
        employees = EmployeeService.list_employees(token)
        if not employees:
            click.echo("No employees found.")
            return

        table_data = [
            [e.get("id", ""), e.get("name", ""), e.get("email", ""), e.get("role", ""),
             e.get("department") or "-"]
            for e in employees
        ]
        click.echo(tabulate(
            table_data,
            headers=["ID", "Name", "Email", "Role", "Department"],
            tablefmt="grid"
        ))
    except CLI_ERRORS as e:
        click.echo(f"Error: {str(e)}", err=True)


@employees_group.command(name="add")
@click.option("--name", prompt=True, help="Employee name")
@click.option("--email", prompt=True, help="Employee email")
@click.option("--role", type=click.Choice([r.value for r in Role]), default=Role.EMPLOYEE.value,
              help="Employee role")
@click.option("--department", default=None, help="Department")
@require_role(ADMIN_ONLY)
def add_employee(token, name, email, role, department):
    """Add an employee profile."""
    try:
        employee = EmployeeService.add_employee(token, name, email, role, department)
        click.echo(f"Employee {employee['name']} added (ID: {employee['id']}).")
    except CLI_ERRORS as e:
        click.echo(f"Error: {str(e)}", err=True)


@employees_group.command(name="update")
@click.argument("employee_id")
@click.option("--name", help="Update name")
@click.option("--email", help="Update email")
@click.option("--role", type=click.Choice([r.value for r in Role]), help="Update role")
@click.option("--department", help="Update department")
@require_role(ADMIN_ONLY)
def update_employee(token, employee_id, name, email, role, department):
    """Update an employee profile."""
    update_data = {"name": name, "email": email, "role": role, "department": department}
    if all(value is None for value in update_data.values()):
        click.echo("No update information provided. Use the options to specify what to update.")
        return

    try:
        EmployeeService.update_employee(token, employee_id, update_data)
        click.echo(f"Employee {employee_id} updated.")
    except CLI_ERRORS as e:
        click.echo(f"Error: {str(e)}", err=True)


@employees_group.command(name="delete")
@click.argument("employee_id")
@click.confirmation_option(prompt="Are you sure you want to delete this employee?")
@require_role(ADMIN_ONLY)
def delete_employee(token, employee_id):
    """Delete an employee profile."""
    try:
        EmployeeService.delete_employee(token, employee_id)
        click.echo(f"Employee {employee_id} deleted.")
    except CLI_ERRORS as e:
        click.echo(f"Error: {str(e)}", err=True)


@admin_group.group(name="accounts")
def accounts_group():
    """Manage sign-in accounts."""
    pass


@accounts_group.command(name="create")
@click.option("--email", prompt=True, help="Account email")
@click.option("--password", prompt=True, hide_input=True, confirmation_prompt=True, help="Account password")
@click.option("--kind", type=click.Choice([k.value for k in AccountKind]), default=AccountKind.EMPLOYEE.value,
              help="Account kind")
@require_role(ADMIN_ONLY)
def create_account(token, email, password, kind):
    """Create a sign-in account for an employee or driver."""
    try:
        account = AuthService.register_account(token, email, password, kind)
        click.echo(f"Account created for {account['email']} ({account['kind']}).")
    except CLI_ERRORS as e:
        click.echo(f"Error: {str(e)}", err=True)
