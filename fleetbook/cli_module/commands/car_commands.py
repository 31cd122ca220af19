"""Car management commands for the FleetBook CLI."""

import click
from tabulate import tabulate

from fleetbook.core import clock
from fleetbook.models.car import Car
from fleetbook.models.employee import Role
from fleetbook.services.auth_service import AccountKind
from fleetbook.services.car_service import CarService
from fleetbook.cli_module.utils import CLI_ERRORS, require_role

ANY_ROLE = [Role.ADMIN.value, Role.EMPLOYEE.value, AccountKind.DRIVER.value]


@click.group(name="car")
def car_group():
    """Car management commands."""
    pass


@car_group.command(name="list")
@require_role(ANY_ROLE)
def list_cars(token):
    """List all cars in the fleet."""
    try:
        cars = CarService.list_cars(token)

        if not cars:
            click.echo("No cars registered.")
            return

        today = clock.today()
        table_data = []
        for record in cars:
            car = Car.from_record(record)
            table_data.append([
                car.id,
                car.model,
                car.plate,
                car.seats,
                car.driver_id or "-",
                "No" if car.is_blocked_on(today) else "Yes",
            ])
        click.echo(tabulate(
            table_data,
            headers=["ID", "Model", "Plate", "Seats", "Driver", "Available Today"],
            tablefmt="grid"
        ))
    except CLI_ERRORS as e:
        click.echo(f"Error: {str(e)}", err=True)


@car_group.command()
@click.option("--model", prompt=True, help="Car model")
@click.option("--plate", prompt=True, help="License plate")
@click.option("--seats", type=int, default=5, help="Number of seats")
@require_role([Role.ADMIN.value])
def add(token, model, plate, seats):
    """Add a car to the fleet."""
    try:
        car = CarService.add_car(token, model, plate, seats)
        click.echo("Car added successfully!")
        click.echo(f"Model: {car['model']}")
        click.echo(f"Plate: {car['plate']}")
        click.echo(f"Car ID: {car['id']}")
    except CLI_ERRORS as e:
        click.echo(f"Error: {str(e)}", err=True)


@car_group.command()
@click.argument("car_id")
@click.option("--model", help="Update car model")
@click.option("--plate", help="Update license plate")
@click.option("--seats", type=int, help="Update number of seats")
@require_role([Role.ADMIN.value])
def update(token, car_id, model, plate, seats):
    """Update car information."""
    update_data = {"model": model, "plate": plate, "seats": seats}
    if all(value is None for value in update_data.values()):
        click.echo("No update information provided. Use the options to specify what to update.")
        click.echo("Example: fleetbook car update abc123 --seats 7")
        return

    try:
        car = CarService.update_car(token, car_id, update_data)
        click.echo("Car updated successfully!")
        click.echo(f"{car['model']} ({car['plate']}), {car['seats']} seats")
    except CLI_ERRORS as e:
        click.echo(f"Error: {str(e)}", err=True)


@car_group.command()
@click.argument("car_id")
@click.confirmation_option(prompt="Are you sure you want to delete this car?")
@require_role([Role.ADMIN.value])
def delete(token, car_id):
    """Delete a car."""
    try:
        CarService.delete_car(token, car_id)
        click.echo(f"Car {car_id} deleted.")
    except CLI_ERRORS as e:
        click.echo(f"Error: {str(e)}", err=True)


@car_group.command()
@click.argument("car_id")
@click.option("--available/--unavailable", required=True, help="Whether the car can be booked today")
@require_role([Role.ADMIN.value])
def availability(token, car_id, available):
    """Mark a car available or unavailable for today."""
    try:
        car = CarService.set_availability(token, car_id, available)
        state = "available" if available else "unavailable"
        click.echo(f"{car.get('model', car_id)} is now {state} today.")
    except CLI_ERRORS as e:
        click.echo(f"Error: {str(e)}", err=True)
