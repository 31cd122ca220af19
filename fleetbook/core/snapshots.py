"""Derived fleet views recomputed from full collection snapshots.

The store delivers the whole current content of a collection on every
change. :class:`FleetSnapshot` keeps the latest mapping per collection and
recomputes each view from scratch on demand, so no incremental bookkeeping
can drift out of sync.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

from fleetbook.core.errors import ValidationError
from fleetbook.models.booking import Booking
from fleetbook.models.car import Car
from fleetbook.models.driver import Driver

logger = logging.getLogger(__name__)

COLLECTIONS = ("cars", "drivers", "bookings")


class FleetSnapshot:
    """Observer holding the latest snapshot of each fleet collection."""

    def __init__(self):
        self._records: Dict[str, Dict[str, Dict[str, Any]]] = {name: {} for name in COLLECTIONS}

    def replace(self, collection: str, records: Mapping[str, Dict[str, Any]]) -> None:
        """Replace a collection with a new full snapshot (id -> record)."""
        if collection not in self._records:
            raise ValueError(f"Unknown collection '{collection}'")
        self._records[collection] = dict(records)

    @property
    def cars(self) -> List[Car]:
        return [Car.from_record(r) for r in self._records["cars"].values()]

    @property
    def drivers(self) -> List[Driver]:
        return [Driver.from_record(r) for r in self._records["drivers"].values()]

    @property
    def bookings(self) -> List[Booking]:
        bookings = []
        for record in self._records["bookings"].values():
            try:
                bookings.append(Booking.from_record(record))
            except ValidationError as e:
                logger.warning(f"Skipping malformed booking {record.get('id')}: {e}")
        return bookings

    def active_bookings_for(self, car_id: str) -> List[Booking]:
        """Active bookings of a car, earliest first."""
        return sorted(
            (b for b in self.bookings if b.car_id == car_id and b.is_active),
            key=lambda b: b.start,
        )

    def is_car_in_use(self, car_id: str, now: datetime) -> bool:
        """A car is in use while a started trip's window covers ``now``."""
        return any(
            b.trip_started and b.start <= now <= b.end
            for b in self.active_bookings_for(car_id)
        )

    def driver_for_car(self, car_id: str) -> Optional[Driver]:
        """The car's driver, by the car's driverId or else the driver's carId."""
        driver_id = (self._records["cars"].get(car_id) or {}).get("driverId")
        drivers = self.drivers
        if driver_id:
            for driver in drivers:
                if driver.id == driver_id:
                    return driver
        return next((d for d in drivers if d.car_id == car_id), None)

    def stats(self, now: datetime) -> Dict[str, int]:
        """Dashboard counters."""
        cars = self.cars
        in_use = sum(1 for car in cars if self.is_car_in_use(car.id, now))
        return {
            "total_cars": len(cars),
            "available_cars": len(cars) - in_use,
            "active_bookings": sum(1 for b in self.bookings if b.is_active),
            "total_drivers": len(self._records["drivers"]),
        }


def trip_status(booking: Booking, now: datetime) -> str:
    """
    Label a driver's upcoming trip relative to ``now``.

    Returns one of ``in_progress``, ``completing``, ``overdue``,
    ``starting_soon``, ``today`` or ``upcoming``.
    """
    if booking.trip_started:
        return "in_progress" if now < booking.end else "completing"

    hours_until_start = (booking.start - now).total_seconds() / 3600
    if hours_until_start < 0:
        return "overdue"
    if hours_until_start < 1:
        return "starting_soon"
    if hours_until_start < 24:
        return "today"
    return "upcoming"
