"""Same-day availability gate for cars."""

from datetime import date, datetime

from fleetbook.core.decision import Decision
from fleetbook.core.errors import AvailabilityError
from fleetbook.core.timerange import is_on_date
from fleetbook.models.car import Car


def is_bookable(car: Car, start: datetime, end: datetime, today: date) -> Decision:
    """
    Check a candidate window against the car's "available today" flag.

    The flag only blocks the current calendar day: a window is rejected
    when either end of it falls on ``today``. Windows on later days are
    always accepted, whatever the flag says.
    """
    if not car.is_blocked_on(today):
        return Decision.accept()

    if is_on_date(start, today) or is_on_date(end, today):
        return Decision.reject(
            AvailabilityError,
            f"{car.model} ({car.plate}) is not available today. "
            "Please choose another car or a later date.",
        )
    return Decision.accept()
