"""Source of "now" for the services.

The core never reads the clock itself: callers pass ``now``/``today`` in.
Services default to :func:`now` when the caller does not supply a value.
"""

from datetime import date, datetime


def now() -> datetime:
    """Current local time, naive."""
    return datetime.now()


def today() -> date:
    return now().date()
