"""FleetBook: company car booking for employees, drivers and administrators."""

__version__ = "0.1.0"
