"""Services for the FleetBook application."""
