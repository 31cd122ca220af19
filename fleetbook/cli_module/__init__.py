"""Command-line interface for the FleetBook application."""
