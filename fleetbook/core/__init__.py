"""Booking core: pure rules with no dependency on storage or the CLI."""
