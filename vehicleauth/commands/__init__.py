"""CLI commands for vehicleauth."""
