"""vehicleauth - schema lifecycle for the vehicle authorization database."""

__version__ = "1.0.0"
