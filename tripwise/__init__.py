"""Weather aggregation, advisories and trip statistics for trip planning."""

__version__ = "0.1.0"
