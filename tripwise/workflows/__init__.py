"""Workflow entry points that chain the tripwise core."""

from .trip_weather import attach_weather_to_itinerary, fetch_trip_weather, summarize_forecast

__all__ = [
    "attach_weather_to_itinerary",
    "fetch_trip_weather",
    "summarize_forecast",
]
