"""Environment driven settings for the weather adapter and forecast extension."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional, Tuple

from dotenv import load_dotenv

from tripwise.schemas import UnitSystem

_LOGGER = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.openweathermap.org/data/2.5"


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        _LOGGER.warning("Ignoring invalid %s=%r; using %s", name, raw, default)
        return default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        _LOGGER.warning("Ignoring invalid %s=%r; using %s", name, raw, default)
        return default


def _env_units(name: str, default: UnitSystem) -> UnitSystem:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return UnitSystem(raw.strip().lower())
    except ValueError:
        _LOGGER.warning("Ignoring invalid %s=%r; using %s", name, raw, default.value)
        return default


@dataclass(frozen=True)
class WeatherSettings:
    """Connection settings for the weather provider adapter."""

    api_key: Optional[str] = None
    base_url: str = DEFAULT_BASE_URL
    timeout: float = 10.0
    provider_horizon_days: int = 5
    samples_per_day: int = 8
    default_units: UnitSystem = UnitSystem.METRIC

    @classmethod
    def from_env(cls) -> "WeatherSettings":
        """Build settings from ``OPENWEATHER_*`` and ``WEATHER_*`` variables."""

        return cls(
            api_key=os.getenv("OPENWEATHER_API_KEY") or None,
            base_url=os.getenv("OPENWEATHER_BASE_URL", DEFAULT_BASE_URL),
            timeout=_env_float("OPENWEATHER_TIMEOUT", 10.0),
            provider_horizon_days=_env_int("WEATHER_HORIZON_DAYS", 5),
            default_units=_env_units("WEATHER_UNITS", UnitSystem.METRIC),
        )


@dataclass(frozen=True)
class ExtensionSettings:
    """Bounds used when synthesising estimated days.

    These are heuristic bounds, not calibrated climatology.
    """

    temperature_jitter: float = 5.0
    humidity_jitter: float = 10.0
    wind_jitter: float = 2.5
    precipitation_chance: float = 0.3
    precipitation_max: float = 5.0

    @classmethod
    def from_env(cls) -> "ExtensionSettings":
        return cls(
            temperature_jitter=_env_float("FORECAST_TEMPERATURE_JITTER", 5.0),
            humidity_jitter=_env_float("FORECAST_HUMIDITY_JITTER", 10.0),
            wind_jitter=_env_float("FORECAST_WIND_JITTER", 2.5),
            precipitation_chance=_env_float("FORECAST_PRECIPITATION_CHANCE", 0.3),
            precipitation_max=_env_float("FORECAST_PRECIPITATION_MAX", 5.0),
        )


def load_settings() -> Tuple[WeatherSettings, ExtensionSettings]:
    """Load ``.env`` (without overriding the shell) and return both settings objects."""

    load_dotenv()
    return WeatherSettings.from_env(), ExtensionSettings.from_env()


__all__ = [
    "DEFAULT_BASE_URL",
    "ExtensionSettings",
    "WeatherSettings",
    "load_settings",
]
