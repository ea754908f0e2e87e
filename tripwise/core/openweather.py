"""Thin wrapper around the OpenWeatherMap current weather and 5 day forecast APIs."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

import requests

from tripwise.core.config import WeatherSettings
from tripwise.schemas import ConditionSnapshot, CurrentConditions, UnitSystem

_LOGGER = logging.getLogger(__name__)


class WeatherProviderError(RuntimeError):
    """Raised when the weather provider cannot be queried."""


@dataclass(slots=True)
class ProviderLocation:
    name: str
    country: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None


@dataclass(slots=True)
class ProviderForecast:
    """Raw 3-hour entries plus the location's offset from UTC."""

    location: ProviderLocation
    utc_offset_seconds: int = 0
    entries: List[Dict[str, Any]] = field(default_factory=list)


def parse_forecast_payload(payload: Mapping[str, Any]) -> ProviderForecast:
    """Split a forecast response into location metadata and raw sample entries."""

    city = payload.get("city") or {}
    coord = city.get("coord") or {}
    entries = payload.get("list") or []
    return ProviderForecast(
        location=ProviderLocation(
            name=city.get("name") or "",
            country=city.get("country") or "",
            latitude=coord.get("lat"),
            longitude=coord.get("lon"),
        ),
        utc_offset_seconds=int(city.get("timezone") or 0),
        entries=[dict(entry) for entry in entries if isinstance(entry, Mapping)],
    )


def parse_current_payload(payload: Mapping[str, Any], *, units: UnitSystem) -> CurrentConditions:
    """Normalise a current weather response."""

    main = payload.get("main") or {}
    wind = payload.get("wind") or {}
    weather = (payload.get("weather") or [{}])[0]
    observed_at = payload.get("dt")
    try:
        return CurrentConditions(
            temperature=main.get("temp"),
            feels_like=main.get("feels_like"),
            humidity=main.get("humidity"),
            pressure=main.get("pressure"),
            wind_speed=wind.get("speed", 0.0),
            wind_direction=wind.get("deg"),
            condition=ConditionSnapshot(
                main=weather.get("main") or "",
                description=weather.get("description") or "",
                icon=weather.get("icon"),
            ),
            observed_at=(
                datetime.fromtimestamp(observed_at, tz=timezone.utc)
                if isinstance(observed_at, (int, float))
                else None
            ),
            units=units,
        )
    except ValueError as exc:
        raise WeatherProviderError(f"Unexpected current weather payload: {exc}") from exc


class OpenWeatherClient:
    """Fetches provider data; all aggregation happens elsewhere."""

    def __init__(
        self,
        settings: WeatherSettings,
        *,
        http_session: Optional[requests.Session] = None,
    ) -> None:
        self._settings = settings
        self._session = http_session or requests.Session()

    @property
    def settings(self) -> WeatherSettings:
        return self._settings

    @classmethod
    def from_env(cls) -> "OpenWeatherClient":
        """Return a client configured from ``OPENWEATHER_*`` variables."""

        return cls(WeatherSettings.from_env())

    def _request(self, path: str, params: Dict[str, Any]) -> Dict[str, Any]:
        if not self._settings.api_key:
            raise WeatherProviderError("OpenWeather API key not configured")

        url = f"{self._settings.base_url.rstrip('/')}/{path.lstrip('/')}"
        _LOGGER.debug("Requesting %s with %s", url, params)
        try:
            response = self._session.get(
                url,
                params={**params, "appid": self._settings.api_key},
                timeout=self._settings.timeout,
            )
            response.raise_for_status()
        except requests.RequestException as exc:
            raise WeatherProviderError(f"Failed to fetch weather data: {exc}") from exc
        return response.json()

    def forecast(
        self,
        city: str,
        country: str,
        *,
        days: int,
        units: UnitSystem = UnitSystem.METRIC,
    ) -> ProviderForecast:
        """Fetch 3-hour samples covering up to the provider's horizon."""

        covered_days = max(1, min(days, self._settings.provider_horizon_days))
        payload = self._request(
            "forecast",
            {
                "q": f"{city},{country}",
                "units": units.value,
                "cnt": covered_days * self._settings.samples_per_day,
            },
        )
        return parse_forecast_payload(payload)

    def current(
        self,
        city: str,
        country: str,
        *,
        units: UnitSystem = UnitSystem.METRIC,
    ) -> CurrentConditions:
        """Fetch the latest observation for a destination."""

        payload = self._request("weather", {"q": f"{city},{country}", "units": units.value})
        return parse_current_payload(payload, units=units)


__all__ = [
    "OpenWeatherClient",
    "ProviderForecast",
    "ProviderLocation",
    "WeatherProviderError",
    "parse_current_payload",
    "parse_forecast_payload",
]
