from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List

import pytest
import requests

from tripwise.core.config import WeatherSettings
from tripwise.core.openweather import (
    OpenWeatherClient,
    WeatherProviderError,
    parse_current_payload,
    parse_forecast_payload,
)
from tripwise.schemas import UnitSystem


class FakeResponse:
    def __init__(self, payload: Dict[str, Any], status_code: int = 200):
        self._payload = payload
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Client Error")

    def json(self) -> Dict[str, Any]:
        return self._payload


class FakeSession:
    def __init__(self, responses: List[FakeResponse]):
        self.responses = responses
        self.calls: List[Dict[str, Any]] = []

    def get(self, url: str, *, params: Dict[str, Any], timeout: float) -> FakeResponse:
        self.calls.append({"url": url, "params": params, "timeout": timeout})
        return self.responses.pop(0)


def _forecast_payload() -> Dict[str, Any]:
    return {
        "city": {
            "name": "Kyoto",
            "country": "JP",
            "timezone": 32400,
            "coord": {"lat": 35.02, "lon": 135.75},
        },
        "list": [
            {
                "dt": 1717200000,
                "main": {"temp": 21.4, "feels_like": 21.0, "humidity": 70, "pressure": 1012},
                "weather": [{"main": "Clouds", "description": "broken clouds", "icon": "04d"}],
                "wind": {"speed": 3.1, "deg": 200},
            },
            {
                "dt": 1717210800,
                "main": {"temp": 23.9, "humidity": 64, "pressure": 1011},
                "weather": [{"main": "Rain", "description": "light rain", "icon": "10d"}],
                "wind": {"speed": 4.0, "deg": 210},
                "rain": {"3h": 0.42},
            },
        ],
    }


def _current_payload() -> Dict[str, Any]:
    return {
        "dt": 1717228800,
        "main": {"temp": 18.2, "feels_like": 17.5, "humidity": 77, "pressure": 1009},
        "weather": [{"main": "Mist", "description": "mist", "icon": "50n"}],
        "wind": {"speed": 1.5, "deg": 90},
    }


def _build_client(session: FakeSession, **overrides: Any) -> OpenWeatherClient:
    settings = WeatherSettings(api_key="test-key", base_url="https://weather.test/data/2.5/", **overrides)
    return OpenWeatherClient(settings, http_session=session)


def test_forecast_requests_provider_window() -> None:
    session = FakeSession([FakeResponse(_forecast_payload())])
    client = _build_client(session, timeout=3.0)

    forecast = client.forecast("Kyoto", "JP", days=3, units=UnitSystem.IMPERIAL)

    assert len(session.calls) == 1
    call = session.calls[0]
    assert call["url"] == "https://weather.test/data/2.5/forecast"
    assert call["params"] == {"q": "Kyoto,JP", "units": "imperial", "cnt": 24, "appid": "test-key"}
    assert call["timeout"] == 3.0
    assert forecast.utc_offset_seconds == 32400
    assert len(forecast.entries) == 2


def test_forecast_sample_count_is_capped_at_horizon() -> None:
    session = FakeSession([FakeResponse(_forecast_payload())])
    client = _build_client(session)

    client.forecast("Kyoto", "JP", days=8)

    assert session.calls[0]["params"]["cnt"] == 40


def test_missing_api_key_raises_before_any_request() -> None:
    session = FakeSession([])
    client = OpenWeatherClient(WeatherSettings(api_key=None), http_session=session)

    with pytest.raises(WeatherProviderError, match="API key not configured"):
        client.forecast("Kyoto", "JP", days=1)

    assert session.calls == []


def test_http_errors_are_wrapped() -> None:
    session = FakeSession([FakeResponse({"message": "city not found"}, status_code=404)])
    client = _build_client(session)

    with pytest.raises(WeatherProviderError, match="Failed to fetch weather data") as excinfo:
        client.current("Atlantis", "XX")

    assert isinstance(excinfo.value.__cause__, requests.HTTPError)


def test_current_uses_weather_endpoint() -> None:
    session = FakeSession([FakeResponse(_current_payload())])
    client = _build_client(session)

    current = client.current("Kyoto", "JP")

    assert session.calls[0]["url"].endswith("/weather")
    assert session.calls[0]["params"]["units"] == "metric"
    assert current.temperature == 18.2
    assert current.condition.main == "Mist"


def test_from_env_reads_openweather_variables(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OPENWEATHER_API_KEY", "env-key")
    monkeypatch.setenv("OPENWEATHER_TIMEOUT", "4.5")

    client = OpenWeatherClient.from_env()

    assert client.settings.api_key == "env-key"
    assert client.settings.timeout == 4.5


def test_parse_forecast_payload_keeps_location() -> None:
    forecast = parse_forecast_payload(_forecast_payload())

    assert forecast.location.name == "Kyoto"
    assert forecast.location.country == "JP"
    assert forecast.location.latitude == 35.02
    assert forecast.entries[1]["rain"] == {"3h": 0.42}


def test_parse_forecast_payload_tolerates_missing_sections() -> None:
    forecast = parse_forecast_payload({})

    assert forecast.location.name == ""
    assert forecast.utc_offset_seconds == 0
    assert forecast.entries == []


def test_parse_current_payload() -> None:
    current = parse_current_payload(_current_payload(), units=UnitSystem.METRIC)

    assert current.humidity == 77
    assert current.wind_speed == 1.5
    assert current.wind_direction == 90
    assert current.observed_at == datetime(2024, 6, 1, 8, 0, tzinfo=timezone.utc)


def test_parse_current_payload_rejects_incomplete_data() -> None:
    with pytest.raises(WeatherProviderError, match="Unexpected current weather payload"):
        parse_current_payload({"weather": [{"main": "Clear"}]}, units=UnitSystem.METRIC)


def test_parse_current_payload_rejects_non_finite_readings() -> None:
    payload = _current_payload()
    payload["main"] = {**payload["main"], "temp": float("nan")}

    with pytest.raises(WeatherProviderError):
        parse_current_payload(payload, units=UnitSystem.METRIC)
