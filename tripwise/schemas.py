"""Data schemas for the tripwise package."""

from __future__ import annotations

from datetime import date, datetime, time
from enum import Enum
from typing import Dict, List, Literal, Mapping, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    NonNegativeFloat,
    PositiveInt,
    field_validator,
    model_validator,
)

# Alias keeps fields named ``date`` from shadowing the type in class bodies.
CalendarDate = date


class UnitSystem(str, Enum):
    """Unit system requested upstream; selects rounding and labels only."""

    METRIC = "metric"
    IMPERIAL = "imperial"

    @property
    def temperature_label(self) -> str:
        return "celsius" if self is UnitSystem.METRIC else "fahrenheit"

    @property
    def speed_label(self) -> str:
        return "m/s" if self is UnitSystem.METRIC else "mph"


class WeatherCondition(str, Enum):
    """Closed set of provider condition codes."""

    THUNDERSTORM = "Thunderstorm"
    DRIZZLE = "Drizzle"
    RAIN = "Rain"
    SNOW = "Snow"
    MIST = "Mist"
    SMOKE = "Smoke"
    HAZE = "Haze"
    DUST = "Dust"
    FOG = "Fog"
    SAND = "Sand"
    ASH = "Ash"
    SQUALL = "Squall"
    TORNADO = "Tornado"
    CLEAR = "Clear"
    CLOUDS = "Clouds"

    @classmethod
    def lookup(cls, code: Optional[str]) -> Optional["WeatherCondition"]:
        """Return the matching condition, or ``None`` for unknown codes."""

        if code is None:
            return None
        try:
            return cls(code)
        except ValueError:
            return None


def _first_mapping(value: object) -> Mapping[str, object]:
    if isinstance(value, Mapping):
        return value
    if isinstance(value, (list, tuple)) and value and isinstance(value[0], Mapping):
        return value[0]
    return {}


def _volume(value: object) -> object:
    """Extract a precipitation volume from ``{"3h": x}`` or ``{"1h": x}``."""

    if isinstance(value, Mapping):
        return value.get("3h", value.get("1h", 0.0))
    return value


class WeatherSample(BaseModel):
    """A single sub-daily observation produced by a provider adapter."""

    timestamp: datetime = Field(validation_alias=AliasChoices("timestamp", "dt"))
    temperature: float
    feels_like: Optional[float] = None
    humidity: float
    pressure: float
    wind_speed: float
    wind_direction: Optional[float] = None
    rain: float = 0.0
    snow: float = 0.0
    condition: str
    description: str = ""
    icon: Optional[str] = None

    model_config = ConfigDict(frozen=True, populate_by_name=True, allow_inf_nan=False)

    @model_validator(mode="before")
    @classmethod
    def _flatten_provider_entry(cls, data: object) -> object:
        """Accept the provider's nested 3-hour forecast entry shape."""

        if not isinstance(data, Mapping):
            return data

        payload = dict(data)

        main = payload.pop("main", None)
        if isinstance(main, Mapping):
            for source_key, target_key in (
                ("temp", "temperature"),
                ("feels_like", "feels_like"),
                ("humidity", "humidity"),
                ("pressure", "pressure"),
            ):
                if source_key in main:
                    payload.setdefault(target_key, main[source_key])

        weather = _first_mapping(payload.pop("weather", None))
        if weather:
            payload.setdefault("condition", weather.get("main"))
            payload.setdefault("description", weather.get("description") or "")
            payload.setdefault("icon", weather.get("icon"))

        wind = payload.get("wind")
        if isinstance(wind, Mapping):
            payload.pop("wind")
            if "speed" in wind:
                payload.setdefault("wind_speed", wind["speed"])
            if "deg" in wind:
                payload.setdefault("wind_direction", wind["deg"])

        for key in ("rain", "snow"):
            if key in payload:
                volume = _volume(payload[key])
                payload[key] = 0.0 if volume is None else volume

        return payload


class ConditionSnapshot(BaseModel):
    """Representative condition for a day."""

    main: str
    description: str = ""
    icon: Optional[str] = None


class TemperatureRange(BaseModel):
    """Daily temperature statistics in whole units."""

    min: int
    max: int
    avg: int

    @model_validator(mode="after")
    def _check_ordering(self) -> "TemperatureRange":
        if not (self.min <= self.avg <= self.max):
            raise ValueError(
                f"temperature range must satisfy min <= avg <= max, got {self.min}/{self.avg}/{self.max}"
            )
        return self


class HourlyForecast(BaseModel):
    """Per-sample detail retained on a day summary."""

    time: str
    temperature: int
    condition: str
    description: str = ""
    icon: Optional[str] = None


class DaySummary(BaseModel):
    """Aggregated weather for one calendar day."""

    date: CalendarDate
    temperature: TemperatureRange
    condition: ConditionSnapshot
    humidity: int
    wind_speed: int
    precipitation: NonNegativeFloat = 0.0
    hourly: List[HourlyForecast] = Field(default_factory=list)
    units: UnitSystem = UnitSystem.METRIC
    estimated: bool = False
    note: Optional[str] = None

    model_config = ConfigDict(frozen=True)


class ExtendedDaySummary(DaySummary):
    """Synthesised day beyond the provider's observed window."""

    estimated: Literal[True] = True
    note: str = "Estimated based on current conditions"


class CurrentConditions(BaseModel):
    """Latest point observation returned by the provider."""

    temperature: float
    feels_like: Optional[float] = None
    humidity: float
    pressure: Optional[float] = None
    wind_speed: float
    wind_direction: Optional[float] = None
    condition: ConditionSnapshot
    observed_at: Optional[datetime] = None
    units: UnitSystem = UnitSystem.METRIC

    model_config = ConfigDict(allow_inf_nan=False)


class AdvisoryCategory(str, Enum):
    """Advisory grouping, in presentation order."""

    CLOTHING = "clothing"
    ACTIVITY = "activity"
    WEATHER = "weather"
    SAFETY = "safety"


class AdvisoryKind(str, Enum):
    """Identifier of each fixed advisory template."""

    HEAVY_WINTER_GEAR = "heavy-winter-gear"
    PREFER_INDOOR = "prefer-indoor"
    WARM_LAYERS = "warm-layers"
    LIGHT_LAYERS = "light-layers"
    COMFORTABLE_CLOTHING = "comfortable-clothing"
    LIGHT_BREATHABLE = "light-breathable"
    HYDRATION_AND_SHADE = "hydration-and-shade"
    HEAVY_RAIN = "heavy-rain"
    LIGHT_RAIN = "light-rain"
    WINTER_SPORTS_CAUTION = "winter-sports-caution"
    OUTDOOR_RECOMMENDED = "outdoor-recommended"
    WALKING_TOUR_OK = "walking-tour-ok"
    SEEK_SHELTER = "seek-shelter"


class AdvisoryMessage(BaseModel):
    """A categorised piece of advice for a day."""

    kind: AdvisoryKind
    category: AdvisoryCategory
    text: str

    model_config = ConfigDict(frozen=True)


class ForecastRequest(BaseModel):
    """Span of days a caller wants weather for."""

    days: PositiveInt
    units: UnitSystem = UnitSystem.METRIC
    start_date: Optional[CalendarDate] = None

    @classmethod
    def for_trip(
        cls,
        start_date: date,
        end_date: date,
        units: UnitSystem = UnitSystem.METRIC,
    ) -> "ForecastRequest":
        """Cover every day from ``start_date`` to ``end_date`` inclusive."""

        if end_date < start_date:
            raise ValueError("End date must not be before start date")
        return cls(days=(end_date - start_date).days + 1, units=units, start_date=start_date)


class TripWeatherReport(BaseModel):
    """Daily weather for a trip span with advisories keyed by date."""

    units: UnitSystem
    days: List[DaySummary] = Field(default_factory=list)
    advisories: Dict[CalendarDate, List[AdvisoryMessage]] = Field(default_factory=dict)
    note: Optional[str] = None

    @property
    def estimated_days(self) -> int:
        return sum(1 for day in self.days if day.estimated)


class TripStatus(str, Enum):
    PLANNING = "planning"
    CONFIRMED = "confirmed"
    ONGOING = "ongoing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Destination(BaseModel):
    city: str
    country: str


class TripBudget(BaseModel):
    total: float = 0.0
    currency: str = "USD"


class Activity(BaseModel):
    """A scheduled activity inside a day plan."""

    id: str = Field(validation_alias=AliasChoices("id", "_id", "activity_id"))
    name: str
    description: Optional[str] = None
    category: str = "other"
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    notes: Optional[str] = None
    completed: bool = False

    model_config = ConfigDict(populate_by_name=True)


class DayWeather(BaseModel):
    """Weather snapshot stored on a day plan."""

    temperature_min: int
    temperature_max: int
    unit: str = "celsius"
    condition: str
    precipitation: float = 0.0
    humidity: Optional[int] = None
    estimated: bool = False


class DayPlan(BaseModel):
    """Plan for a single day of travel."""

    day: PositiveInt
    date: Optional[CalendarDate] = None
    theme: Optional[str] = None
    activities: List[Activity] = Field(default_factory=list)
    weather: Optional[DayWeather] = None
    notes: Optional[str] = None

    @field_validator("date", mode="before")
    @classmethod
    def _coerce_date(cls, value: object) -> Optional[date]:
        """Normalise datetime and ISO timestamp values to plain dates."""

        if value is None:
            return None

        if isinstance(value, datetime):
            return value.date()

        if isinstance(value, date):
            return value

        if isinstance(value, str):
            candidate = value.strip()
            if not candidate:
                return None
            try:
                return date.fromisoformat(candidate)
            except ValueError:
                return candidate.split("T")[0]

        return value

    def activity_ids(self) -> List[str]:
        return [activity.id for activity in self.activities]


class Trip(BaseModel):
    """A user's trip as read from storage."""

    id: str = Field(validation_alias=AliasChoices("id", "_id"))
    user_id: str = Field(validation_alias=AliasChoices("user_id", "user"))
    title: str
    destination: Destination
    start_date: date
    end_date: date
    budget: Optional[TripBudget] = None
    status: TripStatus = TripStatus.PLANNING
    created_at: datetime
    itinerary: List[DayPlan] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)


class DestinationFacet(BaseModel):
    country: str
    count: int
    cities: List[str] = Field(default_factory=list)


class MonthlyFacet(BaseModel):
    year: int
    month: int
    trips: int
    total_budget: float


class BudgetFacet(BaseModel):
    total: float = 0.0
    average: float = 0.0
    min: float = 0.0
    max: float = 0.0


class TripFacetResult(BaseModel):
    """Grouped statistics over one user's trips."""

    status_breakdown: Dict[TripStatus, int] = Field(default_factory=dict)
    destination_breakdown: List[DestinationFacet] = Field(default_factory=list)
    monthly_breakdown: List[MonthlyFacet] = Field(default_factory=list)
    budget: BudgetFacet = Field(default_factory=BudgetFacet)


class ProfileTripStats(BaseModel):
    """Headline numbers shown on a traveller's profile."""

    total_trips: int = 0
    completed_trips: int = 0
    total_budget: float = 0.0
    average_budget: float = 0.0


__all__ = [
    "Activity",
    "AdvisoryCategory",
    "AdvisoryKind",
    "AdvisoryMessage",
    "BudgetFacet",
    "ConditionSnapshot",
    "CurrentConditions",
    "DayPlan",
    "DaySummary",
    "DayWeather",
    "Destination",
    "DestinationFacet",
    "ExtendedDaySummary",
    "ForecastRequest",
    "HourlyForecast",
    "MonthlyFacet",
    "ProfileTripStats",
    "TemperatureRange",
    "Trip",
    "TripBudget",
    "TripFacetResult",
    "TripStatus",
    "TripWeatherReport",
    "UnitSystem",
    "WeatherCondition",
    "WeatherSample",
]
