"""Orchestrates bucketing, aggregation, extension and advisories for a trip span."""

from __future__ import annotations

import logging
import random
import time
from datetime import date, timedelta
from typing import Iterable, List, Optional, Sequence

from tripwise.core.advisories import advise_day
from tripwise.core.aggregation import summarize_buckets
from tripwise.core.bucketing import RawSample, bucketize_samples
from tripwise.core.config import ExtensionSettings
from tripwise.core.extension import extend_forecast, seed_from_current
from tripwise.core.openweather import OpenWeatherClient
from tripwise.schemas import (
    CurrentConditions,
    DayPlan,
    DaySummary,
    DayWeather,
    ForecastRequest,
    TripWeatherReport,
)

_LOGGER = logging.getLogger(__name__)

EXTENDED_FORECAST_NOTE = (
    "Extended forecast is estimated based on historical data and current conditions"
)


def _log_stage(stage: str, duration: float, detail: str) -> None:
    _LOGGER.info("%s stage completed in %.3fs [%s]", stage.capitalize(), duration, detail)


def _provider_window_days(request: ForecastRequest, today: date) -> int:
    """Days of provider data needed to reach the end of the requested span."""

    if request.start_date is None:
        return request.days
    return (request.start_date - today).days + request.days


def _observed_summaries(
    request: ForecastRequest,
    samples: Iterable[RawSample],
    utc_offset_seconds: int,
) -> List[DaySummary]:
    start = time.perf_counter()
    buckets = bucketize_samples(samples, utc_offset_seconds=utc_offset_seconds)
    summaries = summarize_buckets(
        buckets, units=request.units, utc_offset_seconds=utc_offset_seconds
    )
    first_day = request.start_date or (summaries[0].date if summaries else None)
    if first_day is not None:
        end_day = first_day + timedelta(days=request.days)
        summaries = [summary for summary in summaries if first_day <= summary.date < end_day]
    _log_stage("aggregation", time.perf_counter() - start, f"observed_days={len(summaries)}")
    return summaries


def _build_report(
    request: ForecastRequest,
    observed: Sequence[DaySummary],
    *,
    current: Optional[CurrentConditions],
    rng: Optional[random.Random],
    extension: Optional[ExtensionSettings],
) -> TripWeatherReport:
    start = time.perf_counter()
    seed: Optional[DaySummary] = None
    if not observed and current is not None:
        seed_day = request.start_date
        if seed_day is None:
            seed_day = current.observed_at.date() if current.observed_at else date.today()
        seed = seed_from_current(current, on=seed_day, units=request.units)

    estimated = extend_forecast(
        observed,
        request.days,
        rng=rng if rng is not None else random.Random(),
        seed=seed,
        start_date=request.start_date,
        settings=extension,
    )
    if estimated:
        _log_stage("extension", time.perf_counter() - start, f"estimated_days={len(estimated)}")

    days: List[DaySummary] = sorted([*observed, *estimated], key=lambda day: day.date)
    advisories = {day.date: advise_day(day) for day in days}
    return TripWeatherReport(
        units=request.units,
        days=days,
        advisories=advisories,
        note=EXTENDED_FORECAST_NOTE if estimated else None,
    )


def summarize_forecast(
    request: ForecastRequest,
    samples: Iterable[RawSample],
    *,
    utc_offset_seconds: int = 0,
    current: Optional[CurrentConditions] = None,
    rng: Optional[random.Random] = None,
    extension: Optional[ExtensionSettings] = None,
) -> TripWeatherReport:
    """Turn already-fetched samples into a report covering ``request.days`` days.

    The span starts at ``request.start_date``, or at the first observed day.
    Observed days outside the span are dropped. Span dates without observed
    data are estimated from the latest observed day, or from ``current`` when
    nothing was observed.
    """

    observed = _observed_summaries(request, samples, utc_offset_seconds)
    return _build_report(request, observed, current=current, rng=rng, extension=extension)


def fetch_trip_weather(
    client: OpenWeatherClient,
    city: str,
    country: str,
    request: ForecastRequest,
    *,
    rng: Optional[random.Random] = None,
    extension: Optional[ExtensionSettings] = None,
) -> TripWeatherReport:
    """Fetch the provider's window for a destination and build the full report."""

    pipeline_start = time.perf_counter()
    _LOGGER.info("Building weather for %s, %s over %d day(s)", city, country, request.days)

    window_days = _provider_window_days(request, date.today())
    forecast = client.forecast(city, country, days=window_days, units=request.units)
    observed = _observed_summaries(request, forecast.entries, forecast.utc_offset_seconds)

    current: Optional[CurrentConditions] = None
    if not observed:
        current = client.current(city, country, units=request.units)

    report = _build_report(request, observed, current=current, rng=rng, extension=extension)
    _LOGGER.info(
        "Trip weather completed in %.2fs (%d observed, %d estimated)",
        time.perf_counter() - pipeline_start,
        len(observed),
        report.estimated_days,
    )
    return report


def attach_weather_to_itinerary(itinerary: Sequence[DayPlan], report: TripWeatherReport) -> int:
    """Copy daily weather onto the leading day plans; returns how many were updated."""

    attached = 0
    for day_plan, summary in zip(itinerary, report.days):
        day_plan.weather = DayWeather(
            temperature_min=summary.temperature.min,
            temperature_max=summary.temperature.max,
            unit=summary.units.temperature_label,
            condition=summary.condition.main,
            precipitation=summary.precipitation,
            humidity=summary.humidity,
            estimated=summary.estimated,
        )
        attached += 1
    return attached


__all__ = [
    "EXTENDED_FORECAST_NOTE",
    "attach_weather_to_itinerary",
    "fetch_trip_weather",
    "summarize_forecast",
]
