"""Synthesise estimated days past the provider's forecast horizon."""

from __future__ import annotations

import logging
import random
from datetime import date, timedelta
from typing import List, Optional, Sequence

from tripwise.core.aggregation import round_half_up
from tripwise.core.config import ExtensionSettings
from tripwise.core.errors import ForecastSeedMissingError
from tripwise.schemas import (
    CurrentConditions,
    DaySummary,
    ExtendedDaySummary,
    TemperatureRange,
    UnitSystem,
)

_LOGGER = logging.getLogger(__name__)

ESTIMATED_NOTE = "Estimated based on current conditions"

_DEFAULT_SETTINGS = ExtensionSettings()


def seed_from_current(
    current: CurrentConditions,
    *,
    on: date,
    units: Optional[UnitSystem] = None,
) -> DaySummary:
    """Turn a point observation into a one-sample day usable as an extension seed."""

    temperature = round_half_up(current.temperature)
    return DaySummary(
        date=on,
        temperature=TemperatureRange(min=temperature, max=temperature, avg=temperature),
        condition=current.condition,
        humidity=round_half_up(current.humidity),
        wind_speed=round_half_up(current.wind_speed),
        units=units or current.units,
    )


def _estimate_day(
    seed: DaySummary,
    day: date,
    rng: random.Random,
    settings: ExtensionSettings,
) -> ExtendedDaySummary:
    spread = settings.temperature_jitter
    base = seed.temperature.avg
    offset = rng.uniform(-spread, spread)

    humidity = seed.humidity + rng.uniform(-settings.humidity_jitter, settings.humidity_jitter)
    wind_speed = seed.wind_speed + rng.uniform(-settings.wind_jitter, settings.wind_jitter)

    precipitation = 0.0
    if rng.random() < settings.precipitation_chance:
        precipitation = max(0.01, round(rng.uniform(0.0, settings.precipitation_max), 2))

    return ExtendedDaySummary(
        date=day,
        temperature=TemperatureRange(
            min=round_half_up(base - spread + offset),
            max=round_half_up(base + spread + offset),
            avg=round_half_up(base + offset),
        ),
        condition=seed.condition,
        humidity=min(100, max(0, round_half_up(humidity))),
        wind_speed=max(0, round_half_up(wind_speed)),
        precipitation=precipitation,
        units=seed.units,
        note=ESTIMATED_NOTE,
    )


def extend_forecast(
    observed: Sequence[DaySummary],
    requested_days: int,
    *,
    rng: random.Random,
    seed: Optional[DaySummary] = None,
    start_date: Optional[date] = None,
    settings: Optional[ExtensionSettings] = None,
) -> List[ExtendedDaySummary]:
    """Return an estimated day for every date of the span that ``observed`` misses.

    The span is ``requested_days`` consecutive dates starting at
    ``start_date``, else at the first observed day, else at the seed's date.
    Missing dates may lead, trail or sit between observed days. Each estimate
    is derived independently from the latest observed summary, or from
    ``seed`` when nothing was observed.
    """

    if requested_days <= 0:
        return []

    baseline = max(observed, key=lambda summary: summary.date) if observed else seed
    if baseline is None:
        raise ForecastSeedMissingError(
            f"Cannot estimate {requested_days} day(s): no observed days and no seed observation"
        )

    if start_date is not None:
        first_day = start_date
    elif observed:
        first_day = min(summary.date for summary in observed)
    else:
        first_day = baseline.date

    covered = {summary.date for summary in observed}
    missing = [
        day
        for day in (first_day + timedelta(days=offset) for offset in range(requested_days))
        if day not in covered
    ]
    if not missing:
        return []

    settings = settings or _DEFAULT_SETTINGS
    _LOGGER.debug(
        "Estimating %d day(s) between %s and %s seeded by %s",
        len(missing),
        missing[0].isoformat(),
        missing[-1].isoformat(),
        baseline.date.isoformat(),
    )
    return [_estimate_day(baseline, day, rng, settings) for day in missing]


__all__ = ["ESTIMATED_NOTE", "extend_forecast", "seed_from_current"]
