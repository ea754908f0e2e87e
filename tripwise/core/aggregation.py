"""Reduce day buckets into daily weather summaries."""

from __future__ import annotations

import math
from typing import Dict, Iterable, List, Mapping, Sequence

from tripwise.core.bucketing import DayBucket, local_datetime
from tripwise.core.errors import EmptyBucketError
from tripwise.schemas import (
    ConditionSnapshot,
    DaySummary,
    HourlyForecast,
    TemperatureRange,
    UnitSystem,
    WeatherSample,
)


def round_half_up(value: float) -> int:
    """Round to the nearest whole unit, halves going up."""

    return int(math.floor(value + 0.5))


def _mean(values: Sequence[float]) -> float:
    return math.fsum(values) / len(values)


def select_condition(samples: Sequence[WeatherSample]) -> ConditionSnapshot:
    """Return the most frequent condition among ``samples``.

    Ties go to the code that first reached the running maximum in a single
    left-to-right scan.
    """

    if not samples:
        raise EmptyBucketError(None)

    counts: Dict[str, int] = {}
    max_count = 0
    representative = samples[0]
    for sample in samples:
        counts[sample.condition] = counts.get(sample.condition, 0) + 1
        if counts[sample.condition] > max_count:
            max_count = counts[sample.condition]
            representative = sample

    return ConditionSnapshot(
        main=representative.condition,
        description=representative.description,
        icon=representative.icon,
    )


def total_precipitation(samples: Iterable[WeatherSample]) -> float:
    """Sum rain and snow volumes, ignoring negative readings."""

    total = math.fsum(max(sample.rain, 0.0) + max(sample.snow, 0.0) for sample in samples)
    return round(total, 2)


def _hourly(samples: Sequence[WeatherSample], utc_offset_seconds: int) -> List[HourlyForecast]:
    return [
        HourlyForecast(
            time=local_datetime(sample.timestamp, utc_offset_seconds).strftime("%H:%M"),
            temperature=round_half_up(sample.temperature),
            condition=sample.condition,
            description=sample.description,
            icon=sample.icon,
        )
        for sample in samples
    ]


def aggregate_bucket(
    bucket: DayBucket,
    *,
    units: UnitSystem = UnitSystem.METRIC,
    utc_offset_seconds: int = 0,
) -> DaySummary:
    """Summarise one bucket; values are rounded in the requested unit system."""

    samples = bucket.samples
    if not samples:
        raise EmptyBucketError(bucket.date)

    temperatures = [sample.temperature for sample in samples]
    lowest, highest = min(temperatures), max(temperatures)
    # mean must stay within [min, max] despite float error
    average = min(max(_mean(temperatures), lowest), highest)
    temperature = TemperatureRange(
        min=round_half_up(lowest),
        max=round_half_up(highest),
        avg=round_half_up(average),
    )

    return DaySummary(
        date=bucket.date,
        temperature=temperature,
        condition=select_condition(samples),
        humidity=round_half_up(_mean([sample.humidity for sample in samples])),
        wind_speed=round_half_up(_mean([sample.wind_speed for sample in samples])),
        precipitation=total_precipitation(samples),
        hourly=_hourly(samples, utc_offset_seconds),
        units=units,
    )


def summarize_buckets(
    buckets: Mapping[object, DayBucket],
    *,
    units: UnitSystem = UnitSystem.METRIC,
    utc_offset_seconds: int = 0,
) -> List[DaySummary]:
    """Aggregate every bucket, preserving the mapping's date order."""

    return [
        aggregate_bucket(bucket, units=units, utc_offset_seconds=utc_offset_seconds)
        for bucket in buckets.values()
    ]


__all__ = [
    "aggregate_bucket",
    "round_half_up",
    "select_condition",
    "summarize_buckets",
    "total_precipitation",
]
