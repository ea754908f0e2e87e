"""Group sub-daily weather samples into calendar-day buckets."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Dict, Iterable, List, Mapping, Optional, Tuple, Union

from pydantic import ValidationError

from tripwise.core.errors import MalformedSampleError, SampleIssue
from tripwise.schemas import WeatherSample

_LOGGER = logging.getLogger(__name__)

RawSample = Union[WeatherSample, Mapping[str, object]]


@dataclass(frozen=True, slots=True)
class DayBucket:
    """Samples observed on a single provider-local calendar date."""

    date: date
    samples: Tuple[WeatherSample, ...]

    def __len__(self) -> int:
        return len(self.samples)


def local_datetime(timestamp: datetime, utc_offset_seconds: int = 0) -> datetime:
    """Return the provider-local wall time for ``timestamp``.

    Aware timestamps are shifted by the provider's UTC offset; naive ones are
    taken to be provider-local already.
    """

    if timestamp.tzinfo is None:
        return timestamp
    provider_tz = timezone(timedelta(seconds=utc_offset_seconds))
    return timestamp.astimezone(provider_tz).replace(tzinfo=None)


def _guess_date(raw: object, utc_offset_seconds: int) -> Optional[date]:
    if not isinstance(raw, Mapping):
        return None
    value = raw.get("timestamp", raw.get("dt"))
    if isinstance(value, datetime):
        return local_datetime(value, utc_offset_seconds).date()
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            moment = datetime.fromtimestamp(value, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
        return local_datetime(moment, utc_offset_seconds).date()
    return None


def _validate_samples(
    samples: Iterable[RawSample], utc_offset_seconds: int
) -> List[WeatherSample]:
    validated: List[WeatherSample] = []
    issues: List[SampleIssue] = []

    for index, raw in enumerate(samples):
        if isinstance(raw, WeatherSample):
            validated.append(raw)
            continue
        try:
            validated.append(WeatherSample.model_validate(raw))
        except ValidationError as exc:
            sample_date = _guess_date(raw, utc_offset_seconds)
            for error in exc.errors():
                location = ".".join(str(part) for part in error.get("loc", ())) or "sample"
                issues.append(
                    SampleIssue(
                        index=index,
                        field=location,
                        message=error.get("msg", "invalid value"),
                        sample_date=sample_date,
                    )
                )

    if issues:
        raise MalformedSampleError(issues)
    return validated


def bucketize_samples(
    samples: Iterable[RawSample],
    *,
    utc_offset_seconds: int = 0,
) -> Dict[date, DayBucket]:
    """Partition samples into per-date buckets, ordered by date.

    Samples inside a bucket are ordered by local time of day; samples sharing
    a timestamp keep their input order. Any malformed sample fails the whole
    call with a single :class:`MalformedSampleError`.
    """

    validated = _validate_samples(samples, utc_offset_seconds)

    grouped: Dict[date, List[Tuple[datetime, WeatherSample]]] = {}
    for sample in validated:
        local = local_datetime(sample.timestamp, utc_offset_seconds)
        grouped.setdefault(local.date(), []).append((local, sample))

    buckets: Dict[date, DayBucket] = {}
    for day in sorted(grouped):
        entries = sorted(grouped[day], key=lambda entry: entry[0])
        buckets[day] = DayBucket(date=day, samples=tuple(sample for _, sample in entries))

    _LOGGER.debug("Bucketized %d samples into %d day(s)", len(validated), len(buckets))
    return buckets


__all__ = ["DayBucket", "RawSample", "bucketize_samples", "local_datetime"]
