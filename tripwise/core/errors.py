"""Exceptions raised by the tripwise core."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Sequence


@dataclass(slots=True)
class SampleIssue:
    """A single problem found while validating a raw weather sample."""

    index: int
    field: str
    message: str
    sample_date: Optional[date] = None

    def describe(self) -> str:
        where = f"sample {self.index}"
        if self.sample_date is not None:
            where += f" ({self.sample_date.isoformat()})"
        return f"{where}: {self.field}: {self.message}"


class MalformedSampleError(ValueError):
    """Raised when one or more weather samples cannot be bucketized."""

    def __init__(self, issues: Sequence[SampleIssue]) -> None:
        self.issues: List[SampleIssue] = list(issues)
        details = "; ".join(issue.describe() for issue in self.issues)
        super().__init__(f"{len(self.issues)} malformed weather sample(s): {details}")


class EmptyBucketError(RuntimeError):
    """Raised when aggregation receives a bucket without samples."""

    def __init__(self, bucket_date: Optional[date]) -> None:
        self.bucket_date = bucket_date
        label = bucket_date.isoformat() if bucket_date else "unknown date"
        super().__init__(f"Cannot aggregate empty weather bucket for {label}")


class ForecastSeedMissingError(ValueError):
    """Raised when a forecast extension has nothing to extend from."""


class InvalidReorderError(ValueError):
    """Raised when a proposed ordering is not a permutation of the current activities."""

    def __init__(
        self,
        message: str,
        *,
        expected_length: int,
        received_length: int,
        missing: Sequence[str] = (),
        unexpected: Sequence[str] = (),
        duplicated: Sequence[str] = (),
    ) -> None:
        self.expected_length = expected_length
        self.received_length = received_length
        self.missing = list(missing)
        self.unexpected = list(unexpected)
        self.duplicated = list(duplicated)
        super().__init__(message)


class InvalidDayNumberError(ValueError):
    """Raised when a day number does not exist in a trip's itinerary."""

    def __init__(self, day_number: int, total_days: int) -> None:
        self.day_number = day_number
        self.total_days = total_days
        super().__init__(f"Invalid day number {day_number}; itinerary has {total_days} day(s)")


__all__ = [
    "EmptyBucketError",
    "ForecastSeedMissingError",
    "InvalidDayNumberError",
    "InvalidReorderError",
    "MalformedSampleError",
    "SampleIssue",
]
