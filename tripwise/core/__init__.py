"""Core utilities for tripwise."""

from .advisories import advise, advise_day, group_by_category
from .aggregation import aggregate_bucket, select_condition, summarize_buckets
from .bucketing import DayBucket, bucketize_samples
from .errors import (
    EmptyBucketError,
    ForecastSeedMissingError,
    InvalidDayNumberError,
    InvalidReorderError,
    MalformedSampleError,
)
from .extension import extend_forecast
from .facets import compute_trip_facets, profile_trip_stats
from .sequencing import reorder_activities, reorder_trip_day

__all__ = [
    "DayBucket",
    "EmptyBucketError",
    "ForecastSeedMissingError",
    "InvalidDayNumberError",
    "InvalidReorderError",
    "MalformedSampleError",
    "advise",
    "advise_day",
    "aggregate_bucket",
    "bucketize_samples",
    "compute_trip_facets",
    "extend_forecast",
    "group_by_category",
    "profile_trip_stats",
    "reorder_activities",
    "reorder_trip_day",
    "select_condition",
    "summarize_buckets",
]
