"""Validate and apply caller supplied activity orderings."""

from __future__ import annotations

import logging
from collections import Counter
from typing import Dict, List, Sequence

from tripwise.core.errors import InvalidDayNumberError, InvalidReorderError
from tripwise.schemas import Activity, DayPlan, Trip

_LOGGER = logging.getLogger(__name__)


def _validate_permutation(current_ids: Sequence[str], proposed: object) -> List[str]:
    if isinstance(proposed, (str, bytes)) or not isinstance(proposed, (list, tuple)):
        raise InvalidReorderError(
            "activity_ids must be a list of activity identifiers",
            expected_length=len(current_ids),
            received_length=0,
        )

    proposed_ids = [str(item) for item in proposed]
    expected = Counter(current_ids)
    received = Counter(proposed_ids)
    if len(proposed_ids) == len(current_ids) and expected == received:
        return proposed_ids

    missing = sorted((expected - received).elements())
    surplus = received - expected
    unexpected = sorted(item for item in surplus if item not in expected)
    duplicated = sorted(item for item in surplus if item in expected)
    raise InvalidReorderError(
        "Invalid activity IDs or missing activities",
        expected_length=len(current_ids),
        received_length=len(proposed_ids),
        missing=missing,
        unexpected=unexpected,
        duplicated=duplicated,
    )


def reorder_activities(day_plan: DayPlan, activity_ids: Sequence[str]) -> List[Activity]:
    """Replace ``day_plan.activities`` with the same activities in the proposed order.

    The proposal must name every current activity exactly once. Validation
    happens before any change, so a rejected proposal leaves the day plan as
    it was. Callers are expected to serialise edits to the same day plan.
    """

    try:
        ordered_ids = _validate_permutation(day_plan.activity_ids(), activity_ids)
    except InvalidReorderError as exc:
        _LOGGER.warning(
            "Rejected reorder for day %s: missing=%s unexpected=%s duplicated=%s",
            day_plan.day,
            exc.missing,
            exc.unexpected,
            exc.duplicated,
        )
        raise

    by_id: Dict[str, List[Activity]] = {}
    for activity in day_plan.activities:
        by_id.setdefault(activity.id, []).append(activity)
    reordered = [by_id[activity_id].pop(0) for activity_id in ordered_ids]
    day_plan.activities = reordered
    return reordered


def reorder_trip_day(trip: Trip, day_number: int, activity_ids: Sequence[str]) -> List[Activity]:
    """Reorder the activities of a trip's 1-based ``day_number``."""

    index = day_number - 1
    if index < 0 or index >= len(trip.itinerary):
        raise InvalidDayNumberError(day_number, len(trip.itinerary))
    return reorder_activities(trip.itinerary[index], activity_ids)


__all__ = ["reorder_activities", "reorder_trip_day"]
