from __future__ import annotations

import logging
from datetime import date, datetime, time, timezone

import pytest

from tripwise.core.errors import InvalidDayNumberError, InvalidReorderError
from tripwise.core.sequencing import reorder_activities, reorder_trip_day
from tripwise.schemas import Activity, DayPlan, Destination, Trip


def _build_day_plan() -> DayPlan:
    return DayPlan(
        day=1,
        date=date(2024, 6, 1),
        theme="Temples and tea",
        activities=[
            Activity(id="A", name="Fushimi Inari", category="sightseeing", start_time=time(8, 0)),
            Activity(id="B", name="Nishiki Market lunch", category="food", notes="Try the tamagoyaki"),
            Activity(id="C", name="Tea ceremony", category="activity", completed=True),
        ],
    )


def test_reorder_applies_the_proposed_order() -> None:
    day_plan = _build_day_plan()
    before = {activity.id: activity.model_dump() for activity in day_plan.activities}

    result = reorder_activities(day_plan, ["C", "A", "B"])

    assert [activity.id for activity in result] == ["C", "A", "B"]
    assert day_plan.activity_ids() == ["C", "A", "B"]
    assert {activity.id: activity.model_dump() for activity in day_plan.activities} == before


def test_reorder_accepts_tuples() -> None:
    day_plan = _build_day_plan()

    reorder_activities(day_plan, ("B", "C", "A"))

    assert day_plan.activity_ids() == ["B", "C", "A"]


def test_wrong_length_is_rejected_without_changes() -> None:
    day_plan = _build_day_plan()

    with pytest.raises(InvalidReorderError) as excinfo:
        reorder_activities(day_plan, ["A", "B"])

    assert day_plan.activity_ids() == ["A", "B", "C"]
    assert excinfo.value.expected_length == 3
    assert excinfo.value.received_length == 2
    assert excinfo.value.missing == ["C"]


def test_foreign_identifier_is_rejected_without_changes() -> None:
    day_plan = _build_day_plan()

    with pytest.raises(InvalidReorderError) as excinfo:
        reorder_activities(day_plan, ["A", "B", "D"])

    assert day_plan.activity_ids() == ["A", "B", "C"]
    assert excinfo.value.missing == ["C"]
    assert excinfo.value.unexpected == ["D"]
    assert excinfo.value.duplicated == []


def test_duplicate_identifier_is_rejected() -> None:
    day_plan = _build_day_plan()

    with pytest.raises(InvalidReorderError) as excinfo:
        reorder_activities(day_plan, ["A", "A", "B"])

    assert day_plan.activity_ids() == ["A", "B", "C"]
    assert excinfo.value.duplicated == ["A"]
    assert excinfo.value.missing == ["C"]


def test_non_list_proposal_is_rejected() -> None:
    day_plan = _build_day_plan()

    with pytest.raises(InvalidReorderError):
        reorder_activities(day_plan, "CAB")  # type: ignore[arg-type]

    assert day_plan.activity_ids() == ["A", "B", "C"]


def test_rejection_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    day_plan = _build_day_plan()

    with caplog.at_level(logging.WARNING, logger="tripwise.core.sequencing"):
        with pytest.raises(InvalidReorderError):
            reorder_activities(day_plan, ["A", "B", "D"])

    assert "Rejected reorder for day 1" in caplog.text


def test_empty_day_accepts_empty_proposal() -> None:
    day_plan = DayPlan(day=2)

    assert reorder_activities(day_plan, []) == []


def _build_trip() -> Trip:
    second_day = DayPlan(
        day=2,
        activities=[Activity(id="x", name="Arashiyama"), Activity(id="y", name="Kinkaku-ji")],
    )
    return Trip(
        id="trip-1",
        user_id="user-1",
        title="Kyoto",
        destination=Destination(city="Kyoto", country="Japan"),
        start_date=date(2024, 6, 1),
        end_date=date(2024, 6, 2),
        created_at=datetime(2024, 5, 1, tzinfo=timezone.utc),
        itinerary=[_build_day_plan(), second_day],
    )


def test_reorder_trip_day_uses_one_based_day_numbers() -> None:
    trip = _build_trip()

    reorder_trip_day(trip, 2, ["y", "x"])

    assert trip.itinerary[1].activity_ids() == ["y", "x"]
    assert trip.itinerary[0].activity_ids() == ["A", "B", "C"]


@pytest.mark.parametrize("day_number", [0, 3, -1])
def test_reorder_trip_day_rejects_unknown_days(day_number: int) -> None:
    trip = _build_trip()

    with pytest.raises(InvalidDayNumberError) as excinfo:
        reorder_trip_day(trip, day_number, ["y", "x"])

    assert excinfo.value.total_days == 2
