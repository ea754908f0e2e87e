"""Grouped statistics over a single user's trip collection."""

from __future__ import annotations

import math
from typing import Dict, List, Sequence, Tuple

from tripwise.schemas import (
    BudgetFacet,
    DestinationFacet,
    MonthlyFacet,
    ProfileTripStats,
    Trip,
    TripFacetResult,
    TripStatus,
)

DEFAULT_TOP_DESTINATIONS = 10
DEFAULT_RECENT_MONTHS = 12


def status_breakdown(trips: Sequence[Trip]) -> Dict[TripStatus, int]:
    """Count trips per status, in order of first appearance."""

    counts: Dict[TripStatus, int] = {}
    for trip in trips:
        counts[trip.status] = counts.get(trip.status, 0) + 1
    return counts


def destination_breakdown(
    trips: Sequence[Trip], *, limit: int = DEFAULT_TOP_DESTINATIONS
) -> List[DestinationFacet]:
    """Trips and distinct cities per country, busiest countries first."""

    counts: Dict[str, int] = {}
    cities: Dict[str, List[str]] = {}
    for trip in trips:
        country = trip.destination.country
        counts[country] = counts.get(country, 0) + 1
        seen = cities.setdefault(country, [])
        if trip.destination.city not in seen:
            seen.append(trip.destination.city)

    ranked = sorted(counts, key=lambda country: (-counts[country], country))
    return [
        DestinationFacet(country=country, count=counts[country], cities=cities[country])
        for country in ranked[:limit]
    ]


def monthly_breakdown(
    trips: Sequence[Trip], *, limit: int = DEFAULT_RECENT_MONTHS
) -> List[MonthlyFacet]:
    """Trip count and budget per creation month, newest month first."""

    counts: Dict[Tuple[int, int], int] = {}
    budgets: Dict[Tuple[int, int], List[float]] = {}
    for trip in trips:
        key = (trip.created_at.year, trip.created_at.month)
        counts[key] = counts.get(key, 0) + 1
        month_budgets = budgets.setdefault(key, [])
        if trip.budget is not None:
            month_budgets.append(trip.budget.total)

    newest_first = sorted(counts, reverse=True)
    return [
        MonthlyFacet(
            year=year,
            month=month,
            trips=counts[(year, month)],
            total_budget=math.fsum(budgets[(year, month)]),
        )
        for year, month in newest_first[:limit]
    ]


def budget_extremes(trips: Sequence[Trip]) -> BudgetFacet:
    """Sum, mean, min and max over trips that carry a budget.

    Trips without a budget are skipped rather than counted as zero; all
    values are zero when no trip has a budget.
    """

    totals = [trip.budget.total for trip in trips if trip.budget is not None]
    if not totals:
        return BudgetFacet()
    total = math.fsum(totals)
    return BudgetFacet(
        total=total,
        average=total / len(totals),
        min=min(totals),
        max=max(totals),
    )


def compute_trip_facets(
    trips: Sequence[Trip],
    *,
    top_destinations: int = DEFAULT_TOP_DESTINATIONS,
    recent_months: int = DEFAULT_RECENT_MONTHS,
) -> TripFacetResult:
    """Compute every facet over ``trips`` without modifying them."""

    return TripFacetResult(
        status_breakdown=status_breakdown(trips),
        destination_breakdown=destination_breakdown(trips, limit=top_destinations),
        monthly_breakdown=monthly_breakdown(trips, limit=recent_months),
        budget=budget_extremes(trips),
    )


def profile_trip_stats(trips: Sequence[Trip]) -> ProfileTripStats:
    """Headline trip numbers for a traveller profile."""

    if not trips:
        return ProfileTripStats()
    budget = budget_extremes(trips)
    return ProfileTripStats(
        total_trips=len(trips),
        completed_trips=sum(1 for trip in trips if trip.status is TripStatus.COMPLETED),
        total_budget=budget.total,
        average_budget=budget.average,
    )


__all__ = [
    "DEFAULT_RECENT_MONTHS",
    "DEFAULT_TOP_DESTINATIONS",
    "budget_extremes",
    "compute_trip_facets",
    "destination_breakdown",
    "monthly_breakdown",
    "profile_trip_stats",
    "status_breakdown",
]
