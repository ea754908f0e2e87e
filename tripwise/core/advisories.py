"""Fixed advisory templates derived from a day's aggregated weather."""

from __future__ import annotations

from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from tripwise.schemas import (
    AdvisoryCategory,
    AdvisoryKind,
    AdvisoryMessage,
    DaySummary,
    WeatherCondition,
)


def _message(kind: AdvisoryKind, category: AdvisoryCategory, text: str) -> AdvisoryMessage:
    return AdvisoryMessage(kind=kind, category=category, text=text)


_TEMPLATES: Mapping[AdvisoryKind, AdvisoryMessage] = {
    message.kind: message
    for message in (
        _message(
            AdvisoryKind.HEAVY_WINTER_GEAR,
            AdvisoryCategory.CLOTHING,
            "Very cold weather - wear heavy winter clothing, including warm layers, gloves, and waterproof boots.",
        ),
        _message(
            AdvisoryKind.PREFER_INDOOR,
            AdvisoryCategory.ACTIVITY,
            "Consider indoor activities like museums, shopping centers, or cozy cafes.",
        ),
        _message(
            AdvisoryKind.WARM_LAYERS,
            AdvisoryCategory.CLOTHING,
            "Cold weather - dress in warm layers, bring a jacket and comfortable walking shoes.",
        ),
        _message(
            AdvisoryKind.LIGHT_LAYERS,
            AdvisoryCategory.CLOTHING,
            "Cool weather - light layers recommended, bring a light jacket for evening.",
        ),
        _message(
            AdvisoryKind.COMFORTABLE_CLOTHING,
            AdvisoryCategory.CLOTHING,
            "Pleasant weather - comfortable clothing, light layers for temperature changes.",
        ),
        _message(
            AdvisoryKind.LIGHT_BREATHABLE,
            AdvisoryCategory.CLOTHING,
            "Hot weather - wear light, breathable clothing, hat, and sunscreen.",
        ),
        _message(
            AdvisoryKind.HYDRATION_AND_SHADE,
            AdvisoryCategory.ACTIVITY,
            "Stay hydrated and consider indoor activities during peak heat hours (12-4 PM).",
        ),
        _message(
            AdvisoryKind.HEAVY_RAIN,
            AdvisoryCategory.WEATHER,
            "Heavy rain expected - bring umbrella, waterproof clothing, and plan indoor activities.",
        ),
        _message(
            AdvisoryKind.LIGHT_RAIN,
            AdvisoryCategory.WEATHER,
            "Light rain possible - bring umbrella or light rain jacket.",
        ),
        _message(
            AdvisoryKind.WINTER_SPORTS_CAUTION,
            AdvisoryCategory.ACTIVITY,
            "Snowy conditions - great for winter sports but be cautious of slippery surfaces.",
        ),
        _message(
            AdvisoryKind.OUTDOOR_RECOMMENDED,
            AdvisoryCategory.ACTIVITY,
            "Perfect weather for outdoor activities, sightseeing, and photography.",
        ),
        _message(
            AdvisoryKind.WALKING_TOUR_OK,
            AdvisoryCategory.ACTIVITY,
            "Overcast but good for walking tours and outdoor activities.",
        ),
        _message(
            AdvisoryKind.SEEK_SHELTER,
            AdvisoryCategory.SAFETY,
            "Thunderstorm conditions - avoid outdoor activities and seek shelter.",
        ),
    )
}

# Upper bounds are exclusive; the last band has no upper bound.
_TEMPERATURE_BANDS: Sequence[Tuple[Optional[float], Tuple[AdvisoryKind, ...]]] = (
    (0, (AdvisoryKind.HEAVY_WINTER_GEAR, AdvisoryKind.PREFER_INDOOR)),
    (10, (AdvisoryKind.WARM_LAYERS,)),
    (20, (AdvisoryKind.LIGHT_LAYERS,)),
    (30, (AdvisoryKind.COMFORTABLE_CLOTHING,)),
    (None, (AdvisoryKind.LIGHT_BREATHABLE, AdvisoryKind.HYDRATION_AND_SHADE)),
)

HEAVY_RAIN_THRESHOLD = 5.0

_CONDITION_ADVICE: Mapping[WeatherCondition, AdvisoryKind] = {
    WeatherCondition.SNOW: AdvisoryKind.WINTER_SPORTS_CAUTION,
    WeatherCondition.CLEAR: AdvisoryKind.OUTDOOR_RECOMMENDED,
    WeatherCondition.CLOUDS: AdvisoryKind.WALKING_TOUR_OK,
    WeatherCondition.THUNDERSTORM: AdvisoryKind.SEEK_SHELTER,
}

_CATEGORY_ORDER: Mapping[AdvisoryCategory, int] = {
    category: position for position, category in enumerate(AdvisoryCategory)
}


def _temperature_kinds(temperature: Optional[float]) -> Tuple[AdvisoryKind, ...]:
    if temperature is None:
        return ()
    for upper, kinds in _TEMPERATURE_BANDS:
        if upper is None or temperature < upper:
            return kinds
    return ()


def _precipitation_kinds(precipitation: Optional[float]) -> Tuple[AdvisoryKind, ...]:
    if precipitation is None:
        return ()
    if precipitation > HEAVY_RAIN_THRESHOLD:
        return (AdvisoryKind.HEAVY_RAIN,)
    if precipitation > 0:
        return (AdvisoryKind.LIGHT_RAIN,)
    return ()


def _condition_kinds(condition: Optional[str]) -> Tuple[AdvisoryKind, ...]:
    known = WeatherCondition.lookup(condition)
    if known is None or known not in _CONDITION_ADVICE:
        return ()
    return (_CONDITION_ADVICE[known],)


def advise(
    temperature: Optional[float],
    precipitation: Optional[float] = 0.0,
    condition: Optional[str] = None,
) -> List[AdvisoryMessage]:
    """Return every advisory that applies, grouped by category.

    Each rule family is evaluated independently. Missing values and unknown
    condition codes simply contribute nothing.
    """

    kinds = (
        _temperature_kinds(temperature)
        + _precipitation_kinds(precipitation)
        + _condition_kinds(condition)
    )
    messages = [_TEMPLATES[kind] for kind in kinds]
    return sorted(messages, key=lambda message: _CATEGORY_ORDER[message.category])


def advise_day(summary: DaySummary) -> List[AdvisoryMessage]:
    """Advisories for a daily summary, keyed on its average temperature."""

    return advise(
        summary.temperature.avg,
        summary.precipitation,
        summary.condition.main,
    )


def group_by_category(
    messages: Sequence[AdvisoryMessage],
) -> Dict[AdvisoryCategory, List[AdvisoryMessage]]:
    """Group messages by category, in category presentation order."""

    grouped: Dict[AdvisoryCategory, List[AdvisoryMessage]] = {}
    for message in sorted(messages, key=lambda item: _CATEGORY_ORDER[item.category]):
        grouped.setdefault(message.category, []).append(message)
    return grouped


__all__ = ["HEAVY_RAIN_THRESHOLD", "advise", "advise_day", "group_by_category"]
