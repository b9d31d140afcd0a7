# Author: Green Mountain Systems AI Inc.
# Donated to IAB Tech Lab

"""Turn raw Meta Graph API records into normalized models.

Raw payloads are loosely shaped dicts; every field is type-checked and
defaulted, so a malformed record still yields a complete model.
"""

import logging
import math
from typing import Any, Optional

from pydantic import ValidationError as PydanticValidationError

from ..models.analysis import (
    BehaviorStatGroup,
    DemographicStat,
    InterestDetails,
    RelatedInterest,
)
from ..models.audience import (
    Audience,
    AudienceTargeting,
    BehaviorData,
    DemographicData,
    parse_budget,
)
from .modifiers import FilterInput, compute_modifiers, filter_value
from .reach import estimate_reach

logger = logging.getLogger(__name__)

FALLBACK_AUDIENCE_SIZE = 10000
DEFAULT_COUNTRY = "ID"
NO_DESCRIPTION = "No description available"
DEMOGRAPHIC_STAT_CATEGORIES = ["age", "gender", "education", "relationship", "income"]


def _as_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if not isinstance(value, (int, float, str)):
        return None
    try:
        number = float(value)
    except (ValueError, OverflowError):
        return None
    # NaN and Infinity decode from JSON but cannot become counts.
    return number if math.isfinite(number) else None


def _as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_text(value: Any, default: str) -> str:
    if value is None or value == "":
        return default
    return str(value)


def midpoint_size(raw: dict[str, Any]) -> int:
    """Midpoint of the platform's audience bounds, or the fallback size."""
    lower = _as_number(raw.get("audience_size_lower_bound"))
    upper = _as_number(raw.get("audience_size_upper_bound"))
    if lower and upper:
        midpoint = (lower + upper) / 2
        if math.isfinite(midpoint):
            return math.floor(midpoint)
    return FALLBACK_AUDIENCE_SIZE


def format_path(path: Any) -> str:
    """Flatten a path segment list into a ``" > "`` label."""
    if isinstance(path, list):
        return " > ".join(str(segment) for segment in path)
    return _as_text(path, "General")


def transform_demographics(distribution: Any) -> list[DemographicData]:
    """Map a raw demographic distribution, defaulting missing fields."""
    if not isinstance(distribution, list):
        return []
    return [
        DemographicData(
            type=_as_text(d.get("type"), "Unknown"),
            percentage=_as_number(d.get("percentage")) or 0,
            value=_as_text(d.get("value"), "Unknown"),
        )
        for d in distribution
        if isinstance(d, dict)
    ]


def transform_behaviors(distribution: Any) -> list[BehaviorData]:
    """Map a raw behavior distribution, defaulting missing fields."""
    if not isinstance(distribution, list):
        return []
    return [
        BehaviorData(
            name=_as_text(b.get("name"), "Unknown"),
            percentage=_as_number(b.get("percentage")) or 0,
            category=_as_text(b.get("category"), "General"),
        )
        for b in distribution
        if isinstance(b, dict)
    ]


def _build_targeting(raw: dict[str, Any], name: str, country: str) -> AudienceTargeting:
    merged = {"interests": [name], "locations": [country], **_as_dict(raw.get("targeting"))}
    try:
        return AudienceTargeting.model_validate(merged)
    except PydanticValidationError as e:
        logger.warning(f"Ignoring malformed targeting for interest {raw.get('id')}: {e}")
        return AudienceTargeting(interests=[name], locations=[country])


def transform_audience(
    raw: Any,
    filters: FilterInput = None,
    country: str = DEFAULT_COUNTRY,
) -> Audience:
    """Normalize one interest record from the search API.

    Args:
        raw: Raw interest record
        filters: Active campaign filters
        country: Country code attached to the targeting

    Returns:
        Audience with adjusted size and estimated reach
    """
    item = _as_dict(raw)
    modifiers = compute_modifiers(filters)

    size = math.floor(midpoint_size(item) * modifiers.size_modifier)
    budget = parse_budget(filter_value(filters, "budget"))
    estimated_reach = estimate_reach(size, budget, modifiers.cpm_modifier)

    name = _as_text(item.get("name"), "Unknown")
    description = item.get("description") or item.get("topic")

    return Audience(
        id=_as_text(item.get("id"), ""),
        name=name,
        description=_as_text(description, NO_DESCRIPTION),
        size=max(size, 0),
        estimated_reach=estimated_reach,
        path=format_path(item.get("path")),
        targeting=_build_targeting(item, name, country),
        demographics=transform_demographics(item.get("demographic_distribution")),
        behaviors=transform_behaviors(item.get("behavior_distribution")),
    )


def format_demographic_label(category: str, value: str) -> str:
    """Display label for a demographic stat value."""
    if category == "age":
        return value if "-" in value else f"{value}+"
    if category == "gender":
        return value[:1].upper() + value[1:]
    if category == "education":
        return " ".join(word[:1].upper() + word[1:] for word in value.split("_"))
    return value


def transform_demographic_stats(stats: Any) -> dict[str, list[DemographicStat]]:
    """Map ``{category: {value: pct}}`` stats for the known categories."""
    stats = _as_dict(stats)
    result: dict[str, list[DemographicStat]] = {}
    for category in DEMOGRAPHIC_STAT_CATEGORIES:
        values = stats.get(category)
        if not isinstance(values, dict) or not values:
            continue
        result[category] = [
            DemographicStat(
                value=str(key),
                percentage=pct,
                label=format_demographic_label(category, str(key)),
            )
            for key, pct in values.items()
        ]
    return result


def transform_behavior_stats(stats: Any) -> list[BehaviorStatGroup]:
    """Map ``{category: {name: pct}}`` behavior stats into groups."""
    return [
        BehaviorStatGroup(
            category=str(category),
            behaviors=[
                {"name": name, "percentage": pct, "category": str(category)}
                for name, pct in _as_dict(data).items()
            ],
        )
        for category, data in _as_dict(stats).items()
    ]


def _optional_int(value: Any) -> Optional[int]:
    number = _as_number(value)
    return None if number is None else int(number)


def transform_interest_details(raw: Any) -> InterestDetails:
    """Normalize an interest detail record.

    Args:
        raw: Raw detail record from the Graph API

    Returns:
        InterestDetails with related interests and stats
    """
    data = _as_dict(raw)
    related = _as_dict(data.get("related_interests")).get("data") or []

    return InterestDetails(
        id=_as_text(data.get("id"), "") or None,
        name=data.get("name") if isinstance(data.get("name"), str) else None,
        size=_optional_int(data.get("audience_size")),
        path=data.get("path"),
        description=_as_text(data.get("description") or data.get("topic"), NO_DESCRIPTION),
        related_interests=[
            RelatedInterest(
                id=_as_text(interest.get("id"), "") or None,
                name=interest.get("name") if isinstance(interest.get("name"), str) else None,
                size=_optional_int(interest.get("audience_size")),
                path=interest.get("path"),
            )
            for interest in related
            if isinstance(interest, dict)
        ],
        demographics=transform_demographic_stats(data.get("demographic_stats")),
        behaviors=transform_behavior_stats(data.get("behavior_stats")),
        distribution=_as_dict(data.get("audience_distribution")),
    )
