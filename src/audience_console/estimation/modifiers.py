# Author: Green Mountain Systems AI Inc.
# Donated to IAB Tech Lab

"""Targeting modifiers - how filters shrink an audience and move its CPM."""

from collections.abc import Mapping
from typing import Any, Optional, Union

from ..models.analysis import TargetingModifiers
from ..models.audience import FilterSet

FilterInput = Union[FilterSet, Mapping[str, Any], None]

# (size_modifier, cpm_modifier) per placement
PLACEMENT_MODIFIERS: dict[str, tuple[float, float]] = {
    "facebook": (0.7, 1.2),
    "instagram": (0.5, 1.4),
    "messenger": (0.3, 0.9),
    "whatsapp": (0.4, 1.1),
}

# (size_modifier, cpm_modifier) per objective; 1.0 leaves size untouched
OBJECTIVE_MODIFIERS: dict[str, tuple[float, float]] = {
    "AWARENESS": (1.0, 0.8),
    "CONVERSIONS": (0.8, 1.4),
    "TRAFFIC": (1.0, 1.1),
    "ENGAGEMENT": (1.0, 1.2),
    "APP_PROMOTION": (0.7, 1.3),
    "LEAD_GENERATION": (0.6, 1.5),
}

MIN_SIZE_MODIFIER = 0.1
MIN_CPM_MODIFIER = 0.5
TYPICAL_AGE_SPAN = 50
OPEN_ENDED_AGE_MIN = 65
OPEN_ENDED_AGE_MAX = 99


def filter_value(filters: FilterInput, name: str) -> Optional[str]:
    """Read a filter from a FilterSet or a loose mapping."""
    if filters is None:
        return None
    if isinstance(filters, FilterSet):
        value = getattr(filters, name, None)
    else:
        value = filters.get(name)
    if value is None or value == "":
        return None
    return str(value)


def parse_age_range(age: Optional[str]) -> Optional[tuple[int, int]]:
    """Parse an ``"min-max"`` age filter.

    A missing max defaults to min, except 65 which is open-ended up to 99.

    Returns:
        (min, max) or None if the value cannot be parsed
    """
    if not age:
        return None
    parts = [p.strip().rstrip("+") for p in str(age).split("-")]
    try:
        age_min = int(parts[0])
    except ValueError:
        return None

    age_max: Optional[int] = None
    if len(parts) > 1 and parts[1]:
        try:
            age_max = int(parts[1])
        except ValueError:
            age_max = None

    if not age_max:
        age_max = OPEN_ENDED_AGE_MAX if age_min == OPEN_ENDED_AGE_MIN else age_min
    return age_min, age_max


def compute_modifiers(filters: FilterInput) -> TargetingModifiers:
    """Compute size and CPM modifiers for a filter set.

    Missing or unknown filter values skip their adjustment, so this never
    raises.

    Args:
        filters: FilterSet or mapping of filter name to value

    Returns:
        TargetingModifiers clamped to their minimums
    """
    size_modifier = 1.0
    cpm_modifier = 1.0

    gender = filter_value(filters, "gender")
    if gender and gender != "all":
        size_modifier *= 0.5

    age_range = parse_age_range(filter_value(filters, "age"))
    if age_range:
        age_min, age_max = age_range
        size_modifier *= min(1, (age_max - age_min) / TYPICAL_AGE_SPAN)

    placement = filter_value(filters, "placement")
    if placement and placement != "automatic" and placement in PLACEMENT_MODIFIERS:
        size_factor, cpm_factor = PLACEMENT_MODIFIERS[placement]
        size_modifier *= size_factor
        cpm_modifier *= cpm_factor

    objective = filter_value(filters, "objective")
    if objective and objective.upper() in OBJECTIVE_MODIFIERS:
        size_factor, cpm_factor = OBJECTIVE_MODIFIERS[objective.upper()]
        if size_factor != 1.0:
            size_modifier *= size_factor
        cpm_modifier *= cpm_factor

    return TargetingModifiers(
        size_modifier=max(MIN_SIZE_MODIFIER, size_modifier),
        cpm_modifier=max(MIN_CPM_MODIFIER, cpm_modifier),
    )
