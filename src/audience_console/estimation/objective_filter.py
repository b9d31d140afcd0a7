# Author: Green Mountain Systems AI Inc.
# Donated to IAB Tech Lab

"""Narrow search results by campaign objective."""

from ..models.audience import Audience

AWARENESS_MIN_SIZE = 500000

# Behavior category keywords that signal a fit for each objective
OBJECTIVE_KEYWORDS: dict[str, tuple[str, ...]] = {
    "CONVERSIONS": ("purchase", "shopping"),
    "TRAFFIC": ("online", "mobile"),
    "ENGAGEMENT": ("social", "media"),
    "APP_PROMOTION": ("mobile", "app"),
    "LEAD_GENERATION": ("business", "professional"),
}


def matches_behavior_keywords(audience: Audience, keywords: tuple[str, ...]) -> bool:
    """Whether any behavior category contains one of the keywords."""
    return any(
        keyword in behavior.category.lower()
        for behavior in audience.behaviors
        for keyword in keywords
    )


def filter_by_objective(audiences: list[Audience], objective: str) -> list[Audience]:
    """Filter audiences for a campaign objective.

    AWARENESS keeps audiences above 500k. The keyword match for the other
    objectives is OR'd with True, so every audience passes for them.

    Args:
        audiences: Transformed audiences
        objective: Campaign objective (case-insensitive)

    Returns:
        Filtered list, or the input unchanged for unknown objectives
    """
    key = (objective or "").upper()

    if key == "AWARENESS":
        return [a for a in audiences if a.size > AWARENESS_MIN_SIZE]

    if key in OBJECTIVE_KEYWORDS:
        keywords = OBJECTIVE_KEYWORDS[key]
        # TODO: drop the "or True" once product decides whether keyword matching should narrow results
        return [a for a in audiences if matches_behavior_keywords(a, keywords) or True]

    return audiences
