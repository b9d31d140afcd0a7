# Author: Green Mountain Systems AI Inc.
# Donated to IAB Tech Lab

"""Aggregate demographics, behaviors and reach across audiences."""

import math
from collections.abc import Sequence

from ..models.analysis import (
    AggregatedDemographics,
    AggregationResult,
    BehaviorGroup,
    SelectionSummary,
)
from ..models.audience import Audience

# Minimum share for a demographic value to count as significant
DEMOGRAPHIC_THRESHOLDS: dict[str, float] = {
    "age": 0.15,
    "gender": 0.3,
    "education": 0.2,
    "income": 0.15,
}
BEHAVIOR_THRESHOLD = 0.1

OVERLAP_RATE_PER_INTEREST = 0.3
MAX_OVERLAP_RATE = 0.7


def market_size(audiences: Sequence[Audience]) -> int:
    """Sum of audience sizes."""
    return sum(a.size for a in audiences)


def aggregate_demographics(audiences: Sequence[Audience]) -> AggregatedDemographics:
    """Collect significant demographic values, first-seen order, no duplicates."""
    aggregated = AggregatedDemographics()

    for audience in audiences:
        for demo in audience.demographics:
            bucket_name = demo.type.lower()
            threshold = DEMOGRAPHIC_THRESHOLDS.get(bucket_name)
            if threshold is None:
                continue
            bucket = getattr(aggregated, bucket_name)
            if demo.percentage > threshold and demo.value not in bucket:
                bucket.append(demo.value)

    return aggregated


def analyze_behaviors(audiences: Sequence[Audience]) -> list[BehaviorGroup]:
    """Group significant behaviors by category.

    Item order within a category is not guaranteed.
    """
    behavior_map: dict[str, set[str]] = {}

    for audience in audiences:
        for behavior in audience.behaviors:
            if behavior.percentage > BEHAVIOR_THRESHOLD:
                behavior_map.setdefault(behavior.category, set()).add(behavior.name)

    return [
        BehaviorGroup(category=category, items=list(items))
        for category, items in behavior_map.items()
    ]


def total_reach(selection: Sequence[Audience]) -> int:
    """Sum of estimated reach over a selection."""
    return sum(a.estimated_reach or 0 for a in selection)


def estimate_overlap(selection: Sequence[Audience]) -> int:
    """Estimated shared reach between selected audiences.

    Linear in the number of interests and saturating at 70% of total reach.
    This is a heuristic, not a set intersection.
    """
    if len(selection) < 2:
        return 0
    overlap_rate = min(OVERLAP_RATE_PER_INTEREST * len(selection), MAX_OVERLAP_RATE)
    return math.floor(total_reach(selection) * overlap_rate)


def summarize_selection(selection: Sequence[Audience]) -> SelectionSummary:
    """Reach figures for the selected interests."""
    return SelectionSummary(
        interest_names=[a.name for a in selection],
        count=len(selection),
        total_reach=total_reach(selection),
        overlap=estimate_overlap(selection),
    )


def aggregate(audiences: Sequence[Audience]) -> AggregationResult:
    """Aggregate demographics, behaviors, market size, reach and overlap.

    Args:
        audiences: Selected audiences

    Returns:
        AggregationResult recomputed from scratch on each call
    """
    return AggregationResult(
        demographics=aggregate_demographics(audiences),
        behaviors=analyze_behaviors(audiences),
        market_size=market_size(audiences),
        total_reach=total_reach(audiences),
        overlap=estimate_overlap(audiences),
    )
