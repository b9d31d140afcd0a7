# Author: Green Mountain Systems AI Inc.
# Donated to IAB Tech Lab

"""Reach estimation.

Two formulas live here and are kept apart:

- ``estimate_reach`` is the detailed estimate stored on every audience.
- ``estimate_table_reach`` is the quick estimate the results table sorts by.

They use different CPMs and caps and do not agree with each other.
"""

import math
from typing import Any

from ..models.audience import Audience, parse_budget

# Base CPM for Indonesia
BASE_CPM = 2.0
AVG_FREQUENCY = 2
MAX_DAILY_REACH_SHARE = 0.15
MIN_REACH = 1000

TABLE_BASE_CPM = 3.5
TABLE_INTEREST_MULTIPLIER = 1.2
TABLE_REACH_RATE = 0.7


def audience_size_multiplier(audience_size: int) -> float:
    """CPM uplift for larger audiences, 0 for empty ones."""
    if audience_size <= 0:
        return 0.0
    return min(1, math.log10(audience_size) / 7)


def estimate_reach(audience_size: int, daily_budget: int, cpm_modifier: float) -> int:
    """Estimate daily reach for an audience within a daily budget.

    Reach is capped at 15% of the audience, then floored at 1000, so small
    audiences report more reach than their cap.

    Args:
        audience_size: Adjusted audience size
        daily_budget: Daily budget in currency units
        cpm_modifier: CPM multiplier from the targeting filters

    Returns:
        Estimated daily reach
    """
    adjusted_cpm = BASE_CPM * (1 + audience_size_multiplier(audience_size)) * cpm_modifier
    daily_impressions = (daily_budget / adjusted_cpm) * 1000

    estimated_daily_reach = math.floor(daily_impressions / AVG_FREQUENCY)

    max_daily_reach = math.floor(audience_size * MAX_DAILY_REACH_SHARE)
    estimated_daily_reach = min(estimated_daily_reach, max_daily_reach)

    return max(estimated_daily_reach, MIN_REACH)


def estimate_table_reach(audience: Audience, budget: Any = None) -> int:
    """Quick reach estimate used to rank rows in the results table.

    Args:
        audience: Normalized audience
        budget: Budget filter value (string or int), defaults to 10

    Returns:
        Reach capped at the audience size
    """
    daily_budget = parse_budget(budget)
    targeting_multiplier = TABLE_INTEREST_MULTIPLIER if audience.targeting.interests else 1
    adjusted_cpm = TABLE_BASE_CPM * targeting_multiplier
    potential_impressions = (daily_budget * 1000) / adjusted_cpm
    return min(math.floor(potential_impressions * TABLE_REACH_RATE), audience.size)
