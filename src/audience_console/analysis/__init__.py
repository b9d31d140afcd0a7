# Author: Green Mountain Systems AI Inc.
# Donated to IAB Tech Lab

"""Audience aggregation and rationale generation."""

from .aggregator import (
    aggregate,
    aggregate_demographics,
    analyze_behaviors,
    estimate_overlap,
    market_size,
    summarize_selection,
    total_reach,
)
from .rationale import (
    analyze_business_type,
    build_analysis_prompt,
    generate_rationale,
    generate_recommendations,
)
from .results import format_count, sort_audiences, toggle_selection

__all__ = [
    # Aggregation
    "aggregate",
    "aggregate_demographics",
    "analyze_behaviors",
    "estimate_overlap",
    "market_size",
    "summarize_selection",
    "total_reach",
    # Rationale
    "analyze_business_type",
    "build_analysis_prompt",
    "generate_rationale",
    "generate_recommendations",
    # Results table
    "format_count",
    "sort_audiences",
    "toggle_selection",
]
