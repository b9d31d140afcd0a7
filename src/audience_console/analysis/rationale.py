# Author: Green Mountain Systems AI Inc.
# Donated to IAB Tech Lab

"""Rationale, recommendations and prompts for a selection of audiences."""

from collections.abc import Sequence
from typing import Optional

from ..models.analysis import AggregatedDemographics, AnalysisResult, BehaviorGroup
from ..models.audience import Audience
from .aggregator import (
    aggregate_demographics,
    analyze_behaviors,
    estimate_overlap,
    market_size,
    total_reach,
)

PRIMARY_INTEREST_COUNT = 3
SECONDARY_INTEREST_COUNT = 5
LARGE_SELECTION = 5


def generate_rationale(
    description: str,
    demographics: AggregatedDemographics,
    behaviors: Sequence[BehaviorGroup],
) -> str:
    """Explain why the audience selection fits.

    The text is assembled from fixed templates, so the same inputs always
    produce the same output. Only non-empty demographic buckets are listed.
    """
    parts: list[Optional[str]] = [
        "This audience selection is optimal because:",
        "",
        "1. Demographic Alignment:",
        f"   • Age Groups: {', '.join(demographics.age)}" if demographics.age else None,
        f"   • Gender: {', '.join(demographics.gender)}" if demographics.gender else None,
        f"   • Education: {', '.join(demographics.education)}" if demographics.education else None,
        "",
        "2. Behavioral Indicators:",
        *[f"   • {b.category}: {', '.join(b.items)}" for b in behaviors],
        "",
        "3. Market Potential:",
        "   • High engagement probability based on interest overlap",
        "   • Strong behavioral alignment with business objectives",
    ]

    return "\n".join(part for part in parts if part)


def generate_recommendations(
    audiences: Sequence[Audience],
    demographics: AggregatedDemographics,
) -> list[str]:
    """Strategic recommendations for the selection."""
    top_age = demographics.age[0] if demographics.age else "primary age groups"
    recommendations = [
        f"Focus on {top_age} as they show highest engagement potential",
        "Test different ad formats across placements for optimal performance",
        "Implement progressive bidding strategy based on audience response",
        "Consider seasonal adjustments for targeting parameters",
    ]

    if len(audiences) > LARGE_SELECTION:
        recommendations.append("Start with top 3-5 interests and expand based on performance")

    return recommendations


def analyze_business_type(description: str, audiences: Sequence[Audience]) -> AnalysisResult:
    """Build the full analysis for a business description and its audiences.

    Args:
        description: Free-text business description
        audiences: Selected audiences

    Returns:
        AnalysisResult with interests ranked by size
    """
    ranked = sorted(audiences, key=lambda a: a.size, reverse=True)
    demographics = aggregate_demographics(audiences)
    behaviors = analyze_behaviors(audiences)

    return AnalysisResult(
        primary_interests=[a.name for a in ranked[:PRIMARY_INTEREST_COUNT]],
        secondary_interests=[
            a.name
            for a in ranked[PRIMARY_INTEREST_COUNT:PRIMARY_INTEREST_COUNT + SECONDARY_INTEREST_COUNT]
        ],
        demographics=demographics,
        behaviors=behaviors,
        market_size=market_size(audiences),
        total_reach=total_reach(audiences),
        overlap=estimate_overlap(audiences),
        rationale=generate_rationale(description, demographics, behaviors),
        recommendations=generate_recommendations(audiences, demographics),
    )


def build_analysis_prompt(selection: Sequence[Audience]) -> str:
    """Prompt asking the assistant to analyze the selected interests."""
    interest_names = ", ".join(a.name for a in selection)
    return f"""Analyze these Meta Ads targeting interests: {interest_names}

Key metrics:
- Total estimated reach: {total_reach(selection)}
- Audience overlap: {estimate_overlap(selection)}
- Number of interests: {len(selection)}

Please provide:
1. Analysis of how these interests work together
2. Potential audience characteristics
3. Targeting recommendations
4. Budget optimization suggestions
5. Creative strategy tips"""
