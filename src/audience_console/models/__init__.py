# Author: Green Mountain Systems AI Inc.
# Donated to IAB Tech Lab

"""Data models for the Audience Console."""

from .audience import (
    AGE_OPTIONS,
    BUDGET_OPTIONS,
    Audience,
    AudienceTargeting,
    BehaviorData,
    DemographicData,
    FilterSet,
    Gender,
    Objective,
    Placement,
    parse_budget,
    validate_budget,
)
from .analysis import (
    AggregatedDemographics,
    AggregationResult,
    AnalysisResult,
    BehaviorGroup,
    BehaviorStatGroup,
    ChatMessage,
    DemographicStat,
    InterestDetails,
    RelatedInterest,
    SelectionSummary,
    TargetingModifiers,
)

__all__ = [
    # Audience models
    "AGE_OPTIONS",
    "BUDGET_OPTIONS",
    "Audience",
    "AudienceTargeting",
    "BehaviorData",
    "DemographicData",
    "FilterSet",
    "Gender",
    "Objective",
    "Placement",
    "parse_budget",
    "validate_budget",
    # Analysis models
    "AggregatedDemographics",
    "AggregationResult",
    "AnalysisResult",
    "BehaviorGroup",
    "BehaviorStatGroup",
    "ChatMessage",
    "DemographicStat",
    "InterestDetails",
    "RelatedInterest",
    "SelectionSummary",
    "TargetingModifiers",
]
