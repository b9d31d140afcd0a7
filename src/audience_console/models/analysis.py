# Author: Green Mountain Systems AI Inc.
# Donated to IAB Tech Lab

"""Models for aggregated audience analysis and interest details."""

from typing import Any, Literal, Optional

from pydantic import BaseModel, Field


class TargetingModifiers(BaseModel):
    """Multipliers derived from a filter set."""

    size_modifier: float = Field(default=1.0, alias="sizeModifier")
    cpm_modifier: float = Field(default=1.0, alias="cpmModifier")

    model_config = {"populate_by_name": True, "frozen": True}


class AggregatedDemographics(BaseModel):
    """Significant demographic values across a set of audiences."""

    age: list[str] = Field(default_factory=list)
    gender: list[str] = Field(default_factory=list)
    education: list[str] = Field(default_factory=list)
    income: list[str] = Field(default_factory=list)


class BehaviorGroup(BaseModel):
    """Significant behaviors within one category."""

    category: str
    items: list[str] = Field(default_factory=list)


class AggregationResult(BaseModel):
    """Output of the audience aggregator."""

    demographics: AggregatedDemographics = Field(default_factory=AggregatedDemographics)
    behaviors: list[BehaviorGroup] = Field(default_factory=list)
    market_size: int = Field(default=0, ge=0, alias="marketSize")
    total_reach: int = Field(default=0, ge=0, alias="totalReach")
    overlap: int = Field(default=0, ge=0)

    model_config = {"populate_by_name": True}


class AnalysisResult(BaseModel):
    """Full analysis for a selection of audiences."""

    primary_interests: list[str] = Field(default_factory=list, alias="primaryInterests")
    secondary_interests: list[str] = Field(default_factory=list, alias="secondaryInterests")
    demographics: AggregatedDemographics = Field(default_factory=AggregatedDemographics)
    behaviors: list[BehaviorGroup] = Field(default_factory=list)
    market_size: int = Field(default=0, ge=0, alias="marketSize")
    total_reach: int = Field(default=0, ge=0, alias="totalReach")
    overlap: int = Field(default=0, ge=0)
    rationale: str = ""
    recommendations: list[str] = Field(default_factory=list)

    model_config = {"populate_by_name": True}


class SelectionSummary(BaseModel):
    """Reach figures for the currently selected interests."""

    interest_names: list[str] = Field(default_factory=list, alias="interestNames")
    count: int = Field(default=0, ge=0)
    total_reach: int = Field(default=0, ge=0, alias="totalReach")
    overlap: int = Field(default=0, ge=0)

    model_config = {"populate_by_name": True}


class RelatedInterest(BaseModel):
    """An interest related to the one being inspected."""

    id: Optional[str] = None
    name: Optional[str] = None
    size: Optional[int] = None
    path: Any = None


class DemographicStat(BaseModel):
    """One value of a demographic category with its display label."""

    value: str
    percentage: Any = None
    label: str


class BehaviorStatGroup(BaseModel):
    """Behaviors reported for a single category."""

    category: str
    behaviors: list[dict[str, Any]] = Field(default_factory=list)


class InterestDetails(BaseModel):
    """Detailed view of a single interest."""

    id: Optional[str] = None
    name: Optional[str] = None
    size: Optional[int] = None
    path: Any = None
    description: str = "No description available"
    related_interests: list[RelatedInterest] = Field(
        default_factory=list, alias="relatedInterests"
    )
    demographics: dict[str, list[DemographicStat]] = Field(default_factory=dict)
    behaviors: list[BehaviorStatGroup] = Field(default_factory=list)
    distribution: dict[str, Any] = Field(default_factory=dict)

    model_config = {"populate_by_name": True}


class ChatMessage(BaseModel):
    """A message in the assistant conversation."""

    role: Literal["user", "assistant"]
    content: str
