# Author: Green Mountain Systems AI Inc.
# Donated to IAB Tech Lab

"""Pydantic models for normalized audiences and campaign filters."""

import re
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field

from ..errors import ValidationError


class Gender(str, Enum):
    """Gender filter values."""

    ALL = "all"
    MALE = "male"
    FEMALE = "female"


class Objective(str, Enum):
    """Campaign objectives."""

    AWARENESS = "AWARENESS"
    CONVERSIONS = "CONVERSIONS"
    TRAFFIC = "TRAFFIC"
    ENGAGEMENT = "ENGAGEMENT"
    APP_PROMOTION = "APP_PROMOTION"
    LEAD_GENERATION = "LEAD_GENERATION"


class Placement(str, Enum):
    """Ad placements."""

    AUTOMATIC = "automatic"
    FACEBOOK = "facebook"
    INSTAGRAM = "instagram"
    MESSENGER = "messenger"
    WHATSAPP = "whatsapp"


AGE_OPTIONS = ["13-17", "18-24", "25-34", "35-44", "45-54", "55-64", "65-99"]
BUDGET_OPTIONS = ["5", "10", "20", "50", "100"]
DEFAULT_BUDGET = 10
LEADING_INTEGER = re.compile(r"\s*[+-]?\d+")


class FilterSet(BaseModel):
    """Campaign filters applied to every search.

    Values stay strings, the way the filter panel submits them. Changes go
    through ``with_change`` which returns a new instance.
    """

    location: str = "ID"
    gender: str = Gender.ALL.value
    age: Optional[str] = "18-24"
    budget: Optional[str] = str(DEFAULT_BUDGET)
    objective: Optional[str] = Objective.CONVERSIONS.value
    placement: Optional[str] = Placement.AUTOMATIC.value

    model_config = {"frozen": True}

    def with_change(self, name: str, value: Optional[str]) -> "FilterSet":
        """Return a copy with a single filter changed.

        Args:
            name: Filter name (location, gender, age, budget, objective, placement)
            value: New value

        Returns:
            New FilterSet

        Raises:
            ValidationError: If the filter name is unknown, the budget is not a
                positive whole number, or an enum filter gets a value outside
                its options
        """
        if name not in type(self).model_fields:
            raise ValidationError(f"Unknown filter: {name}")
        if name == "budget":
            value = validate_budget(value)
        elif name in ENUM_FILTERS:
            value = _enum_value(name, value)
        return self.model_copy(update={name: value})

    def budget_value(self) -> int:
        """Daily budget as an integer, 10 when missing or unparseable."""
        return parse_budget(self.budget)


ENUM_FILTERS: dict[str, type[Enum]] = {
    "gender": Gender,
    "objective": Objective,
    "placement": Placement,
}


def _enum_value(name: str, value: Optional[str]) -> Optional[str]:
    # Objective and placement may be cleared; gender always has a value.
    if value is None or value == "":
        if name == "gender":
            raise ValidationError("Gender is required")
        return None
    for member in ENUM_FILTERS[name]:
        if member.value.lower() == str(value).strip().lower():
            return member.value
    options = ", ".join(m.value for m in ENUM_FILTERS[name])
    raise ValidationError(f"Invalid {name}: {value}. Expected one of: {options}")


def validate_budget(budget: Any) -> str:
    """Check a budget entered in the filter panel.

    Raises:
        ValidationError: If the budget is missing, not a whole number or not positive
    """
    if budget is None or str(budget).strip() == "":
        raise ValidationError("Budget is required")
    text = str(budget).strip()
    if not re.fullmatch(r"\d+", text):
        raise ValidationError(f"Budget must be a whole number: {budget}")
    if int(text) <= 0:
        raise ValidationError(f"Budget must be positive: {budget}")
    return text


def parse_budget(budget: Any, default: int = DEFAULT_BUDGET) -> int:
    """Parse a budget string the lenient way the filter panel does.

    Only the leading integer counts, so ``"25.9"`` is 25 and ``"20abc"`` is 20.
    """
    if budget is None or budget == "":
        return default
    match = LEADING_INTEGER.match(str(budget))
    if match is None:
        return default
    return int(match.group(0))


class DemographicData(BaseModel):
    """A single demographic share for an audience."""

    type: str = "Unknown"
    value: str = "Unknown"
    percentage: float = 0.0

    model_config = {"frozen": True}


class BehaviorData(BaseModel):
    """A single behavior share for an audience."""

    name: str = "Unknown"
    category: str = "General"
    percentage: float = 0.0

    model_config = {"frozen": True}


class AudienceTargeting(BaseModel):
    """Targeting attached to an audience. Extra platform keys are kept."""

    age_min: Optional[int] = None
    age_max: Optional[int] = None
    genders: Optional[list[str]] = None
    interests: list[str] = Field(default_factory=list)
    behaviors: Optional[list[str]] = None
    locations: list[str] = Field(default_factory=list)

    model_config = {"frozen": True, "extra": "allow"}


class Audience(BaseModel):
    """Normalized audience built from a platform interest record."""

    id: str
    name: str
    description: str = "No description available"
    size: int = Field(..., ge=0)
    estimated_reach: int = Field(default=0, alias="estimatedReach")
    path: str = "General"
    targeting: AudienceTargeting = Field(default_factory=AudienceTargeting)
    demographics: list[DemographicData] = Field(default_factory=list)
    behaviors: list[BehaviorData] = Field(default_factory=list)

    model_config = {"populate_by_name": True, "frozen": True}
