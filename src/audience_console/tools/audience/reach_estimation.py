# Author: Green Mountain Systems AI Inc.
# Donated to IAB Tech Lab

"""Reach Estimation Tool - Estimate audience size and daily reach for targeting."""

from typing import Optional, Type

from crewai.tools import BaseTool
from pydantic import BaseModel, Field

from ...analysis.results import format_count
from ...estimation.modifiers import compute_modifiers
from ...estimation.reach import estimate_table_reach
from ...estimation.transformer import transform_audience
from ...models.audience import FilterSet


class ReachEstimationInput(BaseModel):
    """Input schema for reach estimation tool."""

    interest_name: str = Field(default="Interest", description="Name of the interest")
    audience_size_lower_bound: Optional[int] = Field(
        default=None, ge=0, description="Platform lower bound of the interest audience"
    )
    audience_size_upper_bound: Optional[int] = Field(
        default=None, ge=0, description="Platform upper bound of the interest audience"
    )
    gender: str = Field(default="all", description="all, male or female")
    age: str = Field(default="18-24", description="Age range as min-max, e.g. 25-34")
    budget: str = Field(default="10", description="Daily budget in USD")
    objective: str = Field(
        default="CONVERSIONS",
        description="AWARENESS, CONVERSIONS, TRAFFIC, ENGAGEMENT, APP_PROMOTION or LEAD_GENERATION",
    )
    placement: str = Field(
        default="automatic",
        description="automatic, facebook, instagram, messenger or whatsapp",
    )


class ReachEstimationTool(BaseTool):
    """Estimate adjusted audience size and reach for an interest.

    Applies the targeting modifiers for the given filters to the platform's
    audience bounds and reports the resulting daily reach.
    """

    name: str = "estimate_interest_reach"
    description: str = """Estimate adjusted audience size and daily reach for an interest.
    Provide the platform audience bounds and campaign filters (gender, age,
    budget, objective, placement). Returns the targeting modifiers, adjusted
    audience size, and estimated daily reach."""
    args_schema: Type[BaseModel] = ReachEstimationInput

    def _run(
        self,
        interest_name: str = "Interest",
        audience_size_lower_bound: Optional[int] = None,
        audience_size_upper_bound: Optional[int] = None,
        gender: str = "all",
        age: str = "18-24",
        budget: str = "10",
        objective: str = "CONVERSIONS",
        placement: str = "automatic",
    ) -> str:
        """Execute the reach estimation."""
        filters = FilterSet(
            gender=gender,
            age=age,
            budget=str(budget),
            objective=objective,
            placement=placement,
        )
        raw = {
            "id": interest_name,
            "name": interest_name,
            "audience_size_lower_bound": audience_size_lower_bound,
            "audience_size_upper_bound": audience_size_upper_bound,
        }
        audience = transform_audience(raw, filters)
        modifiers = compute_modifiers(filters)

        output = f"## Reach Estimate: {audience.name}\n\n"

        output += "**Targeting Applied:**\n"
        for key, value in filters.model_dump().items():
            if value:
                output += f"   {key}: {value}\n"
        output += "\n"

        output += "**Modifiers:**\n"
        output += f"   Size modifier: {modifiers.size_modifier:.3f}\n"
        output += f"   CPM modifier: {modifiers.cpm_modifier:.2f}\n\n"

        output += "**Estimates:**\n"
        output += f"   Adjusted audience size: {audience.size:,} ({format_count(audience.size)})\n"
        output += f"   Est. daily reach: {audience.estimated_reach:,}\n"
        output += f"   Quick table estimate: {estimate_table_reach(audience, budget):,}\n"

        if audience.estimated_reach > audience.size:
            output += "\n- Audience is small; reach shows the 1,000 minimum, not a real figure\n"

        return output
