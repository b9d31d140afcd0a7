# Author: Green Mountain Systems AI Inc.
# Donated to IAB Tech Lab

"""Audience Planner Agent - sizes interest audiences for a campaign.

The agent reasons over Meta interest audiences and uses the reach
estimation tool to size each candidate under the campaign filters before
recommending a targeting mix.
"""

from typing import Any

from crewai import Agent, LLM

from ..config.settings import get_settings
from ..tools.audience import ReachEstimationTool


def create_audience_planner_agent(
    tools: list[Any] | None = None,
    verbose: bool = True,
) -> Agent:
    """Create the Audience Planner Agent.

    Responsibilities:
    - Size candidate interests under gender, age, objective and placement filters
    - Compare estimated daily reach against the campaign budget
    - Recommend a focused or broad interest mix for the objective

    Args:
        tools: Tools for the agent, the reach estimation tool when omitted
        verbose: Whether to enable verbose logging

    Returns:
        Agent: Configured Audience Planner agent
    """
    settings = get_settings()

    llm = LLM(
        model=settings.default_llm_model,
        temperature=0.3,
        max_tokens=settings.llm_analysis_max_tokens,
        api_key=settings.anthropic_api_key or None,
    )

    return Agent(
        role="Audience Planning Specialist",
        goal="""Recommend interest audiences that reach the most people the
        campaign objective cares about within the daily budget.""",
        backstory="""You are an audience planning specialist for social
        advertising campaigns in Southeast Asia.

        Your expertise includes:
        - **Interest Sizing**: You turn the platform's audience bounds into an
          adjusted audience size for the chosen gender, age band, objective
          and placement
        - **Reach Estimation**: You estimate daily reach from the budget and
          know it is capped at 15% of the audience with a floor of 1,000
        - **Objective Fit**: Awareness campaigns need audiences above
          500,000 people; conversion campaigns favor smaller, engaged audiences

        Key planning principles:
        - Always size an interest with the reach estimation tool before
          recommending it
        - Flag audiences where the reach floor exceeds the audience size
        - Prefer two or three complementary interests over one very broad one
        - Explain the tradeoff between reach and precision in plain terms""",
        verbose=verbose,
        allow_delegation=False,
        llm=llm,
        tools=tools if tools is not None else [ReachEstimationTool()],
    )
