# Author: Green Mountain Systems AI Inc.
# Donated to IAB Tech Lab

"""CrewAI agents for audience planning."""

from .audience_planner_agent import create_audience_planner_agent

__all__ = [
    "create_audience_planner_agent",
]
