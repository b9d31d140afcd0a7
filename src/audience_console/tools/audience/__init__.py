# Author: Green Mountain Systems AI Inc.
# Donated to IAB Tech Lab

"""Audience planning tools for the Audience Console.

These tools expose reach estimation to crewAI agents.
"""

from .reach_estimation import ReachEstimationInput, ReachEstimationTool

__all__ = [
    "ReachEstimationInput",
    "ReachEstimationTool",
]
