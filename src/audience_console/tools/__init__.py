# Author: Green Mountain Systems AI Inc.
# Donated to IAB Tech Lab

"""CrewAI tools for audience research."""

from .audience import ReachEstimationTool

__all__ = [
    # Audience tools
    "ReachEstimationTool",
]
