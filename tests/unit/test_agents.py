# Author: Green Mountain Systems AI Inc.
# Donated to IAB Tech Lab

"""Tests for agent creation."""

from unittest.mock import MagicMock, patch

import pytest

from audience_console.agents import audience_planner_agent
from audience_console.agents.audience_planner_agent import create_audience_planner_agent
from audience_console.config.settings import get_settings
from audience_console.tools import ReachEstimationTool


@pytest.fixture
def crew_classes():
    """Patch crewAI Agent and LLM so no provider is contacted."""
    with patch.object(audience_planner_agent, "LLM") as llm_cls, patch.object(
        audience_planner_agent, "Agent"
    ) as agent_cls:
        yield llm_cls, agent_cls


class TestAudiencePlannerAgent:
    """Tests for the Audience Planner agent."""

    def test_agent_creation(self, crew_classes):
        """Test the agent carries the reach estimation tool."""
        llm_cls, agent_cls = crew_classes

        agent = create_audience_planner_agent(verbose=False)

        assert agent is agent_cls.return_value
        kwargs = agent_cls.call_args.kwargs
        assert kwargs["role"] == "Audience Planning Specialist"
        assert "reach" in kwargs["goal"].lower()
        assert kwargs["allow_delegation"] is False
        assert kwargs["verbose"] is False
        assert kwargs["llm"] is llm_cls.return_value
        assert len(kwargs["tools"]) == 1
        assert isinstance(kwargs["tools"][0], ReachEstimationTool)
        assert llm_cls.call_args.kwargs["model"] == get_settings().default_llm_model

    def test_agent_with_custom_tools(self, crew_classes):
        """Test explicit tools replace the default."""
        _, agent_cls = crew_classes
        custom = MagicMock()

        create_audience_planner_agent(tools=[custom])

        assert agent_cls.call_args.kwargs["tools"] == [custom]

    def test_agent_tool_estimates_reach(self, crew_classes):
        """Test the attached tool runs the reach estimate."""
        _, agent_cls = crew_classes
        create_audience_planner_agent()
        tool = agent_cls.call_args.kwargs["tools"][0]

        result = tool._run(
            interest_name="Coffee",
            audience_size_lower_bound=100000,
            audience_size_upper_bound=200000,
            gender="female",
        )

        assert "Est. daily reach: 1,080" in result
