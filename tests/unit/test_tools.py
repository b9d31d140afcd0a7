# Author: Green Mountain Systems AI Inc.
# Donated to IAB Tech Lab

"""Tests for CrewAI tools."""

from audience_console.tools.audience import ReachEstimationInput, ReachEstimationTool


class TestReachEstimationTool:
    """Tests for the ReachEstimationTool."""

    def test_tool_initialization(self):
        """Test tool initializes correctly."""
        tool = ReachEstimationTool()
        assert tool.name == "estimate_interest_reach"
        assert "Estimate adjusted audience size" in tool.description

    def test_input_schema(self):
        """Test input schema defaults."""
        input_data = ReachEstimationInput(interest_name="Coffee")
        assert input_data.gender == "all"
        assert input_data.age == "18-24"
        assert input_data.budget == "10"
        assert input_data.objective == "CONVERSIONS"

    def test_reference_estimate(self):
        """Test estimate for the reference filters."""
        result = ReachEstimationTool()._run(
            interest_name="Coffee",
            audience_size_lower_bound=100000,
            audience_size_upper_bound=200000,
            gender="female",
        )

        assert "## Reach Estimate: Coffee" in result
        assert "Size modifier: 0.048" in result
        assert "CPM modifier: 1.40" in result
        assert "Adjusted audience size: 7,200 (7.2K)" in result
        assert "Est. daily reach: 1,080\n" in result
        assert "minimum" not in result

    def test_small_audience_note(self):
        """Test the reach floor note for audiences below 1,000."""
        result = ReachEstimationTool()._run(
            interest_name="Niche",
            audience_size_lower_bound=400,
            audience_size_upper_bound=600,
            age="25-75",
            objective="AWARENESS",
        )

        assert "Adjusted audience size: 500 (0.5K)" in result
        assert "Est. daily reach: 1,000" in result
        assert "1,000 minimum" in result
