# Author: Green Mountain Systems AI Inc.
# Donated to IAB Tech Lab

"""Tests for audience aggregation."""

import math

from audience_console.analysis.aggregator import (
    aggregate,
    aggregate_demographics,
    analyze_behaviors,
    estimate_overlap,
    market_size,
    summarize_selection,
    total_reach,
)


class TestDemographics:
    """Tests for demographic aggregation."""

    def test_thresholds_and_dedup(self, sample_audiences):
        demographics = aggregate_demographics(sample_audiences)
        assert demographics.age == ["25-34"]
        assert demographics.gender == ["female"]
        assert demographics.education == ["college"]
        assert demographics.income == ["top 25%"]

    def test_threshold_is_exclusive(self, audience_factory):
        audience = audience_factory(
            demographics=[
                {"type": "gender", "value": "male", "percentage": 0.3},
                {"type": "age", "value": "18-24", "percentage": 0.16},
            ]
        )
        demographics = aggregate_demographics([audience])
        assert demographics.gender == []
        assert demographics.age == ["18-24"]

    def test_unknown_types_ignored(self, audience_factory):
        audience = audience_factory(
            demographics=[{"type": "Relationship", "value": "single", "percentage": 0.9}]
        )
        demographics = aggregate_demographics([audience])
        assert demographics.model_dump() == {"age": [], "gender": [], "education": [], "income": []}

    def test_first_seen_order(self, audience_factory):
        audiences = [
            audience_factory("1", demographics=[{"type": "age", "value": "35-44", "percentage": 0.5}]),
            audience_factory("2", demographics=[{"type": "age", "value": "18-24", "percentage": 0.5}]),
            audience_factory("3", demographics=[{"type": "age", "value": "35-44", "percentage": 0.5}]),
        ]
        assert aggregate_demographics(audiences).age == ["35-44", "18-24"]


class TestBehaviors:
    """Tests for behavior grouping."""

    def test_grouped_by_category(self, sample_audiences):
        groups = analyze_behaviors(sample_audiences)
        assert [g.category for g in groups] == ["Purchase behavior", "Mobile"]
        assert groups[0].items == ["Online shoppers"]
        assert groups[1].items == ["Mobile users"]

    def test_items_deduplicated(self, audience_factory):
        behaviors = [
            {"name": "Gamers", "category": "Gaming", "percentage": 0.5},
            {"name": "Streamers", "category": "Gaming", "percentage": 0.5},
            {"name": "Gamers", "category": "Gaming", "percentage": 0.2},
        ]
        groups = analyze_behaviors([audience_factory(behaviors=behaviors)])
        assert len(groups) == 1
        assert sorted(groups[0].items) == ["Gamers", "Streamers"]

    def test_low_share_dropped(self, audience_factory):
        behaviors = [{"name": "Gamers", "category": "Gaming", "percentage": 0.1}]
        assert analyze_behaviors([audience_factory(behaviors=behaviors)]) == []


class TestReachAndOverlap:
    """Tests for reach totals and overlap."""

    def test_market_size_and_total_reach(self, sample_audiences):
        assert market_size(sample_audiences) == 1_200_000
        assert total_reach(sample_audiences) == 2700
        assert market_size([]) == 0

    def test_overlap_needs_two(self, audience_factory):
        assert estimate_overlap([]) == 0
        assert estimate_overlap([audience_factory()]) == 0

    def test_overlap_for_two(self, audience_factory):
        a = audience_factory("1", estimated_reach=1500)
        b = audience_factory("2", estimated_reach=1200)
        assert estimate_overlap([a, b]) == math.floor((1500 + 1200) * min(0.3 * 2, 0.7))
        assert estimate_overlap([a, b]) in (1619, 1620)

    def test_overlap_saturates(self, audience_factory):
        selection = [audience_factory(str(i), estimated_reach=1000) for i in range(5)]
        assert estimate_overlap(selection) == math.floor(5000 * 0.7)

    def test_summary(self, sample_audiences):
        summary = summarize_selection(sample_audiences)
        assert summary.interest_names == ["Coffee", "Tea"]
        assert summary.count == 2
        assert summary.total_reach == 2700
        assert summary.overlap == estimate_overlap(sample_audiences)

    def test_aggregate(self, sample_audiences):
        result = aggregate(sample_audiences)
        assert result.market_size == 1_200_000
        assert result.total_reach == 2700
        assert result.demographics.age == ["25-34"]
        assert len(result.behaviors) == 2

    def test_aggregate_empty(self):
        result = aggregate([])
        assert result.market_size == 0
        assert result.total_reach == 0
        assert result.overlap == 0
        assert result.behaviors == []
