# Author: Green Mountain Systems AI Inc.
# Donated to IAB Tech Lab

"""Tests for the audience transformer."""

import json

import pytest

from audience_console.estimation.transformer import (
    format_demographic_label,
    format_path,
    midpoint_size,
    transform_audience,
    transform_interest_details,
)


class TestTransformAudience:
    """Tests for transform_audience."""

    def test_reference_scenario(self, sample_interest, sample_filters):
        audience = transform_audience(sample_interest, sample_filters)

        assert audience.size == 7200
        assert audience.estimated_reach == 1080

    def test_fields(self, sample_interest, sample_filters):
        audience = transform_audience(sample_interest, sample_filters, country="ID")

        assert audience.id == "6003139266461"
        assert audience.name == "Coffee"
        assert audience.description == "People interested in coffee"
        assert audience.path == "Interests > Food and drink > Beverages > Coffee"
        assert audience.targeting.interests == ["Coffee"]
        assert audience.targeting.locations == ["ID"]
        assert audience.demographics[0].type == "Age"
        assert audience.demographics[0].percentage == 0.4
        assert audience.behaviors[0].category == "Purchase behavior"

    def test_no_filters(self, sample_interest):
        audience = transform_audience(sample_interest)
        assert audience.size == 150000

    def test_idempotent(self, sample_interest, sample_filters):
        first = transform_audience(sample_interest, sample_filters)
        second = transform_audience(sample_interest, sample_filters)
        assert first == second

    def test_missing_bounds_use_fallback(self):
        audience = transform_audience({"id": "1", "name": "Tiny"})
        assert audience.size == 10000
        assert audience.estimated_reach == 1500

    def test_zero_bound_uses_fallback(self):
        assert midpoint_size({"audience_size_lower_bound": 0, "audience_size_upper_bound": 500}) == 10000

    @pytest.mark.parametrize(
        "lower, upper",
        [
            ("NaN", "NaN"),
            ("Infinity", "1"),
            (1e308, 1e308),
            (float("inf"), 5),
            (float("nan"), 500),
            (10**400, 10**400),
        ],
    )
    def test_non_finite_bounds_use_fallback(self, lower, upper):
        record = {
            "id": "1",
            "name": "Coffee",
            "audience_size_lower_bound": lower,
            "audience_size_upper_bound": upper,
        }

        audience = transform_audience(record)

        assert audience.size == 10000
        assert audience.estimated_reach == 1500

    def test_infinity_decoded_from_json(self):
        record = json.loads(
            '{"id": "1", "name": "Coffee", "audience_size_lower_bound": Infinity,'
            ' "audience_size_upper_bound": NaN,'
            ' "demographic_distribution": [{"type": "Age", "percentage": NaN}]}'
        )

        audience = transform_audience(record)

        assert audience.size == 10000
        assert audience.demographics[0].percentage == 0

    def test_malformed_record(self):
        audience = transform_audience(
            {
                "name": None,
                "path": None,
                "audience_size_lower_bound": "lots",
                "demographic_distribution": "not a list",
                "behavior_distribution": [None, {"name": "Gamers"}],
                "targeting": {"interests": "coffee"},
            },
            {"budget": "abc"},
        )
        assert audience.id == ""
        assert audience.name == "Unknown"
        assert audience.path == "General"
        assert audience.description == "No description available"
        assert audience.size == 10000
        assert audience.demographics == []
        assert len(audience.behaviors) == 1
        assert audience.behaviors[0].category == "General"
        assert audience.behaviors[0].percentage == 0
        assert audience.targeting.interests == ["Unknown"]

    def test_not_a_dict(self):
        audience = transform_audience(None)
        assert audience.name == "Unknown"
        assert audience.size == 10000

    def test_topic_used_as_description(self):
        audience = transform_audience({"id": "1", "name": "Tea", "topic": "Beverages"})
        assert audience.description == "Beverages"

    def test_raw_targeting_merged(self):
        audience = transform_audience(
            {"id": "1", "name": "Tea", "targeting": {"age_min": 18, "custom_key": "x"}}
        )
        assert audience.targeting.age_min == 18
        assert audience.targeting.interests == ["Tea"]


class TestFormatting:
    """Tests for path and label formatting."""

    def test_format_path(self):
        assert format_path(["A", "B"]) == "A > B"
        assert format_path("Shopping") == "Shopping"
        assert format_path(None) == "General"

    def test_demographic_labels(self):
        assert format_demographic_label("age", "25-34") == "25-34"
        assert format_demographic_label("age", "65") == "65+"
        assert format_demographic_label("gender", "female") == "Female"
        assert format_demographic_label("education", "some_college") == "Some College"
        assert format_demographic_label("income", "top 10%") == "top 10%"


class TestTransformInterestDetails:
    """Tests for transform_interest_details."""

    def test_details(self):
        details = transform_interest_details(
            {
                "id": "123",
                "name": "Coffee",
                "audience_size": 1500000,
                "path": ["Food", "Coffee"],
                "topic": "Food and drink",
                "related_interests": {
                    "data": [{"id": "456", "name": "Espresso", "audience_size": 20000}]
                },
                "demographic_stats": {
                    "age": {"25-34": 0.4, "65": 0.1},
                    "education": {"college_grad": 0.3},
                    "unknown_category": {"x": 1},
                },
                "behavior_stats": {"Travel": {"Frequent travelers": 0.2}},
                "audience_distribution": {"ID": 1.0},
            }
        )

        assert details.id == "123"
        assert details.size == 1500000
        assert details.description == "Food and drink"
        assert details.related_interests[0].name == "Espresso"
        assert details.related_interests[0].size == 20000
        assert [s.label for s in details.demographics["age"]] == ["25-34", "65+"]
        assert details.demographics["education"][0].label == "College Grad"
        assert "unknown_category" not in details.demographics
        assert details.behaviors[0].category == "Travel"
        assert details.behaviors[0].behaviors[0]["name"] == "Frequent travelers"
        assert details.distribution == {"ID": 1.0}

    def test_empty_details(self):
        details = transform_interest_details({})
        assert details.related_interests == []
        assert details.demographics == {}
        assert details.behaviors == []
        assert details.description == "No description available"

    def test_non_finite_sizes_are_dropped(self):
        details = transform_interest_details(
            {
                "id": "123",
                "audience_size": float("inf"),
                "related_interests": {"data": [{"id": "456", "audience_size": "NaN"}]},
            }
        )
        assert details.size is None
        assert details.related_interests[0].size is None
