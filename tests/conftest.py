# Author: Green Mountain Systems AI Inc.
# Donated to IAB Tech Lab

"""Pytest configuration and fixtures."""

from typing import Optional

import pytest

from audience_console.models.audience import Audience, BehaviorData, DemographicData, FilterSet


@pytest.fixture
def sample_interest() -> dict:
    """Raw interest record as returned by the search API."""
    return {
        "id": "6003139266461",
        "name": "Coffee",
        "path": ["Interests", "Food and drink", "Beverages", "Coffee"],
        "topic": "Food and drink",
        "audience_size_lower_bound": 100000,
        "audience_size_upper_bound": 200000,
        "description": "People interested in coffee",
        "demographic_distribution": [
            {"type": "Age", "value": "25-34", "percentage": 0.4},
            {"type": "Gender", "value": "female", "percentage": 0.55},
        ],
        "behavior_distribution": [
            {"name": "Online shoppers", "category": "Purchase behavior", "percentage": 0.3},
        ],
    }


@pytest.fixture
def sample_filters() -> FilterSet:
    """Filters for the reference scenario."""
    return FilterSet(
        gender="female",
        age="18-24",
        budget="10",
        objective="CONVERSIONS",
        placement="automatic",
    )


def make_audience(
    audience_id: str = "1",
    name: str = "Coffee",
    size: int = 100000,
    estimated_reach: int = 1000,
    demographics: Optional[list] = None,
    behaviors: Optional[list] = None,
    interests: Optional[list] = None,
) -> Audience:
    """Build a normalized audience for tests."""
    return Audience(
        id=audience_id,
        name=name,
        size=size,
        estimated_reach=estimated_reach,
        targeting={"interests": interests if interests is not None else [name]},
        demographics=[DemographicData(**d) for d in demographics or []],
        behaviors=[BehaviorData(**b) for b in behaviors or []],
    )


@pytest.fixture
def audience_factory():
    """Factory fixture for normalized audiences."""
    return make_audience


@pytest.fixture
def sample_audiences() -> list[Audience]:
    """A small selection of audiences with demographics and behaviors."""
    return [
        make_audience(
            "1",
            "Coffee",
            size=900000,
            estimated_reach=1500,
            demographics=[
                {"type": "Age", "value": "25-34", "percentage": 0.4},
                {"type": "Gender", "value": "female", "percentage": 0.55},
                {"type": "Education", "value": "college", "percentage": 0.25},
            ],
            behaviors=[
                {"name": "Online shoppers", "category": "Purchase behavior", "percentage": 0.3},
                {"name": "Early adopters", "category": "Technology", "percentage": 0.05},
            ],
        ),
        make_audience(
            "2",
            "Tea",
            size=300000,
            estimated_reach=1200,
            demographics=[
                {"type": "age", "value": "25-34", "percentage": 0.2},
                {"type": "age", "value": "35-44", "percentage": 0.1},
                {"type": "Income", "value": "top 25%", "percentage": 0.2},
            ],
            behaviors=[
                {"name": "Online shoppers", "category": "Purchase behavior", "percentage": 0.2},
                {"name": "Mobile users", "category": "Mobile", "percentage": 0.5},
            ],
        ),
    ]
