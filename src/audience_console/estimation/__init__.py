# Author: Green Mountain Systems AI Inc.
# Donated to IAB Tech Lab

"""Reach and targeting estimation engine.

Pure functions that turn raw platform audience bounds and campaign filters
into adjusted audience sizes and budget-constrained reach estimates.
"""

from .modifiers import compute_modifiers, parse_age_range
from .objective_filter import filter_by_objective
from .reach import estimate_reach, estimate_table_reach
from .transformer import transform_audience, transform_interest_details

__all__ = [
    "compute_modifiers",
    "estimate_reach",
    "estimate_table_reach",
    "filter_by_objective",
    "parse_age_range",
    "transform_audience",
    "transform_interest_details",
]
