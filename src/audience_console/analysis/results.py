# Author: Green Mountain Systems AI Inc.
# Donated to IAB Tech Lab

"""Results table helpers: sorting, number formatting and selection."""

from collections.abc import Sequence
from typing import Any, Literal

from ..estimation.reach import estimate_table_reach
from ..models.audience import Audience

SortField = Literal["size", "estimated_reach"]
SortDirection = Literal["asc", "desc"]


def sort_audiences(
    audiences: Sequence[Audience],
    field: SortField = "size",
    direction: SortDirection = "desc",
    budget: Any = None,
) -> list[Audience]:
    """Sort result rows by size or by the quick table reach estimate."""

    def sort_value(audience: Audience) -> int:
        if field == "estimated_reach":
            return estimate_table_reach(audience, budget)
        return audience.size

    return sorted(audiences, key=sort_value, reverse=direction == "desc")


def format_count(num: int) -> str:
    """Compact count, e.g. ``1.2M`` or ``3.4K``."""
    if num >= 1_000_000:
        return f"{num / 1_000_000:.1f}M"
    return f"{num / 1000:.1f}K"


def toggle_selection(selection: Sequence[Audience], audience: Audience) -> list[Audience]:
    """Add an audience to the selection, or remove it if already selected."""
    if any(a.id == audience.id for a in selection):
        return [a for a in selection if a.id != audience.id]
    return [*selection, audience]
