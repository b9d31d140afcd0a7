# Author: Green Mountain Systems AI Inc.
# Donated to IAB Tech Lab

"""Search orchestration for the Audience Console."""

from .debounce import Debouncer, RequestSequencer
from .search_flow import AssistantReply, SearchFlow, SearchOutcome, SearchStatus

__all__ = [
    "AssistantReply",
    "Debouncer",
    "RequestSequencer",
    "SearchFlow",
    "SearchOutcome",
    "SearchStatus",
]
