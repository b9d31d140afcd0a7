# Author: Green Mountain Systems AI Inc.
# Donated to IAB Tech Lab

"""Client implementations for the audience console."""

from .llm_client import TextGenerationClient, extract_bracketed_interests
from .meta_client import MetaAdsClient, build_targeting_spec


__all__ = [
    # Meta Graph API interest search
    "MetaAdsClient",
    "build_targeting_spec",
    # Text generation for advice and suggestions
    "TextGenerationClient",
    "extract_bracketed_interests",
]
