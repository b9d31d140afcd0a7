# Author: Green Mountain Systems AI Inc.
# Donated to IAB Tech Lab

"""Text-generation client for targeting advice, suggestions and analysis."""

import asyncio
import json
import logging
import re
from collections.abc import Awaitable, Callable
from typing import Any, Optional, TypeVar

from crewai import LLM

from ..errors import AudienceConsoleError, GenerationError, ValidationError

logger = logging.getLogger(__name__)

T = TypeVar("T")

EXPERT_SYSTEM_PROMPT = (
    "You are a Meta Ads targeting expert. When suggesting interests, provide single "
    "words only, no brackets, numbers, or additional formatting. Each suggestion "
    "should be a valid Meta Ads interest."
)
SUGGESTION_SYSTEM_PROMPT = (
    "You are a Meta Ads targeting expert. Provide only single-word interests, "
    "separated by commas. No formatting, no numbers, no brackets."
)
ANALYSIS_SYSTEM_PROMPT = (
    "You are a Meta Ads targeting expert. Provide only single-word interests that are "
    "valid in Meta Ads targeting. No formatting, no numbers, no brackets. "
    "Respond with a single JSON object."
)
FALLBACK_RESPONSE = "I apologize, but I couldn't generate a response. Please try again."
SUGGESTION_COUNT = 5

_BRACKETED = re.compile(r"\[(.*?)\]")
_CODE_FENCE = re.compile(r"^```(?:json)?\s*|\s*```$")


def extract_bracketed_interests(text: str) -> list[str]:
    """Pull ``[interest]`` tokens out of an assistant reply."""
    return _BRACKETED.findall(text or "")


def parse_suggestions(content: Optional[str], current_interests: list[str]) -> list[str]:
    """Split a comma-separated reply into new single-word interests."""
    suggestions: list[str] = []
    for raw in (content or "").split(","):
        suggestion = raw.strip()
        if suggestion and suggestion not in current_interests and suggestion not in suggestions:
            suggestions.append(suggestion)
    return suggestions[:SUGGESTION_COUNT]


class TextGenerationClient:
    """Thin wrapper over a crewAI LLM.

    Each operation has its own token budget; the model call runs in a worker
    thread so the event loop stays free.
    """

    def __init__(
        self,
        model: str,
        api_key: Optional[str] = None,
        temperature: float = 0.7,
        response_max_tokens: int = 500,
        suggestion_max_tokens: int = 100,
        analysis_max_tokens: int = 1000,
    ):
        """Initialize the client.

        Args:
            model: Model identifier understood by crewAI (provider/model)
            api_key: Provider API key, falls back to the provider's env var
            temperature: Sampling temperature for every call
            response_max_tokens: Budget for free-form replies
            suggestion_max_tokens: Budget for interest suggestions
            analysis_max_tokens: Budget for business analysis JSON
        """
        self.model = model
        self.api_key = api_key or None
        self.temperature = temperature
        self.response_max_tokens = response_max_tokens
        self.suggestion_max_tokens = suggestion_max_tokens
        self.analysis_max_tokens = analysis_max_tokens

    def _create_llm(self, max_tokens: int) -> LLM:
        return LLM(
            model=self.model,
            temperature=self.temperature,
            max_tokens=max_tokens,
            api_key=self.api_key,
        )

    async def _complete(self, system: str, prompt: str, max_tokens: int) -> str:
        llm = self._create_llm(max_tokens)
        messages = [
            {"role": "system", "content": system},
            {"role": "user", "content": prompt},
        ]
        result = await asyncio.to_thread(llm.call, messages)
        return result if isinstance(result, str) else ""

    async def _make_request(self, operation: Callable[[], Awaitable[T]]) -> T:
        """Run an operation, wrapping provider failures in GenerationError."""
        try:
            return await operation()
        except AudienceConsoleError:
            raise
        except Exception as e:
            logger.error(f"LLM API error: {e}")
            raise GenerationError(f"LLM API Error: {e}") from e

    async def generate_response(self, message: str) -> str:
        """Free-form targeting advice for a user message."""

        async def operation() -> str:
            content = await self._complete(
                EXPERT_SYSTEM_PROMPT, message, self.response_max_tokens
            )
            return content or FALLBACK_RESPONSE

        return await self._make_request(operation)

    async def generate_suggestions(self, current_interests: list[str]) -> list[str]:
        """Suggest up to five new single-word interests.

        Raises:
            ValidationError: If no interests were given
            GenerationError: If the reply holds no usable suggestion
        """

        async def operation() -> list[str]:
            if not current_interests:
                raise ValidationError("At least one interest is required")

            prompt = f"""Based on these Meta Ads interests: {', '.join(current_interests)}

Please suggest 5 additional highly relevant targeting interests. Provide ONLY single words, separated by commas. Each word must be a valid Meta Ads interest. No formatting, no numbers, no brackets.

Example good response: Fashion, Technology, Sports, Travel, Music
Example bad response: 1. [Fashion] 2. [Technology]"""

            content = await self._complete(
                SUGGESTION_SYSTEM_PROMPT, prompt, self.suggestion_max_tokens
            )
            suggestions = parse_suggestions(content, current_interests)
            if not suggestions:
                raise GenerationError("No valid suggestions could be generated")
            return suggestions

        return await self._make_request(operation)

    async def analyze_business_description(
        self, description: str, location: str
    ) -> dict[str, Any]:
        """Derive targeting interests for a business description.

        Returns:
            Parsed JSON object with at least a non-empty ``primaryInterests``
        """

        async def operation() -> dict[str, Any]:
            if not description or not description.strip():
                raise ValidationError("Business description is required")

            prompt = f"""Analyze this business for Meta Ads targeting in {location}:
      "{description}"

      Provide single-word interests only, no formatting. Focus on specific, targetable interests in Meta Ads.
      Return JSON with the keys "primaryInterests" and "secondaryInterests", each a list of strings."""

            content = await self._complete(
                ANALYSIS_SYSTEM_PROMPT, prompt, self.analysis_max_tokens
            )
            try:
                result = json.loads(_CODE_FENCE.sub("", (content or "{}").strip()) or "{}")
            except json.JSONDecodeError as e:
                raise GenerationError(f"Unparseable analysis response: {e}") from e

            if not isinstance(result, dict) or not result.get("primaryInterests"):
                raise GenerationError("Failed to generate meaningful analysis")
            return result

        return await self._make_request(operation)
