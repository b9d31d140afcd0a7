# Author: Green Mountain Systems AI Inc.
# Donated to IAB Tech Lab

"""Search flow - from user query to ranked audiences and assistant analysis.

Flow steps:
1. Validate connection and search terms
2. Search every term concurrently through the Meta client
3. Transform raw records and apply the objective filter
4. Drop duplicates and stale responses, then publish results
5. Aggregate the selection and ask the assistant for analysis on demand
"""

import asyncio
import logging
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field

from ..analysis.aggregator import summarize_selection
from ..analysis.rationale import analyze_business_type, build_analysis_prompt
from ..analysis.results import toggle_selection
from ..clients.llm_client import TextGenerationClient, extract_bracketed_interests
from ..clients.meta_client import MetaAdsClient
from ..errors import (
    AudienceConsoleError,
    EmptyResultError,
    GenerationError,
    UpstreamError,
    ValidationError,
)
from ..estimation.modifiers import filter_value
from ..estimation.objective_filter import filter_by_objective
from ..estimation.transformer import transform_audience
from ..models.analysis import AnalysisResult, SelectionSummary
from ..models.audience import Audience, FilterSet
from ..state import AppState
from .debounce import Debouncer, RequestSequencer

logger = logging.getLogger(__name__)

MAX_LIVE_SUGGESTIONS = 10
SEARCH_FAILED_MESSAGE = "Search failed. Please try again or use different search terms."
ANALYSIS_FALLBACK = (
    "I apologize, but I encountered an error while analyzing the interests. "
    "Please try again."
)


class SearchStatus(str, Enum):
    """Status of a search run."""

    COMPLETED = "completed"
    EMPTY = "empty"
    INVALID = "invalid"
    FAILED = "failed"
    STALE = "stale"


class SearchOutcome(BaseModel):
    """User-visible result of a search."""

    terms: list[str] = Field(default_factory=list)
    audiences: list[Audience] = Field(default_factory=list)
    status: SearchStatus = SearchStatus.COMPLETED
    message: Optional[str] = None
    error: Optional[str] = None
    ticket: int = 0


class AssistantReply(BaseModel):
    """Result of an assistant call, never raised to the caller."""

    content: Optional[str] = None
    interests: list[str] = Field(default_factory=list)
    error: Optional[str] = None


class SearchFlow:
    """Orchestrates searches, suggestions and selection analysis.

    State lives in the ``AppState`` passed in; the flow never keeps its own
    copy of results or credentials.
    """

    def __init__(
        self,
        meta_client: MetaAdsClient,
        llm_client: Optional[TextGenerationClient] = None,
        state: Optional[AppState] = None,
        country: str = "ID",
        suggestion_wait: float = 0.3,
        search_wait: float = 0.5,
        sleep: Any = asyncio.sleep,
    ):
        """Initialize the flow.

        Args:
            meta_client: Interest search client
            llm_client: Text generation client for assistant features
            state: Session state, a fresh one when omitted
            country: Country code attached to audience targeting
            suggestion_wait: Quiet period before live suggestions fire
            search_wait: Quiet period before a full search fires
            sleep: Sleep coroutine handed to the debouncers
        """
        self._meta = meta_client
        self._llm = llm_client
        self.state = state or AppState()
        self.country = country
        self._search_sequence = RequestSequencer("search")
        self._suggestion_sequence = RequestSequencer("suggestion")
        self.search_debouncer = Debouncer(self.search, search_wait, sleep=sleep)
        self.suggestion_debouncer = Debouncer(self.live_suggestions, suggestion_wait, sleep=sleep)

    # -------------------------------------------------------------------------
    # Search
    # -------------------------------------------------------------------------

    def _require_connection(self) -> str:
        if not self.state.auth.is_authenticated:
            raise ValidationError("Please connect your Meta account first")
        return self.state.auth.access_token

    @staticmethod
    def validate_terms(terms: Optional[list[str]]) -> list[str]:
        """Strip and de-duplicate search terms.

        Raises:
            ValidationError: If no usable term remains
        """
        cleaned: list[str] = []
        for term in terms or []:
            term = (term or "").strip()
            if term and term not in cleaned:
                cleaned.append(term)
        if not cleaned:
            raise ValidationError("Please enter at least one search term")
        return cleaned

    async def fetch_audiences(
        self,
        query: str,
        filters: FilterSet,
        access_token: Optional[str] = None,
    ) -> list[Audience]:
        """Search one term and return filtered, normalized audiences."""
        records = await self._meta.search_interests(query, filters, access_token=access_token)
        audiences = [transform_audience(record, filters, self.country) for record in records]

        objective = filter_value(filters, "objective")
        if objective:
            audiences = filter_by_objective(audiences, objective)
        return audiences

    async def search(
        self,
        terms: Optional[list[str]] = None,
        filters: Optional[FilterSet] = None,
    ) -> SearchOutcome:
        """Run a full search over every term.

        Args:
            terms: Search terms, defaults to the session's terms
            filters: Filters, defaults to the session's filters

        Returns:
            SearchOutcome; stale outcomes leave session results untouched
        """
        filters = filters or self.state.filters
        try:
            token = self._require_connection()
            terms = self.validate_terms(terms if terms is not None else self.state.search_terms)
        except ValidationError as e:
            return SearchOutcome(terms=terms or [], status=SearchStatus.INVALID, error=str(e))

        ticket = self._search_sequence.next_ticket()
        logger.info(f"Search #{ticket} for {terms}")

        try:
            batches = await self._fetch_all(terms, filters, token)
        except (UpstreamError, ValidationError) as e:
            if not self._search_sequence.is_current(ticket):
                return SearchOutcome(terms=terms, status=SearchStatus.STALE, ticket=ticket)
            logger.error(f"Search #{ticket} failed: {e}")
            return self._failed(
                terms, ticket, f"{e}. Please try again or use different search terms."
            )
        except Exception:
            if not self._search_sequence.is_current(ticket):
                return SearchOutcome(terms=terms, status=SearchStatus.STALE, ticket=ticket)
            logger.exception(f"Search #{ticket} failed unexpectedly")
            return self._failed(terms, ticket, SEARCH_FAILED_MESSAGE)

        if not self._search_sequence.is_current(ticket):
            return SearchOutcome(terms=terms, status=SearchStatus.STALE, ticket=ticket)

        audiences = self._unique(a for batch in batches for a in batch)
        self.state.search_terms = terms
        self.state.results = audiences

        if not audiences:
            return SearchOutcome(
                terms=terms,
                status=SearchStatus.EMPTY,
                message=EmptyResultError(terms).guidance,
                ticket=ticket,
            )
        return SearchOutcome(terms=terms, audiences=audiences, ticket=ticket)

    async def _fetch_all(
        self, terms: list[str], filters: FilterSet, token: str
    ) -> list[list[Audience]]:
        """Fetch every term concurrently; one failure cancels the rest."""
        tasks = [
            asyncio.ensure_future(self.fetch_audiences(term, filters, access_token=token))
            for term in terms
        ]
        try:
            return await asyncio.gather(*tasks)
        finally:
            for task in tasks:
                if not task.done():
                    task.cancel()

    def _failed(self, terms: list[str], ticket: int, error: str) -> SearchOutcome:
        self.state.results = []
        return SearchOutcome(terms=terms, status=SearchStatus.FAILED, error=error, ticket=ticket)

    @staticmethod
    def _unique(audiences: Any) -> list[Audience]:
        seen: set[str] = set()
        unique: list[Audience] = []
        for audience in audiences:
            key = audience.model_dump_json()
            if key not in seen:
                seen.add(key)
                unique.append(audience)
        return unique

    def schedule_search(self) -> asyncio.Task:
        """Debounce a search with the session's current terms and filters."""
        return self.search_debouncer.schedule(list(self.state.search_terms), self.state.filters)

    def add_term(self, term: str) -> Optional[asyncio.Task]:
        """Add a search term and schedule a search."""
        term = (term or "").strip()
        if not term or term in self.state.search_terms:
            return None
        self.state.search_terms = [*self.state.search_terms, term]
        return self.schedule_search()

    def remove_term(self, term: str) -> Optional[asyncio.Task]:
        """Remove a search term; clearing the last one clears the results."""
        self.state.search_terms = [t for t in self.state.search_terms if t != term]
        if self.state.search_terms:
            return self.schedule_search()
        self.search_debouncer.cancel()
        self.state.results = []
        return None

    def update_filter(self, name: str, value: Optional[str]) -> Optional[asyncio.Task]:
        """Apply a filter change and re-run the current search."""
        self.state.update_filter(name, value)
        if self.state.search_terms:
            return self.schedule_search()
        return None

    # -------------------------------------------------------------------------
    # Live suggestions
    # -------------------------------------------------------------------------

    async def live_suggestions(self, query: str) -> list[str]:
        """Interest names matching partial input, at most ten.

        Failures are logged and produce no suggestions.
        """
        if not query or not query.strip() or not self.state.auth.is_authenticated:
            return []

        ticket = self._suggestion_sequence.next_ticket()
        try:
            audiences = await self.fetch_audiences(
                query, self.state.filters, access_token=self.state.auth.access_token
            )
        except AudienceConsoleError as e:
            logger.error(f"Failed to fetch suggestions: {e}")
            return []
        except Exception:
            logger.exception(f"Failed to fetch suggestions for {query!r}")
            return []

        if not self._suggestion_sequence.is_current(ticket):
            return []

        names: list[str] = []
        for audience in audiences:
            if audience.name not in names:
                names.append(audience.name)
        return names[:MAX_LIVE_SUGGESTIONS]

    def schedule_suggestions(self, query: str) -> Optional[asyncio.Task]:
        """Debounce live suggestions for partial input."""
        if not query or not query.strip():
            self.suggestion_debouncer.cancel()
            return None
        return self.suggestion_debouncer.schedule(query)

    # -------------------------------------------------------------------------
    # Selection
    # -------------------------------------------------------------------------

    def toggle_selection(self, audience: Audience) -> list[Audience]:
        """Select or deselect a result row."""
        self.state.selection = toggle_selection(self.state.selection, audience)
        return self.state.selection

    def selection_summary(self) -> SelectionSummary:
        return summarize_selection(self.state.selection)

    def analyze_selection(self, description: str = "") -> AnalysisResult:
        """Deterministic analysis of the selected audiences."""
        return analyze_business_type(description, self.state.selection)

    # -------------------------------------------------------------------------
    # Assistant
    # -------------------------------------------------------------------------

    def _require_llm(self) -> TextGenerationClient:
        if self._llm is None:
            raise GenerationError("Text generation is not configured")
        return self._llm

    async def chat(self, message: str) -> AssistantReply:
        """Send a chat message and pick ``[interest]`` tokens from the reply."""
        message = (message or "").strip()
        if not message:
            return AssistantReply(error="Please enter a message")

        self.state.chat.add_message("user", message)
        try:
            response = await self._require_llm().generate_response(message)
        except GenerationError as e:
            logger.error(f"AI chat error: {e}")
            return AssistantReply(error=str(e))

        self.state.chat.add_message("assistant", response)
        return AssistantReply(content=response, interests=extract_bracketed_interests(response))

    async def analyze_selection_with_assistant(self) -> AssistantReply:
        """Ask the assistant to analyze the selected interests."""
        selection = self.state.selection
        if not selection:
            return AssistantReply(error="Select at least one interest to analyze")

        self.state.chat.add_message(
            "user", f"Please analyze these interests: {', '.join(a.name for a in selection)}"
        )
        try:
            response = await self._require_llm().generate_response(
                build_analysis_prompt(selection)
            )
        except GenerationError as e:
            logger.error(f"AI analysis error: {e}")
            self.state.chat.add_message("assistant", ANALYSIS_FALLBACK)
            return AssistantReply(
                content=ANALYSIS_FALLBACK,
                error="Failed to generate analysis. Please try again.",
            )

        self.state.chat.add_message("assistant", response)
        return AssistantReply(content=response)

    async def suggest_interests(self, interests: Optional[list[str]] = None) -> AssistantReply:
        """AI suggestions for interests related to the current terms."""
        interests = interests if interests is not None else self.state.search_terms
        if not interests:
            return AssistantReply(error="Please add at least one interest first")

        try:
            suggestions = await self._require_llm().generate_suggestions(list(interests))
        except (GenerationError, ValidationError) as e:
            logger.error(f"Suggestion generation failed: {e}")
            return AssistantReply(error="Failed to generate suggestions. Please try again.")
        return AssistantReply(interests=suggestions)

    async def analyze_business(self, description: str) -> dict[str, Any]:
        """Interest analysis for a business description in the target country.

        Raises:
            ValidationError: If the description is empty
            GenerationError: If no usable analysis came back
        """
        location = filter_value(self.state.filters, "location") or self.country
        return await self._require_llm().analyze_business_description(description, location)
