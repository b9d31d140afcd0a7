# Author: Green Mountain Systems AI Inc.
# Donated to IAB Tech Lab

"""FastAPI server for the Audience Console."""

from typing import Any, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from ...analysis.results import sort_audiences
from ...clients.llm_client import TextGenerationClient
from ...clients.meta_client import MetaAdsClient
from ...config.settings import configure_logging, settings
from ...errors import (
    AuthenticationError,
    GenerationError,
    UpstreamError,
    ValidationError,
)
from ...estimation.transformer import transform_audience, transform_interest_details
from ...flows.search_flow import SearchFlow, SearchOutcome, SearchStatus
from ...models.audience import FilterSet
from ...state import AppState

configure_logging()

app = FastAPI(
    title="Audience Console API",
    description="Audience research for campaign planning: interest search, reach estimates and AI analysis",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Single-user console session
session = AppState()
if settings.meta_access_token:
    session.auth.access_token = settings.meta_access_token


# Request/Response Models
class LoginRequest(BaseModel):
    """Bearer token obtained from the platform login dialog."""

    access_token: str = Field(default="", alias="accessToken")

    model_config = {"populate_by_name": True}


class FilterChange(BaseModel):
    """A single filter change event."""

    name: str
    value: Optional[str] = None


class SearchRequest(BaseModel):
    """Request to search interests."""

    terms: list[str] = Field(default_factory=list)
    sort_field: str = Field(default="size", pattern="^(size|estimated_reach)$")
    sort_direction: str = Field(default="desc", pattern="^(asc|desc)$")


class EstimateRequest(BaseModel):
    """Request to estimate reach for raw audience bounds."""

    name: str = "Interest"
    audience_size_lower_bound: Optional[int] = Field(default=None, ge=0)
    audience_size_upper_bound: Optional[int] = Field(default=None, ge=0)
    filters: Optional[FilterSet] = None


class SelectionRequest(BaseModel):
    """Toggle an audience from the current results."""

    audience_id: str


class ChatRequest(BaseModel):
    """Message for the targeting assistant."""

    message: str = Field(..., min_length=1)


class SuggestionRequest(BaseModel):
    """Interests to base suggestions on, defaults to the search terms."""

    interests: Optional[list[str]] = None


class BusinessAnalysisRequest(BaseModel):
    """Business description to derive interests from."""

    description: str = Field(..., min_length=1)


def _create_meta_client() -> MetaAdsClient:
    """Create Meta client from settings."""
    return MetaAdsClient(
        base_url=settings.meta_graph_base_url,
        access_token=settings.meta_access_token,
        country=settings.target_country,
        search_limit=settings.meta_search_limit,
        locale=settings.meta_locale,
        timeout=settings.http_timeout,
    )


def _create_llm_client() -> TextGenerationClient:
    """Create text generation client from settings."""
    return TextGenerationClient(
        model=settings.default_llm_model,
        api_key=settings.anthropic_api_key,
        temperature=settings.llm_temperature,
        response_max_tokens=settings.llm_response_max_tokens,
        suggestion_max_tokens=settings.llm_suggestion_max_tokens,
        analysis_max_tokens=settings.llm_analysis_max_tokens,
    )


def _create_flow(meta_client: MetaAdsClient) -> SearchFlow:
    return SearchFlow(
        meta_client,
        llm_client=_create_llm_client(),
        state=session,
        country=settings.target_country,
        suggestion_wait=settings.suggestion_debounce_seconds,
        search_wait=settings.search_debounce_seconds,
    )


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy", "version": "1.0.0"}


# -----------------------------------------------------------------------------
# Auth
# -----------------------------------------------------------------------------


@app.post("/auth/login")
async def login(request: LoginRequest) -> dict[str, Any]:
    """Connect the ads account with a bearer token."""
    try:
        session.auth.login(request.access_token)
    except AuthenticationError as e:
        raise HTTPException(status_code=401, detail=str(e))
    return {"authenticated": session.auth.is_authenticated}


@app.post("/auth/logout")
async def logout() -> dict[str, Any]:
    """Disconnect the ads account."""
    session.auth.logout()
    return {"authenticated": session.auth.is_authenticated}


# -----------------------------------------------------------------------------
# Filters
# -----------------------------------------------------------------------------


@app.get("/filters")
async def get_filters() -> dict[str, Any]:
    """Current campaign filters."""
    return session.filters.model_dump()


@app.patch("/filters")
async def change_filter(change: FilterChange) -> dict[str, Any]:
    """Apply a filter change."""
    try:
        session.update_filter(change.name, change.value)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return session.filters.model_dump()


# -----------------------------------------------------------------------------
# Audiences
# -----------------------------------------------------------------------------


@app.post("/audiences/search")
async def search_audiences(request: SearchRequest) -> dict[str, Any]:
    """Search interests for every term with the session filters.

    An empty result is not an error; the response carries guidance instead.
    """
    client = _create_meta_client()
    try:
        flow = _create_flow(client)
        outcome: SearchOutcome = await flow.search(request.terms or None)
    finally:
        await client.close()

    if outcome.status == SearchStatus.INVALID:
        raise HTTPException(status_code=400, detail=outcome.error)
    if outcome.status == SearchStatus.FAILED:
        raise HTTPException(status_code=502, detail=outcome.error)

    audiences = sort_audiences(
        outcome.audiences,
        request.sort_field,
        request.sort_direction,
        session.filters.budget,
    )
    return {
        "status": outcome.status.value,
        "terms": outcome.terms,
        "message": outcome.message,
        "audiences": [a.model_dump(by_alias=True) for a in audiences],
        "total": len(audiences),
    }


@app.get("/audiences/{interest_id}")
async def get_audience_details(interest_id: str) -> dict[str, Any]:
    """Detailed stats and related interests for one interest."""
    client = _create_meta_client()
    try:
        raw = await client.get_interest_details(
            interest_id, access_token=session.auth.access_token
        )
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except UpstreamError as e:
        raise HTTPException(status_code=502, detail=str(e))
    finally:
        await client.close()

    return transform_interest_details(raw).model_dump(by_alias=True)


@app.post("/audiences/estimate")
async def estimate_audience(request: EstimateRequest) -> dict[str, Any]:
    """Estimate adjusted size and reach for raw audience bounds."""
    raw = {
        "id": request.name,
        "name": request.name,
        "audience_size_lower_bound": request.audience_size_lower_bound,
        "audience_size_upper_bound": request.audience_size_upper_bound,
    }
    audience = transform_audience(
        raw, request.filters or session.filters, settings.target_country
    )
    return audience.model_dump(by_alias=True)


# -----------------------------------------------------------------------------
# Selection
# -----------------------------------------------------------------------------


@app.post("/selection/toggle")
async def toggle_selection(request: SelectionRequest) -> dict[str, Any]:
    """Select or deselect an audience from the current results."""
    audience = next((a for a in session.results if a.id == request.audience_id), None)
    if audience is None:
        raise HTTPException(status_code=404, detail="Audience not in current results")

    client = _create_meta_client()
    try:
        flow = _create_flow(client)
        selection = flow.toggle_selection(audience)
        summary = flow.selection_summary()
    finally:
        await client.close()

    return {
        "selected": [a.id for a in selection],
        "summary": summary.model_dump(by_alias=True),
    }


@app.get("/selection/analysis")
async def selection_analysis(description: str = "") -> dict[str, Any]:
    """Aggregated analysis of the selected audiences."""
    client = _create_meta_client()
    try:
        flow = _create_flow(client)
        analysis = flow.analyze_selection(description)
    finally:
        await client.close()
    return analysis.model_dump(by_alias=True)


# -----------------------------------------------------------------------------
# Assistant
# -----------------------------------------------------------------------------


@app.post("/assistant/chat")
async def assistant_chat(request: ChatRequest) -> dict[str, Any]:
    """Chat with the targeting assistant."""
    client = _create_meta_client()
    try:
        reply = await _create_flow(client).chat(request.message)
    finally:
        await client.close()
    if reply.error and reply.content is None:
        raise HTTPException(status_code=503, detail=reply.error)
    return reply.model_dump()


@app.post("/assistant/analyze-selection")
async def assistant_analyze_selection() -> dict[str, Any]:
    """Ask the assistant to analyze the selected interests.

    Generation failures still return the fallback assistant message along with
    the error banner text.
    """
    client = _create_meta_client()
    try:
        reply = await _create_flow(client).analyze_selection_with_assistant()
    finally:
        await client.close()
    return reply.model_dump()


@app.post("/assistant/suggestions")
async def assistant_suggestions(request: SuggestionRequest) -> dict[str, Any]:
    """AI interest suggestions."""
    client = _create_meta_client()
    try:
        reply = await _create_flow(client).suggest_interests(request.interests)
    finally:
        await client.close()
    if reply.error:
        raise HTTPException(status_code=503, detail=reply.error)
    return {"suggestions": reply.interests}


@app.post("/assistant/business-analysis")
async def assistant_business_analysis(request: BusinessAnalysisRequest) -> dict[str, Any]:
    """Derive targeting interests from a business description."""
    client = _create_meta_client()
    try:
        return await _create_flow(client).analyze_business(request.description)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except GenerationError as e:
        raise HTTPException(status_code=503, detail=str(e))
    finally:
        await client.close()


@app.get("/assistant/messages")
async def assistant_messages() -> dict[str, Any]:
    """Conversation history."""
    return {"messages": [m.model_dump() for m in session.chat.messages]}


@app.delete("/assistant/messages")
async def clear_assistant_messages() -> dict[str, Any]:
    """Clear the conversation."""
    session.chat.clear()
    return {"messages": []}


def run_server(host: str = "0.0.0.0", port: int = 8000) -> None:
    """Run the API server."""
    import uvicorn

    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    run_server()
