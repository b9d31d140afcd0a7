# Author: Green Mountain Systems AI Inc.
# Donated to IAB Tech Lab

"""HTTP client for the Meta Graph API interest search."""

import json
import logging
from typing import Any, Optional

import httpx

from ..errors import UpstreamError, ValidationError
from ..estimation.modifiers import FilterInput, filter_value, parse_age_range

logger = logging.getLogger(__name__)

SEARCH_FIELDS = [
    "id",
    "name",
    "path",
    "topic",
    "audience_size_lower_bound",
    "audience_size_upper_bound",
    "description",
    "delivery_status",
    "targeting",
    "demographic_distribution",
    "behavior_distribution",
]

DETAIL_FIELDS = [
    "id",
    "name",
    "audience_size",
    "path",
    "description",
    "topic",
    "related_interests{id,name,audience_size,path}",
    "audience_distribution",
    "demographic_stats",
    "behavior_stats",
]

# objective -> (optimization_goal, platform objective)
OBJECTIVE_GOALS: dict[str, tuple[str, str]] = {
    "AWARENESS": ("REACH", "BRAND_AWARENESS"),
    "CONVERSIONS": ("OFFSITE_CONVERSIONS", "CONVERSIONS"),
    "TRAFFIC": ("LINK_CLICKS", "TRAFFIC"),
    "ENGAGEMENT": ("POST_ENGAGEMENT", "ENGAGEMENT"),
    "APP_PROMOTION": ("APP_INSTALLS", "APP_PROMOTION"),
    "LEAD_GENERATION": ("LEAD_GENERATION", "LEAD_GENERATION"),
}

PLACEMENT_POSITIONS: dict[str, list[str]] = {
    "facebook": ["feed", "right_hand_column", "instant_article", "marketplace"],
    "instagram": ["stream", "story", "explore", "reels"],
    "messenger": ["messenger_home", "sponsored_messages"],
    "whatsapp": ["status"],
}

GENDER_CODES = {"female": 1, "male": 2}


def build_targeting_spec(filters: FilterInput, country: str = "ID") -> dict[str, Any]:
    """Compose the targeting spec sent along with a search.

    Args:
        filters: Active campaign filters
        country: Country every search is geo-targeted to

    Returns:
        Targeting spec with empty position lists removed
    """
    spec: dict[str, Any] = {
        "geo_locations": {"countries": [country]},
        "publisher_platforms": [],
        "facebook_positions": [],
        "instagram_positions": [],
        "messenger_positions": [],
        "whatsapp_positions": [],
    }

    gender = filter_value(filters, "gender")
    if gender and gender != "all":
        spec["genders"] = [GENDER_CODES.get(gender, 2)]

    age_range = parse_age_range(filter_value(filters, "age"))
    if age_range:
        spec["age_min"], spec["age_max"] = age_range

    objective = filter_value(filters, "objective")
    if objective and objective.upper() in OBJECTIVE_GOALS:
        spec["optimization_goal"], spec["objective"] = OBJECTIVE_GOALS[objective.upper()]

    placement = filter_value(filters, "placement")
    if placement:
        if placement in PLACEMENT_POSITIONS:
            spec["publisher_platforms"].append(placement)
            spec[f"{placement}_positions"] = list(PLACEMENT_POSITIONS[placement])
        else:
            # automatic, or anything unrecognized, runs on every platform
            spec["publisher_platforms"] = list(PLACEMENT_POSITIONS)
            for platform, positions in PLACEMENT_POSITIONS.items():
                spec[f"{platform}_positions"] = list(positions)

    return {
        key: value
        for key, value in spec.items()
        if not (isinstance(value, list) and not value)
    }


class MetaAdsClient:
    """Async HTTP client for Meta Graph API interest search and details."""

    def __init__(
        self,
        base_url: str = "https://graph.facebook.com/v18.0",
        access_token: Optional[str] = None,
        country: str = "ID",
        search_limit: int = 25,
        locale: str = "en_US",
        timeout: float = 30.0,
    ):
        """Initialize the client.

        Args:
            base_url: Graph API base URL including version
            access_token: Default bearer token, overridable per call
            country: Country code for geo targeting
            search_limit: Maximum interests per search
            locale: Locale for interest names
            timeout: Request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.access_token = access_token
        self.country = country
        self.search_limit = search_limit
        self.locale = locale
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={"Accept": "application/json"},
            timeout=timeout,
        )

    def _resolve_token(self, access_token: Optional[str]) -> str:
        token = access_token or self.access_token
        if not token:
            raise ValidationError("Please connect your Meta account first")
        return token

    async def _get_json(self, path: str, params: dict[str, Any]) -> Any:
        """GET a Graph API path and return its decoded JSON body.

        Raises:
            UpstreamError: On non-2xx status or an undecodable body
        """
        try:
            response = await self._client.get(path, params=params)
        except httpx.HTTPError as e:
            logger.error(f"Meta API request failed: {e}")
            raise UpstreamError(f"Request to Meta API failed: {e}") from e

        try:
            data = response.json()
        except (json.JSONDecodeError, ValueError):
            data = None

        if response.status_code < 200 or response.status_code >= 300:
            logger.error(f"Meta API Error: {response.status_code} - {data}")
            message = None
            if isinstance(data, dict) and isinstance(data.get("error"), dict):
                message = data["error"].get("message")
            raise UpstreamError(
                message or f"API Error: {response.status_code}",
                status_code=response.status_code,
            )

        if data is None:
            logger.error(f"Meta API returned an undecodable body for {path}")
            raise UpstreamError(
                f"API Error: {response.status_code}", status_code=response.status_code
            )

        return data

    # -------------------------------------------------------------------------
    # Interests
    # -------------------------------------------------------------------------

    async def search_interests(
        self,
        query: str,
        filters: FilterInput = None,
        access_token: Optional[str] = None,
    ) -> list[dict[str, Any]]:
        """Search targetable interests.

        Args:
            query: Search term
            filters: Campaign filters used to compose the targeting spec
            access_token: Token for this call, defaults to the client's

        Returns:
            Raw interest records (empty when the body has no data list)

        Raises:
            ValidationError: Empty query or no token, before any request
            UpstreamError: On API failure
        """
        if not query or not query.strip():
            raise ValidationError("Search query cannot be empty")
        token = self._resolve_token(access_token)

        params = {
            "type": "adinterest",
            "q": query.strip(),
            "limit": self.search_limit,
            "locale": self.locale,
            "fields": ",".join(SEARCH_FIELDS),
            "targeting_spec": json.dumps(build_targeting_spec(filters, self.country)),
            "access_token": token,
        }
        data = await self._get_json("/search", params)

        records = data.get("data") if isinstance(data, dict) else None
        if not isinstance(records, list):
            logger.warning(f"Empty or invalid search response for {query!r}: {data}")
            return []
        return records

    async def get_interest_details(
        self,
        interest_id: str,
        access_token: Optional[str] = None,
    ) -> dict[str, Any]:
        """Get the raw detail record for one interest.

        Args:
            interest_id: Interest ID
            access_token: Token for this call, defaults to the client's

        Returns:
            Raw detail record
        """
        if not interest_id or not str(interest_id).strip():
            raise ValidationError("Interest ID cannot be empty")
        token = self._resolve_token(access_token)

        params = {"fields": ",".join(DETAIL_FIELDS), "access_token": token}
        data = await self._get_json(f"/{interest_id}", params)
        if not isinstance(data, dict):
            raise UpstreamError("Malformed interest details response")
        return data

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> "MetaAdsClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Async context manager exit."""
        await self.close()
