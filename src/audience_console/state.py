# Author: Green Mountain Systems AI Inc.
# Donated to IAB Tech Lab

"""Explicit application state shared by the search flow and the interfaces.

Each interface owns one ``AppState`` and passes it to whatever needs it.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from .errors import AuthenticationError
from .models.analysis import ChatMessage
from .models.audience import Audience, FilterSet

logger = logging.getLogger(__name__)


@dataclass
class AuthSession:
    """Authenticated connection to the ads platform."""

    access_token: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.access_token)

    def login(self, token: Optional[str]) -> None:
        """Store a bearer token.

        Raises:
            AuthenticationError: If no token was provided
        """
        if not token or not token.strip():
            raise AuthenticationError("Login was cancelled or failed. Please try again.")
        self.access_token = token.strip()
        logger.info("Ads account connected")

    def logout(self) -> None:
        self.access_token = None
        logger.info("Ads account disconnected")


@dataclass
class ChatHistory:
    """Conversation with the targeting assistant."""

    messages: list[ChatMessage] = field(default_factory=list)

    def add_message(self, role: str, content: str) -> ChatMessage:
        message = ChatMessage(role=role, content=content)
        self.messages.append(message)
        return message

    def clear(self) -> None:
        self.messages = []


@dataclass
class AppState:
    """Everything a console session reads and writes."""

    auth: AuthSession = field(default_factory=AuthSession)
    chat: ChatHistory = field(default_factory=ChatHistory)
    filters: FilterSet = field(default_factory=FilterSet)
    search_terms: list[str] = field(default_factory=list)
    results: list[Audience] = field(default_factory=list)
    selection: list[Audience] = field(default_factory=list)

    def update_filter(self, name: str, value: Optional[str]) -> FilterSet:
        """Apply a filter change event.

        Raises:
            ValidationError: If the filter or its value is invalid
        """
        self.filters = self.filters.with_change(name, value)
        return self.filters
