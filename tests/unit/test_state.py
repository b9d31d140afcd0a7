# Author: Green Mountain Systems AI Inc.
# Donated to IAB Tech Lab

"""Tests for session state, filters and errors."""

import pytest

from audience_console.errors import AuthenticationError, EmptyResultError, ValidationError
from audience_console.models.audience import FilterSet, parse_budget
from audience_console.state import AppState, AuthSession, ChatHistory


class TestAuthSession:
    """Tests for AuthSession."""

    def test_login_logout(self):
        auth = AuthSession()
        assert not auth.is_authenticated

        auth.login(" token123 ")
        assert auth.is_authenticated
        assert auth.access_token == "token123"

        auth.logout()
        assert not auth.is_authenticated
        assert auth.access_token is None

    def test_empty_token_rejected(self):
        auth = AuthSession()
        with pytest.raises(AuthenticationError, match="Please try again"):
            auth.login("")
        with pytest.raises(AuthenticationError):
            auth.login(None)
        assert not auth.is_authenticated


class TestChatHistory:
    """Tests for ChatHistory."""

    def test_add_and_clear(self):
        chat = ChatHistory()
        chat.add_message("user", "hello")
        chat.add_message("assistant", "hi")
        assert [m.role for m in chat.messages] == ["user", "assistant"]

        chat.clear()
        assert chat.messages == []


class TestFilters:
    """Tests for FilterSet and filter changes."""

    def test_defaults(self):
        filters = FilterSet()
        assert filters.location == "ID"
        assert filters.gender == "all"
        assert filters.age == "18-24"
        assert filters.budget == "10"
        assert filters.objective == "CONVERSIONS"
        assert filters.placement == "automatic"

    def test_with_change_returns_copy(self):
        filters = FilterSet()
        changed = filters.with_change("gender", "female")
        assert changed.gender == "female"
        assert filters.gender == "all"

    def test_unknown_filter(self):
        with pytest.raises(ValidationError, match="Unknown filter"):
            FilterSet().with_change("colour", "red")

    def test_state_update_filter(self):
        state = AppState()
        state.update_filter("budget", "50")
        assert state.filters.budget_value() == 50

    @pytest.mark.parametrize("budget", ["", None, "  ", "-5", "0", "abc", "25.9"])
    def test_invalid_budget_rejected(self, budget):
        state = AppState()
        with pytest.raises(ValidationError, match="Budget"):
            state.update_filter("budget", budget)
        assert state.filters.budget == "10"

    @pytest.mark.parametrize(
        "name, value",
        [
            ("gender", "other"),
            ("gender", None),
            ("objective", "SALES"),
            ("placement", "tiktok"),
        ],
    )
    def test_enum_filters_rejected(self, name, value):
        state = AppState()
        with pytest.raises(ValidationError):
            state.update_filter(name, value)
        assert state.filters == FilterSet()

    def test_enum_filters_normalized(self):
        filters = FilterSet().with_change("objective", "awareness").with_change("gender", "Female")
        assert filters.objective == "AWARENESS"
        assert filters.gender == "female"

    def test_objective_and_placement_can_be_cleared(self):
        filters = FilterSet().with_change("objective", "").with_change("placement", None)
        assert filters.objective is None
        assert filters.placement is None

    def test_parse_budget(self):
        assert parse_budget("20") == 20
        assert parse_budget(None) == 10
        assert parse_budget("") == 10
        assert parse_budget("ten") == 10

    def test_parse_budget_takes_leading_integer(self):
        assert parse_budget("25.9") == 25
        assert parse_budget("20abc") == 20
        assert parse_budget(" 30") == 30
        assert parse_budget("$20") == 10


class TestErrors:
    """Tests for error messages."""

    def test_empty_result_guidance(self):
        error = EmptyResultError(["coffee", "tea"])
        assert error.guidance == (
            'No results found for "coffee, tea". Try:\n'
            "  • Using more general terms\n"
            "  • Checking for spelling mistakes\n"
            "  • Removing some filters\n"
            "  • Trying related terms from the suggestions below"
        )
