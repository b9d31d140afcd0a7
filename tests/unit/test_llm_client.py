# Author: Green Mountain Systems AI Inc.
# Donated to IAB Tech Lab

"""Tests for the text generation client."""

from unittest.mock import MagicMock, patch

import pytest

from audience_console.clients.llm_client import (
    FALLBACK_RESPONSE,
    TextGenerationClient,
    extract_bracketed_interests,
    parse_suggestions,
)
from audience_console.errors import GenerationError, ValidationError


def _llm(reply=None, error=None) -> MagicMock:
    llm = MagicMock()
    if error is not None:
        llm.call.side_effect = error
    else:
        llm.call.return_value = reply
    return llm


class TestHelpers:
    """Tests for reply parsing helpers."""

    def test_extract_bracketed_interests(self):
        text = "Try [Coffee] and [Specialty coffee], maybe [Tea]."
        assert extract_bracketed_interests(text) == ["Coffee", "Specialty coffee", "Tea"]
        assert extract_bracketed_interests("") == []

    def test_parse_suggestions(self):
        content = " Espresso, Coffee ,Latte,, Espresso, Barista, Cafe, Beans, Mocha"
        assert parse_suggestions(content, ["Coffee"]) == [
            "Espresso",
            "Latte",
            "Barista",
            "Cafe",
            "Beans",
        ]

    def test_parse_suggestions_empty(self):
        assert parse_suggestions(None, []) == []
        assert parse_suggestions("Coffee", ["Coffee"]) == []


class TestTextGenerationClient:
    """Tests for TextGenerationClient."""

    @pytest.fixture
    def client(self):
        return TextGenerationClient(model="anthropic/test-model", api_key="test_key")

    def test_create_llm_uses_budget(self, client):
        with patch("audience_console.clients.llm_client.LLM") as mock_llm:
            client._create_llm(100)

        mock_llm.assert_called_once_with(
            model="anthropic/test-model",
            temperature=0.7,
            max_tokens=100,
            api_key="test_key",
        )

    @pytest.mark.asyncio
    async def test_generate_response(self, client):
        llm = _llm("Target [Coffee] lovers")

        with patch.object(client, "_create_llm", return_value=llm) as create:
            response = await client.generate_response("coffee shop")

        assert response == "Target [Coffee] lovers"
        create.assert_called_once_with(500)
        messages = llm.call.call_args.args[0]
        assert messages[0]["role"] == "system"
        assert messages[1] == {"role": "user", "content": "coffee shop"}

    @pytest.mark.asyncio
    async def test_generate_response_empty_uses_fallback(self, client):
        with patch.object(client, "_create_llm", return_value=_llm("")):
            assert await client.generate_response("hi") == FALLBACK_RESPONSE

    @pytest.mark.asyncio
    async def test_provider_error_wrapped(self, client):
        with patch.object(client, "_create_llm", return_value=_llm(error=RuntimeError("rate limited"))):
            with pytest.raises(GenerationError, match="LLM API Error: rate limited"):
                await client.generate_response("hi")

    @pytest.mark.asyncio
    async def test_generate_suggestions(self, client):
        with patch.object(client, "_create_llm", return_value=_llm("Espresso, Latte, Coffee")) as create:
            suggestions = await client.generate_suggestions(["Coffee"])

        assert suggestions == ["Espresso", "Latte"]
        create.assert_called_once_with(100)

    @pytest.mark.asyncio
    async def test_generate_suggestions_requires_input(self, client):
        with patch.object(client, "_create_llm") as create:
            with pytest.raises(ValidationError):
                await client.generate_suggestions([])
        create.assert_not_called()

    @pytest.mark.asyncio
    async def test_generate_suggestions_none_usable(self, client):
        with patch.object(client, "_create_llm", return_value=_llm("Coffee")):
            with pytest.raises(GenerationError, match="No valid suggestions"):
                await client.generate_suggestions(["Coffee"])

    @pytest.mark.asyncio
    async def test_analyze_business_description(self, client):
        reply = '```json\n{"primaryInterests": ["Coffee"], "secondaryInterests": ["Tea"]}\n```'

        with patch.object(client, "_create_llm", return_value=_llm(reply)) as create:
            result = await client.analyze_business_description("Coffee shop", "ID")

        assert result == {"primaryInterests": ["Coffee"], "secondaryInterests": ["Tea"]}
        create.assert_called_once_with(1000)

    @pytest.mark.asyncio
    async def test_analyze_business_description_without_interests(self, client):
        with patch.object(client, "_create_llm", return_value=_llm('{"primaryInterests": []}')):
            with pytest.raises(GenerationError, match="meaningful analysis"):
                await client.analyze_business_description("Coffee shop", "ID")

    @pytest.mark.asyncio
    async def test_analyze_business_description_unparseable(self, client):
        with patch.object(client, "_create_llm", return_value=_llm("Coffee, Tea")):
            with pytest.raises(GenerationError):
                await client.analyze_business_description("Coffee shop", "ID")

    @pytest.mark.asyncio
    async def test_analyze_business_description_requires_text(self, client):
        with pytest.raises(ValidationError):
            await client.analyze_business_description("  ", "ID")
