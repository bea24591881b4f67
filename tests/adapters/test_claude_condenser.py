"""Tests for the Anthropic condenser."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import MagicMock

import anthropic
import pytest

from procsync.adapters.llm import AnthropicCondenser
from procsync.core.exceptions import CondensationError
from procsync.core.ports.config_provider import CondenserConfig


def make_response(*blocks: SimpleNamespace) -> SimpleNamespace:
    return SimpleNamespace(content=list(blocks))


def text_block(text: str) -> SimpleNamespace:
    return SimpleNamespace(type="text", text=text)


@pytest.fixture
def client() -> MagicMock:
    return MagicMock()


@pytest.fixture
def condenser(client: MagicMock) -> AnthropicCondenser:
    return AnthropicCondenser(CondenserConfig(api_key="sk-test", model="claude-test"), client=client)


class TestAnthropicCondenser:
    def test_returns_text(self, condenser, client):
        client.messages.create.return_value = make_response(text_block("  Short version. "))

        assert condenser.condense("Long version " * 100, 500, "Keep facts.") == "Short version."

    def test_request_shape(self, condenser, client):
        client.messages.create.return_value = make_response(text_block("ok"))

        condenser.condense("Document body", 900, "Keep facts.")

        kwargs = client.messages.create.call_args.kwargs
        assert kwargs["model"] == "claude-test"
        assert kwargs["max_tokens"] == 16_000
        prompt = kwargs["messages"][0]["content"]
        assert kwargs["messages"][0]["role"] == "user"
        assert "Keep facts." in prompt
        assert "at most 900 characters" in prompt
        assert "Document body" in prompt

    def test_joins_text_blocks_only(self, condenser, client):
        client.messages.create.return_value = make_response(
            text_block("Part one. "),
            SimpleNamespace(type="thinking", thinking="..."),
            text_block("Part two."),
        )

        assert condenser.condense("x", 100, "i") == "Part one. Part two."

    def test_empty_result_raises(self, condenser, client):
        client.messages.create.return_value = make_response(text_block("   "))

        with pytest.raises(CondensationError):
            condenser.condense("x", 100, "i")

    def test_api_error_raises_condensation_error(self, condenser, client):
        client.messages.create.side_effect = anthropic.APIError("overloaded", request=MagicMock(), body=None)

        with pytest.raises(CondensationError) as exc_info:
            condenser.condense("x", 100, "i")

        assert isinstance(exc_info.value.cause, anthropic.APIError)

    def test_name(self, condenser):
        assert condenser.name == "Anthropic"


class TestCondenserConfig:
    def test_enabled_only_with_key(self):
        assert CondenserConfig(api_key="sk").enabled
        assert not CondenserConfig().enabled
