"""Unit tests for the LiteLLM client."""

import pytest
from types import SimpleNamespace
from unittest.mock import patch

from src.agent.llm_config import LLMClient, LLMSettings


def make_settings(**overrides):
    values = dict(
        llm_provider="azure",
        llm_model="gpt-4o",
        llm_api_key=None,
        azure_api_key="azure-key",
        openai_api_key=None,
        anthropic_api_key=None,
        llm_base_url="https://example.openai.azure.com",
        llm_api_version="2024-02-01",
        _env_file=None,
    )
    values.update(overrides)
    return LLMSettings(**values)


def completion_response(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


class TestModelString:
    def test_azure_prefix(self):
        assert LLMClient(make_settings()).model == "azure/gpt-4o"

    def test_openai_unprefixed(self):
        client = LLMClient(make_settings(llm_provider="openai", llm_model="gpt-4o-mini"))

        assert client.model == "gpt-4o-mini"


class TestApiKey:
    def test_provider_key_preferred(self):
        client = LLMClient(make_settings(llm_api_key="generic"))

        assert client.api_key == "azure-key"
        assert client.is_configured

    def test_generic_key_fallback(self):
        client = LLMClient(make_settings(azure_api_key=None, llm_api_key="generic"))

        assert client.api_key == "generic"

    def test_not_configured(self):
        client = LLMClient(make_settings(azure_api_key=None))

        assert not client.is_configured


class TestCompletion:
    def test_defaults(self):
        settings = LLMSettings(_env_file=None)

        assert settings.llm_temperature == 0.1
        assert settings.llm_max_tokens == 1024

    @patch('src.agent.llm_config.completion')
    def test_complete_text_params(self, mock_completion):
        mock_completion.return_value = completion_response("26 days.")
        client = LLMClient(make_settings())

        answer = client.complete_text([{"role": "user", "content": "holidays?"}])

        assert answer == "26 days."
        kwargs = mock_completion.call_args.kwargs
        assert kwargs["model"] == "azure/gpt-4o"
        assert kwargs["temperature"] == 0.1
        assert kwargs["api_key"] == "azure-key"
        assert kwargs["api_base"] == "https://example.openai.azure.com"
        assert kwargs["api_version"] == "2024-02-01"

    @patch('src.agent.llm_config.completion')
    def test_empty_content(self, mock_completion):
        mock_completion.return_value = completion_response(None)

        assert LLMClient(make_settings()).complete_text([]) == ""

    @patch('src.agent.llm_config.completion')
    def test_overrides(self, mock_completion):
        mock_completion.return_value = completion_response("ok")

        LLMClient(make_settings()).complete([], temperature=0.7, max_tokens=50)

        kwargs = mock_completion.call_args.kwargs
        assert kwargs["temperature"] == 0.7
        assert kwargs["max_tokens"] == 50


class TestTokenCount:
    @patch('src.agent.llm_config.litellm.token_counter', side_effect=Exception("unknown model"))
    def test_fallback_estimate(self, _):
        client = LLMClient(make_settings())

        assert client.count_tokens([{"role": "user", "content": "x" * 40}]) == 10
