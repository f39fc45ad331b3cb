"""
Tests for the chat-completion client.
"""

from unittest.mock import MagicMock, AsyncMock, patch

import pytest

from src.utils.completion_client import (
    CompletionClient,
    CHANNEL_PLANNER_SYSTEM_PROMPT,
    NO_RESPONSE,
    get_channel_planner_prompt,
    get_completion_client,
    reset_completion_client,
)
from src.utils.exceptions import UpstreamUnavailable


def make_response(content, finish_reason="stop"):
    response = MagicMock()
    response.choices = [MagicMock()]
    response.choices[0].message.content = content
    response.choices[0].finish_reason = finish_reason
    return response


class TestCompletionClientConfig:
    """Tests for client configuration."""

    def test_explicit_arguments(self):
        client = CompletionClient(api_key="key", model="some-model", base_url="https://example.test/v1")
        assert client.api_key == "key"
        assert client.model == "some-model"
        assert client.base_url == "https://example.test/v1"

    def test_defaults_from_config(self):
        with patch('src.utils.completion_client.OPENROUTER_API_KEY', 'env-key'), \
             patch('src.utils.completion_client.OPENROUTER_MODEL', 'gpt-4o-mini'):
            client = CompletionClient()
            assert client.api_key == 'env-key'
            assert client.model == 'gpt-4o-mini'

    def test_is_configured(self):
        assert CompletionClient(api_key="key", model="m").is_configured()
        with patch('src.utils.completion_client.OPENROUTER_API_KEY', None):
            assert not CompletionClient(model="m").is_configured()

    def test_client_is_none_when_not_configured(self):
        with patch('src.utils.completion_client.OPENROUTER_API_KEY', None):
            assert CompletionClient().client is None

    def test_client_disables_sdk_retries(self):
        with patch('src.utils.completion_client.OpenAI') as mock_openai:
            client = CompletionClient(api_key="key", model="m", base_url="https://example.test/v1")
            assert client.client is mock_openai.return_value
            mock_openai.assert_called_once_with(
                api_key="key", base_url="https://example.test/v1", max_retries=0
            )

    def test_build_messages(self):
        client = CompletionClient(api_key="key", model="m")
        assert client.build_messages("make a channel", "be brief") == [
            {"role": "system", "content": "be brief"},
            {"role": "user", "content": "make a channel"},
        ]

    def test_planner_prompt_override(self):
        with patch('src.utils.completion_client.get_prompt_template', return_value=""):
            assert get_channel_planner_prompt() == CHANNEL_PLANNER_SYSTEM_PROMPT
        with patch('src.utils.completion_client.get_prompt_template', return_value="custom"):
            assert get_channel_planner_prompt() == "custom"


class TestComplete:
    """Tests for CompletionClient.complete."""

    @pytest.fixture
    def client(self):
        client = CompletionClient(api_key="key", model="test-model", retry_delay=0)
        client._client = MagicMock()
        return client

    @pytest.mark.asyncio
    async def test_returns_content(self, client):
        client._client.chat.completions.create.return_value = make_response('[{"name": "general"}]')

        assert await client.complete("one channel") == '[{"name": "general"}]'

    @pytest.mark.asyncio
    async def test_request_shape(self, client):
        client._client.chat.completions.create.return_value = make_response("[]")

        await client.complete("one channel")

        kwargs = client._client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "test-model"
        assert kwargs["messages"][0]["role"] == "system"
        assert kwargs["messages"][1] == {"role": "user", "content": "one channel"}
        assert kwargs["temperature"] == 0.2
        assert kwargs["max_tokens"] == 800

    @pytest.mark.asyncio
    async def test_custom_system_prompt(self, client):
        client._client.chat.completions.create.return_value = make_response("hello")

        await client.complete("hi", system_prompt="chat nicely")

        messages = client._client.chat.completions.create.call_args.kwargs["messages"]
        assert messages[0]["content"] == "chat nicely"

    @pytest.mark.asyncio
    async def test_empty_content_returns_sentinel(self, client):
        client._client.chat.completions.create.return_value = make_response(None)

        assert await client.complete("hi") == NO_RESPONSE

    @pytest.mark.asyncio
    async def test_no_choices_returns_sentinel(self, client):
        response = MagicMock()
        response.choices = []
        client._client.chat.completions.create.return_value = response

        assert await client.complete("hi") == NO_RESPONSE

    @pytest.mark.asyncio
    async def test_retries_then_succeeds(self, client):
        client._client.chat.completions.create.side_effect = [
            ConnectionError("reset"),
            RuntimeError("502 Bad Gateway"),
            make_response("[]"),
        ]

        assert await client.complete("hi") == "[]"
        assert client._client.chat.completions.create.call_count == 3

    @pytest.mark.asyncio
    async def test_raises_after_three_failures(self, client):
        last = RuntimeError("503 Service Unavailable")
        client._client.chat.completions.create.side_effect = [
            ConnectionError("a"), ConnectionError("b"), last, make_response("never")
        ]

        with pytest.raises(UpstreamUnavailable) as exc_info:
            await client.complete("hi")

        assert exc_info.value.last_error is last
        assert exc_info.value.__cause__ is last
        assert client._client.chat.completions.create.call_count == 3

    @pytest.mark.asyncio
    async def test_waits_between_attempts_only(self, client):
        client.retry_delay = 1.5
        client._client.chat.completions.create.side_effect = RuntimeError("down")

        with patch('src.utils.completion_client.asyncio.sleep', new_callable=AsyncMock) as mock_sleep:
            with pytest.raises(UpstreamUnavailable):
                await client.complete("hi")

        assert [c.args[0] for c in mock_sleep.call_args_list] == [1.5, 1.5]

    @pytest.mark.asyncio
    async def test_not_configured_raises_without_request(self):
        with patch('src.utils.completion_client.OPENROUTER_API_KEY', None):
            client = CompletionClient(model="m")
            with pytest.raises(UpstreamUnavailable):
                await client.complete("hi")


class TestSingleton:
    """Tests for the singleton accessors."""

    def test_get_and_reset(self):
        reset_completion_client()
        first = get_completion_client()
        assert get_completion_client() is first
        reset_completion_client()
        assert get_completion_client() is not first
        reset_completion_client()
