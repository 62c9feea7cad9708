"""Tests for the Groq provider (SDK client mocked)."""

import json
from types import SimpleNamespace
from unittest.mock import MagicMock

import groq
import httpx
import pytest

from aide.capabilities import CalculatorCapability
from aide.core.exceptions import ConfigurationError, LLMError
from aide.llm import GroqProvider, LLMProvider, LLMRequest
from aide.memory.conversation import Message, ToolCall

GROQ_URL = "https://api.groq.com/openai/v1/chat/completions"


def completion(content=None, tool_calls=None, finish_reason="stop", usage=None):
    """Build an object shaped like a chat-completions response."""
    return SimpleNamespace(
        choices=[
            SimpleNamespace(
                message=SimpleNamespace(content=content, tool_calls=tool_calls),
                finish_reason=finish_reason,
            )
        ],
        usage=usage,
        model="llama-3.3-70b-versatile",
    )


def function_call(call_id, name, arguments):
    return SimpleNamespace(
        id=call_id,
        type="function",
        function=SimpleNamespace(name=name, arguments=arguments),
    )


@pytest.fixture
def mock_client():
    return MagicMock()


@pytest.fixture
def provider(mock_client):
    return GroqProvider(client=mock_client, model="test-model")


class TestConstruction:
    """Tests for provider setup."""

    def test_missing_api_key(self):
        with pytest.raises(ConfigurationError):
            GroqProvider()

    def test_blank_api_key(self):
        with pytest.raises(ConfigurationError):
            GroqProvider(api_key="   ")

    def test_model_defaults_to_settings(self, monkeypatch, mock_client):
        from aide.core.config import get_settings

        monkeypatch.setenv("LLM_MODEL", "custom-model")
        get_settings.cache_clear()

        assert GroqProvider(client=mock_client).model == "custom-model"

    def test_satisfies_provider_protocol(self, provider):
        assert isinstance(provider, LLMProvider)
        assert provider.name == "Groq"


class TestSend:
    """Tests for request building and response parsing."""

    def test_text_response(self, provider, mock_client):
        mock_client.chat.completions.create.return_value = completion(
            content="Hello, World!",
            usage=SimpleNamespace(total_tokens=12, prompt_tokens=8, completion_tokens=4),
        )

        response = provider.send(LLMRequest(session_id="s1", messages=(Message.user("Hi"),)))

        assert response.text == "Hello, World!"
        assert response.tool_calls == ()
        assert response.token_count == 12
        assert response.model == "llama-3.3-70b-versatile"
        assert response.stop_reason == "stop"

    def test_request_parameters(self, provider, mock_client):
        mock_client.chat.completions.create.return_value = completion(content="ok")
        request = LLMRequest(
            session_id="s1",
            messages=(Message.user("Hi"),),
            tools=[CalculatorCapability().to_tool_definition()],
            system_prompt="Be brief.",
            temperature=0.3,
            max_tokens=100,
        )

        provider.send(request)

        kwargs = mock_client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "test-model"
        assert kwargs["temperature"] == 0.3
        assert kwargs["max_tokens"] == 100
        assert kwargs["messages"][0] == {"role": "system", "content": "Be brief."}
        assert kwargs["tools"][0]["type"] == "function"
        assert kwargs["tools"][0]["function"]["name"] == "calculator"
        assert kwargs["tools"][0]["function"]["parameters"]["required"] == ["operation", "a", "b"]

    def test_tools_omitted_when_none(self, provider, mock_client):
        mock_client.chat.completions.create.return_value = completion(content="ok")

        provider.send(LLMRequest(session_id="s1", messages=(Message.user("Hi"),)))

        assert "tools" not in mock_client.chat.completions.create.call_args.kwargs

    def test_empty_tool_list_is_passed_through(self, provider, mock_client):
        mock_client.chat.completions.create.return_value = completion(content="ok")

        provider.send(LLMRequest(session_id="s1", messages=(Message.user("Hi"),), tools=[]))

        assert mock_client.chat.completions.create.call_args.kwargs["tools"] == []

    def test_tool_call_response(self, provider, mock_client):
        mock_client.chat.completions.create.return_value = completion(
            tool_calls=[
                function_call("call_1", "calculator", '{"operation": "add", "a": 15, "b": 27}'),
                function_call("call_2", "hello_world", "not json"),
                function_call("call_3", "hello_world", "[1, 2]"),
            ],
            finish_reason="tool_calls",
            usage=SimpleNamespace(total_tokens=None, prompt_tokens=5, completion_tokens=7),
        )

        response = provider.send(LLMRequest(session_id="s1", messages=(Message.user("Add"),)))

        assert response.has_tool_calls
        assert response.text == ""
        assert [c.id for c in response.tool_calls] == ["call_1", "call_2", "call_3"]
        assert response.tool_calls[0].input == {"operation": "add", "a": 15, "b": 27}
        assert response.tool_calls[1].input == {}
        assert response.tool_calls[2].input == {}
        assert response.token_count == 12
        assert response.stop_reason == "tool_calls"


class TestConvertMessages:
    """Tests for history conversion."""

    def test_full_tool_round(self):
        call = ToolCall(id="call_1", name="calculator", input={"a": 1})
        messages = [
            Message.user("Add"),
            Message.assistant("", [call]),
            Message.tool("call_1", "2"),
            Message.assistant("It is 2."),
        ]

        converted = GroqProvider.convert_messages(messages)

        assert converted[0] == {"role": "user", "content": "Add"}
        assert converted[1]["role"] == "assistant"
        assert converted[1]["content"] is None
        assert converted[1]["tool_calls"][0]["id"] == "call_1"
        assert json.loads(converted[1]["tool_calls"][0]["function"]["arguments"]) == {"a": 1}
        assert converted[2] == {"role": "tool", "tool_call_id": "call_1", "content": "2"}
        assert converted[3] == {"role": "assistant", "content": "It is 2."}

    def test_blank_system_prompt_skipped(self):
        converted = GroqProvider.convert_messages([Message.user("Hi")], system_prompt="  ")

        assert [m["role"] for m in converted] == ["user"]


class TestErrors:
    """SDK errors are wrapped in LLMError."""

    def test_rate_limit(self, provider, mock_client):
        response = httpx.Response(429, request=httpx.Request("POST", GROQ_URL))
        mock_client.chat.completions.create.side_effect = groq.RateLimitError(
            "rate limited", response=response, body=None
        )

        with pytest.raises(LLMError) as exc_info:
            provider.send(LLMRequest(session_id="s1", messages=(Message.user("Hi"),)))

        assert "rate limit" in exc_info.value.message
        assert isinstance(exc_info.value.__cause__, groq.RateLimitError)
        assert exc_info.value.status_code == 502

    def test_connection_error(self, provider, mock_client):
        mock_client.chat.completions.create.side_effect = groq.APIConnectionError(
            request=httpx.Request("POST", GROQ_URL)
        )

        with pytest.raises(LLMError) as exc_info:
            provider.send(LLMRequest(session_id="s1", messages=(Message.user("Hi"),)))

        assert isinstance(exc_info.value.__cause__, groq.APIConnectionError)

    def test_status_error(self, provider, mock_client):
        response = httpx.Response(500, request=httpx.Request("POST", GROQ_URL))
        mock_client.chat.completions.create.side_effect = groq.InternalServerError(
            "server error", response=response, body=None
        )

        with pytest.raises(LLMError):
            provider.send(LLMRequest(session_id="s1", messages=(Message.user("Hi"),)))
