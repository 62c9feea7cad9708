"""
LLM Client for Groq API integration.

This module maps the assistant's conversation model onto Groq's
OpenAI-compatible chat completions API:
- Request building (system prompt, history, tool catalogue)
- Response parsing (text, tool calls, token usage)
- Error wrapping into LLMError

Why a separate client class:
1. Encapsulation - Vendor wire format hidden from the orchestrator
2. Testability - The SDK client can be injected and mocked
"""
import json
from typing import Any, Dict, List, Optional

from groq import APIConnectionError, APIError, Groq, RateLimitError

from aide.capabilities.base import ToolDefinition
from aide.core.config import get_settings
from aide.core.exceptions import ConfigurationError, LLMError
from aide.core.logging_config import get_logger
from aide.llm.base import LLMRequest, LLMResponse
from aide.memory.conversation import Message, Role, ToolCall

logger = get_logger(__name__)


class GroqProvider:
    """
    Language-model provider backed by Groq chat completions.

    Example:
        >>> provider = GroqProvider(api_key="gsk_...")
        >>> response = provider.send(LLMRequest(
        ...     session_id="abc",
        ...     messages=(Message.user("Hello!"),),
        ... ))
        >>> response.text
        'Hello! How can I help you today?'
    """

    name = "Groq"

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        client: Optional[Any] = None
    ):
        """
        Initialize the provider.

        Args:
            api_key: Groq API key. Defaults to GROQ_API_KEY from settings.
            model: Model identifier. Defaults to LLM_MODEL from settings.
            client: Pre-built SDK client (tests inject a mock here)

        Raises:
            ConfigurationError: If no client is given and no API key is configured
        """
        settings = get_settings()
        self.model = model or settings.llm_model

        if client is not None:
            self._client = client
        else:
            key = api_key if api_key is not None else settings.groq_api_key
            if not key or not key.strip():
                raise ConfigurationError(
                    "Groq API key not found. Set GROQ_API_KEY in the environment or .env file."
                )
            self._client = Groq(api_key=key)

        logger.info(f"Groq provider initialized (model={self.model})")

    def send(self, request: LLMRequest) -> LLMResponse:
        """
        Send a request to Groq and get a response.

        Raises:
            LLMError: If the API call fails; the SDK error is chained
        """
        params: Dict[str, Any] = {
            "model": self.model,
            "messages": self.convert_messages(request.messages, request.system_prompt),
            "temperature": request.temperature,
            "max_tokens": request.max_tokens,
        }
        # None means "omit tools", which is not the same as an empty list
        if request.tools is not None:
            params["tools"] = [self.convert_tool_definition(t) for t in request.tools]

        try:
            response = self._client.chat.completions.create(**params)
        except RateLimitError as e:
            logger.warning(f"Groq rate limit hit (model={self.model}): {e}")
            raise LLMError(f"Groq rate limit exceeded: {e}") from e
        except APIConnectionError as e:
            logger.error(f"Could not reach Groq: {e}")
            raise LLMError(f"Could not reach Groq: {e}") from e
        except APIError as e:
            logger.error(f"Groq API error (model={self.model}): {e}")
            raise LLMError(f"Groq API error: {e}") from e

        return self.convert_response(response)

    @staticmethod
    def convert_messages(messages, system_prompt: Optional[str] = None) -> List[Dict[str, Any]]:
        """Convert conversation messages to chat-completions format."""
        result: List[Dict[str, Any]] = []

        if system_prompt and system_prompt.strip():
            result.append({"role": "system", "content": system_prompt})

        for message in messages:
            if message.role == Role.TOOL:
                result.append({
                    "role": "tool",
                    "tool_call_id": message.tool_call_id,
                    "content": message.content or "",
                })
            elif message.role == Role.ASSISTANT and message.tool_calls:
                result.append({
                    "role": "assistant",
                    "content": message.content or None,
                    "tool_calls": [
                        {
                            "id": call.id,
                            "type": "function",
                            "function": {
                                "name": call.name,
                                "arguments": json.dumps(call.input),
                            },
                        }
                        for call in message.tool_calls
                    ],
                })
            else:
                result.append({"role": message.role.value, "content": message.content or ""})

        return result

    @staticmethod
    def convert_tool_definition(tool: ToolDefinition) -> Dict[str, Any]:
        """Convert a tool definition to a chat-completions function tool."""
        return {
            "type": "function",
            "function": {
                "name": tool.name,
                "description": tool.description,
                "parameters": tool.input_schema.to_dict(),
            },
        }

    @staticmethod
    def convert_response(response: Any) -> LLMResponse:
        """Convert a chat-completions response to an LLMResponse."""
        choice = response.choices[0]
        message = choice.message

        tool_calls: List[ToolCall] = []
        for raw in getattr(message, "tool_calls", None) or []:
            if getattr(raw, "type", "function") != "function" or raw.function is None:
                continue
            tool_calls.append(ToolCall(
                id=raw.id,
                name=raw.function.name,
                input=_decode_arguments(raw.function.name, raw.function.arguments),
            ))

        usage = getattr(response, "usage", None)
        token_count = 0
        if usage is not None:
            token_count = usage.total_tokens or (
                (usage.prompt_tokens or 0) + (usage.completion_tokens or 0)
            )

        return LLMResponse(
            text=message.content or "",
            tool_calls=tuple(tool_calls),
            token_count=token_count,
            model=getattr(response, "model", "") or "",
            stop_reason=choice.finish_reason,
        )


def _decode_arguments(tool_name: str, arguments: Optional[str]) -> Dict[str, Any]:
    """Decode a JSON argument string; anything but a JSON object becomes {}."""
    if not arguments:
        return {}
    try:
        decoded = json.loads(arguments)
    except json.JSONDecodeError:
        logger.warning(f"Malformed arguments for tool '{tool_name}': {arguments[:100]}")
        return {}
    if not isinstance(decoded, dict):
        logger.warning(f"Non-object arguments for tool '{tool_name}': {type(decoded).__name__}")
        return {}
    return decoded
