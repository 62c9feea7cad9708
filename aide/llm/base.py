"""
Provider contract - how the orchestrator talks to a language model.

A provider takes the conversation so far plus the tool catalogue and
returns generated text and/or the tool calls the model wants made.
New backends are added by implementing LLMProvider, nothing else.
"""
from dataclasses import dataclass, field
from typing import List, Optional, Protocol, Tuple, runtime_checkable

from aide.capabilities.base import ToolDefinition
from aide.memory.conversation import Message, ToolCall


@dataclass(frozen=True)
class LLMRequest:
    """
    Request sent to an LLM provider.

    Attributes:
        session_id: Session the request belongs to
        messages: Snapshot of the conversation history
        tools: Tool catalogue, or None to omit tools entirely
        system_prompt: Optional system prompt
        temperature: Sampling temperature (0.0 - 2.0)
        max_tokens: Maximum tokens to generate
    """
    session_id: str
    messages: Tuple[Message, ...]
    tools: Optional[List[ToolDefinition]] = None
    system_prompt: Optional[str] = None
    temperature: float = 1.0
    max_tokens: int = 4096


@dataclass(frozen=True)
class LLMResponse:
    """
    Response from an LLM provider.

    Attributes:
        text: Generated text (may be empty when only tool calls are returned)
        tool_calls: Requested tool calls, in the order the model emitted them
        token_count: Total tokens used by the request
        model: Model that produced the response
        stop_reason: Why generation stopped (e.g. "stop", "tool_calls", "length")
    """
    text: str
    tool_calls: Tuple[ToolCall, ...] = field(default_factory=tuple)
    token_count: int = 0
    model: str = ""
    stop_reason: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "tool_calls", tuple(self.tool_calls))

    @property
    def has_tool_calls(self) -> bool:
        return len(self.tool_calls) > 0


@runtime_checkable
class LLMProvider(Protocol):
    """Anything that can answer an LLMRequest."""

    name: str

    def send(self, request: LLMRequest) -> LLMResponse:
        ...
