"""
Conversation Memory - Data structures for conversation history.

This module provides classes for managing conversation state:
- ToolCall: A capability invocation requested by the model
- Message: Individual, immutable message in a conversation
- ConversationMemory: Ordered message history of one session

Messages are frozen, so a tuple copy of the history is a complete
snapshot: nothing a reader holds can change under it.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class Role(str, Enum):
    """Author of a message."""
    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"


@dataclass(frozen=True)
class ToolCall:
    """
    A tool call requested by the model.

    Attributes:
        id: Provider-generated correlation key, opaque to the orchestrator
        name: Name of the capability to invoke
        input: Input parameters as key-value pairs (JSON-shaped values)
    """
    id: str
    name: str
    input: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "input": dict(self.input)}


@dataclass(frozen=True)
class Message:
    """
    Represents a single message in a conversation.

    Attributes:
        role: Who produced the message
        content: Text content (None when an assistant turn only holds tool calls)
        tool_calls: Calls requested by the assistant in this turn
        tool_call_id: For tool messages, the id of the call this answers
        timestamp: When the message was created

    Example:
        >>> msg = Message.user("What time is it?")
        >>> msg.role, msg.content
        (<Role.USER: 'user'>, 'What time is it?')
    """
    role: Role
    content: Optional[str] = None
    tool_calls: Optional[Tuple[ToolCall, ...]] = None
    tool_call_id: Optional[str] = None
    timestamp: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self):
        object.__setattr__(self, "role", Role(self.role))
        if self.role == Role.TOOL and not self.tool_call_id:
            raise ValueError("Tool messages require a tool_call_id")
        if self.tool_calls is not None:
            if self.role != Role.ASSISTANT:
                raise ValueError("Only assistant messages can carry tool calls")
            # Accept any sequence, store an immutable one
            object.__setattr__(self, "tool_calls", tuple(self.tool_calls))

    @classmethod
    def user(cls, content: str) -> "Message":
        return cls(role=Role.USER, content=content)

    @classmethod
    def assistant(
        cls,
        content: Optional[str],
        tool_calls: Optional[List[ToolCall]] = None
    ) -> "Message":
        return cls(
            role=Role.ASSISTANT,
            content=content,
            tool_calls=tuple(tool_calls) if tool_calls else None
        )

    @classmethod
    def tool(cls, tool_call_id: str, content: str) -> "Message":
        return cls(role=Role.TOOL, content=content, tool_call_id=tool_call_id)

    @property
    def has_tool_calls(self) -> bool:
        return bool(self.tool_calls)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-friendly dict (used by the history endpoint)."""
        return {
            "role": self.role.value,
            "content": self.content,
            "tool_calls": [c.to_dict() for c in self.tool_calls] if self.tool_calls else None,
            "tool_call_id": self.tool_call_id,
            "timestamp": self.timestamp.isoformat(),
        }


class ConversationMemory:
    """
    Ordered, append-only message history of a single session.

    This class is not synchronized by itself; SessionStore serializes
    every access under its own lock.

    Attributes:
        session_id: Unique identifier for this session
        created_at: When the session was created
        last_activity: Timestamp of the last appended message
    """

    def __init__(self, session_id: str):
        self.session_id = session_id
        self._messages: List[Message] = []
        self.created_at = datetime.utcnow()
        self.last_activity = self.created_at

    def append(self, message: Message) -> None:
        self._messages.append(message)
        self.last_activity = message.timestamp

    def snapshot(self) -> Tuple[Message, ...]:
        """Immutable copy of the current history."""
        return tuple(self._messages)

    @property
    def message_count(self) -> int:
        """Number of messages in the conversation."""
        return len(self._messages)

    def get_summary(self) -> Dict[str, Any]:
        """
        Get a summary of this conversation session.

        Returns:
            Dict with session info (id, counts per role, timestamps)
        """
        counts = {role: 0 for role in Role}
        for message in self._messages:
            counts[message.role] += 1

        return {
            "session_id": self.session_id,
            "message_count": self.message_count,
            "user_messages": counts[Role.USER],
            "assistant_messages": counts[Role.ASSISTANT],
            "tool_messages": counts[Role.TOOL],
            "created_at": self.created_at.isoformat(),
            "last_activity": self.last_activity.isoformat(),
        }
