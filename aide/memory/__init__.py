"""
Memory Package - Conversation history management.

Histories are short-term only: they live in process memory and are
lost on restart.

Example:
    >>> from aide.memory import SessionStore, Message
    >>> store = SessionStore()
    >>> store.append("user-123", Message.user("Hello!"))
"""
from aide.memory.conversation import ConversationMemory, Message, Role, ToolCall
from aide.memory.session_store import SessionStore

__all__ = [
    "ConversationMemory",
    "Message",
    "Role",
    "ToolCall",
    "SessionStore",
]
