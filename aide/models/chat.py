"""
Request and Response models for the Chat API.

These Pydantic models define the contract between client and server.
They provide:
- Type validation
- Automatic documentation
- Request/response serialization
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class ChatRequest(BaseModel):
    """
    Request model for the /chat endpoint.

    Attributes:
        message: The user's message.
        session_id: Optional session identifier for multi-turn conversations.
        system_prompt: Optional system prompt for this request.
        max_iterations: Optional bound on tool-calling round-trips.
    """
    message: str = Field(
        ...,
        min_length=1,
        max_length=8000,
        description="The user's message",
        examples=["What is 15 + 27? Use the calculator."]
    )
    session_id: Optional[str] = Field(
        default=None,
        description="Session ID for multi-turn conversations (generated if omitted)"
    )
    system_prompt: Optional[str] = Field(
        default=None,
        description="Optional system prompt to guide the assistant"
    )
    max_iterations: Optional[int] = Field(
        default=None,
        ge=1,
        le=100,
        description="Maximum tool calling iterations (server default if omitted)"
    )


class ChatResponse(BaseModel):
    """Response model for the /chat endpoint."""
    message: str = Field(
        ...,
        description="The assistant's final response"
    )
    session_id: str = Field(
        ...,
        description="Session ID for this conversation"
    )
    timestamp: datetime = Field(
        default_factory=datetime.utcnow,
        description="Response generation timestamp"
    )


class SessionCountResponse(BaseModel):
    """Message count of one session."""
    session_id: str
    message_count: int


class SessionInfoResponse(BaseModel):
    """Summary of one session."""
    session_id: str
    message_count: int
    user_messages: int
    assistant_messages: int
    tool_messages: int
    created_at: str
    last_activity: str


class SessionHistoryResponse(BaseModel):
    """Ordered conversation history of one session."""
    session_id: str
    messages: List[Dict[str, Any]]
    message_count: int


class SessionStatsResponse(BaseModel):
    """Session store statistics."""
    active_sessions: int
    total_messages: int = 0
    turns_in_progress: int = 0


class ClearAllResponse(BaseModel):
    """Result of clearing every session."""
    cleared: int


class HealthResponse(BaseModel):
    """Response model for the /health endpoint."""
    status: str = Field(default="healthy")
    version: str
    capabilities: int = 0
    timestamp: datetime = Field(default_factory=datetime.utcnow)


class ErrorResponse(BaseModel):
    """Standard error response model."""
    error: str
    message: str
    details: Optional[str] = None
    timestamp: datetime = Field(default_factory=datetime.utcnow)
