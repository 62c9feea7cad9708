"""
Models module - Pydantic schemas for the HTTP API.

Internal data structures (messages, tool calls, capability results)
are plain dataclasses in memory/ and capabilities/; these models only
describe what goes over the wire.
"""
from aide.models.capabilities import (
    CapabilitiesListResponse,
    CapabilityExecutionRequest,
    CapabilityExecutionResponse,
    CapabilityInfo,
)
from aide.models.chat import (
    ChatRequest,
    ChatResponse,
    ClearAllResponse,
    ErrorResponse,
    HealthResponse,
    SessionCountResponse,
    SessionHistoryResponse,
    SessionInfoResponse,
    SessionStatsResponse,
)

__all__ = [
    "ChatRequest",
    "ChatResponse",
    "ClearAllResponse",
    "ErrorResponse",
    "HealthResponse",
    "SessionCountResponse",
    "SessionHistoryResponse",
    "SessionInfoResponse",
    "SessionStatsResponse",
    "CapabilitiesListResponse",
    "CapabilityExecutionRequest",
    "CapabilityExecutionResponse",
    "CapabilityInfo",
]
