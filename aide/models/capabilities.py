"""
Request and Response models for the Capabilities API.
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from aide.capabilities.base import Capability


class CapabilityInfo(BaseModel):
    """A capability as listed by the API."""
    name: str = Field(..., description="Capability name (used to invoke)")
    description: str = Field(..., description="What the capability does")
    input_schema: Dict[str, Any] = Field(..., description="JSON schema for the input parameters")

    @classmethod
    def from_capability(cls, capability: Capability) -> "CapabilityInfo":
        return cls(
            name=capability.name,
            description=capability.description,
            input_schema=capability.get_input_schema().to_dict(),
        )


class CapabilitiesListResponse(BaseModel):
    """All registered capabilities."""
    capabilities: List[CapabilityInfo]
    count: int


class CapabilityExecutionRequest(BaseModel):
    """Direct execution request (bypasses the model)."""
    input: Optional[str] = Field(default=None, description="Primary input string")
    parameters: Optional[Dict[str, Any]] = Field(
        default=None,
        description="Additional parameters as key-value pairs"
    )


class CapabilityExecutionResponse(BaseModel):
    """Result of a direct capability execution."""
    success: bool
    output: Optional[str] = None
    data: Optional[Any] = None
    error_message: Optional[str] = None
    error_code: Optional[str] = None
