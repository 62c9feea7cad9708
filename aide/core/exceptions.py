"""
Custom Exceptions - Application-specific error classes.

This module defines a hierarchy of exceptions for clean error handling:
- Each exception has a status code and error code
- Used by the API layer for consistent error responses
- No stack traces leaked in production

Error kinds:
- Validation errors (bad arguments, duplicate or unknown capabilities)
  are raised before any state is touched; the caller must fix the call.
- MaxIterationsExceededError is the fatal loop error.
- LLMError wraps upstream provider failures.
"""
from typing import Optional


class AideException(Exception):
    """
    Base exception for all Aide errors.

    Subclass this for specific error types.
    """
    status_code: int = 500
    error_code: str = "internal_error"

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        """Convert to error response dict."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details
        }


class ValidationError(AideException):
    """Raised when input validation fails."""
    status_code = 400
    error_code = "validation_error"

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message, details=f"field={field}" if field else None)
        self.field = field


class DuplicateCapabilityError(ValidationError):
    """Raised when a capability name is registered twice."""
    status_code = 409
    error_code = "duplicate_capability"

    def __init__(self, name: str):
        super().__init__(
            f"A capability with name '{name}' is already registered.",
            field="name"
        )
        self.name = name


class CapabilityNotFoundError(AideException):
    """Raised by CapabilityRegistry.get when no capability has the name."""
    status_code = 404
    error_code = "capability_not_found"

    def __init__(self, name: str):
        super().__init__(
            message=f"No capability with name '{name}' is registered.",
            details=f"name={name}"
        )
        self.name = name


class MaxIterationsExceededError(AideException):
    """Raised when the tool-calling loop runs out of iterations."""
    status_code = 400
    error_code = "max_iterations_exceeded"

    def __init__(self, max_iterations: int):
        super().__init__(
            message=(
                f"Maximum tool calling iterations ({max_iterations}) exceeded. "
                "This may indicate an infinite loop or overly complex task."
            ),
            details=f"max_iterations={max_iterations}"
        )
        self.max_iterations = max_iterations


class TurnCancelledError(AideException):
    """Raised when a caller cancels a turn while it is in progress."""
    status_code = 408
    error_code = "turn_cancelled"

    def __init__(self, session_id: str):
        super().__init__(
            message="The request was cancelled before a final answer was produced.",
            details=f"session_id={session_id}"
        )
        self.session_id = session_id


class ConfigurationError(AideException):
    """Raised when required configuration is missing or malformed."""
    status_code = 500
    error_code = "configuration_error"


class LLMError(AideException):
    """
    Raised when a language-model provider call fails.

    Wraps SDK-specific errors into a single type so the API layer
    can map them to a server error. The original error is chained
    as __cause__.
    """
    status_code = 502
    error_code = "llm_error"

    def __init__(self, message: str = "LLM service unavailable"):
        super().__init__(message)
