"""
Input Validators - Sanitization and validation utilities.

Two flavours live here:
- require_* helpers raise ValidationError and guard the core
  (orchestrator, session store) before any state is touched.
- validate_* helpers return (is_valid, ...) tuples and are used by the
  API layer, which decides how to report the problem.
"""
import re
from typing import Any, Optional, Tuple

from aide.core.exceptions import ValidationError
from aide.core.logging_config import get_logger

logger = get_logger(__name__)

MAX_MESSAGE_LENGTH = 8000
MAX_SESSION_ID_LENGTH = 128

# Session ids travel in URLs; keep them printable and free of separators
_SESSION_ID_REGEX = re.compile(r"^[A-Za-z0-9._:\-]+$")


def require_text(value: Any, field: str) -> str:
    """
    Ensure a value is a non-blank string.

    Args:
        value: Value to check
        field: Argument name, reported in the error

    Returns:
        The value, unchanged

    Raises:
        ValidationError: If the value is None, not a string, or blank
    """
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field} cannot be null or whitespace", field=field)
    return value


def require_positive(value: Any, field: str) -> int:
    """Ensure a value is an int greater than zero."""
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValidationError(f"{field} must be greater than 0", field=field)
    return value


def sanitize_message(message: str, max_length: int = MAX_MESSAGE_LENGTH) -> str:
    """
    Sanitize a user message.

    - Removes null bytes
    - Strips leading/trailing whitespace
    - Limits length

    Inner whitespace is preserved; line breaks matter to the model.

    Args:
        message: Raw user message
        max_length: Maximum allowed length

    Returns:
        Sanitized message
    """
    if not message:
        return ""

    cleaned = message.replace("\x00", "").strip()

    if len(cleaned) > max_length:
        cleaned = cleaned[:max_length]

    return cleaned


def validate_session_id(session_id: Optional[str]) -> Tuple[bool, Optional[str]]:
    """
    Validate a client-supplied session ID.

    Session ids are opaque; any printable token of letters, digits and
    ``._:-`` up to 128 characters is accepted.

    Args:
        session_id: Session ID to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not session_id:
        return True, None  # Empty is OK (will be generated)

    if len(session_id) > MAX_SESSION_ID_LENGTH:
        return False, f"session_id too long (max {MAX_SESSION_ID_LENGTH} characters)"

    if not _SESSION_ID_REGEX.match(session_id):
        return False, "Invalid session_id format (letters, digits and ._:- only)"

    return True, None


def validate_message(message: Optional[str]) -> Tuple[bool, str, Optional[str]]:
    """
    Full validation and sanitization of a message.

    Args:
        message: Raw user message

    Returns:
        Tuple of (is_valid, sanitized_message, error_message)
    """
    if not message or not message.strip():
        return False, "", "Message cannot be empty"

    if len(message.strip()) > MAX_MESSAGE_LENGTH:
        return False, "", f"Message too long (max {MAX_MESSAGE_LENGTH} characters)"

    sanitized = sanitize_message(message)
    if not sanitized:
        return False, "", "Message cannot be empty after sanitization"

    return True, sanitized, None


def validate_max_iterations(value: Optional[int]) -> Tuple[bool, Optional[str]]:
    """
    Validate a client-supplied iteration bound.

    Args:
        value: Requested bound, or None for the configured default

    Returns:
        Tuple of (is_valid, error_message)
    """
    if value is None:
        return True, None
    if value <= 0:
        return False, "max_iterations must be greater than 0"
    if value > 50:
        logger.warning(f"Large max_iterations requested: {value}")
    return True, None
