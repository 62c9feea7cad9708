"""
Configuration management via environment variables.

This module loads configuration from a .env file using python-dotenv.
All configuration values are accessed through the Settings class.

Values already present in the process environment take precedence over
the .env file, so deployments can override anything without editing it.
"""
import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from aide.core.exceptions import ConfigurationError


# Load .env file from project root
# This must happen before accessing os.environ
env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(env_path)


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    frozen=True makes the dataclass immutable, preventing accidental
    modification of settings at runtime.

    Attributes:
        app_name: Application identifier for logging
        app_env: Environment name (development, staging, production)
        log_level: Logging verbosity (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_dir: Directory for log files (None = <project>/logs)
        groq_api_key: API key for the Groq LLM service (may be empty)
        llm_model: Model identifier sent to the provider
        llm_temperature: Sampling temperature (0.0 - 2.0)
        llm_max_tokens: Maximum tokens to generate per request
        max_tool_iterations: Default bound for the tool-calling loop
        system_prompt: Default system prompt (None = no system prompt)
        enable_audit_logging: Log every HTTP request through the audit middleware
    """
    # Application settings
    app_name: str
    app_env: str
    log_level: str
    log_dir: Optional[str]

    # LLM settings
    groq_api_key: str
    llm_model: str
    llm_temperature: float
    llm_max_tokens: int

    # Orchestration settings
    max_tool_iterations: int
    system_prompt: Optional[str]

    # API settings
    enable_audit_logging: bool

    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.app_env.lower() == "development"

    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.app_env.lower() == "production"


def _get_env(key: str, default: Optional[str] = None) -> str:
    """
    Get environment variable with optional default.

    Args:
        key: Environment variable name
        default: Default value if not set

    Returns:
        Environment variable value

    Raises:
        ConfigurationError: If required variable is not set and no default provided
    """
    value = os.environ.get(key, default)
    if value is None:
        raise ConfigurationError(
            f"Required environment variable '{key}' is not set. "
            f"Please check your .env file."
        )
    return value


def _get_int(key: str, default: str) -> int:
    raw = _get_env(key, default)
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"Environment variable '{key}' must be an integer, got {raw!r}")


def _get_float(key: str, default: str) -> float:
    raw = _get_env(key, default)
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(f"Environment variable '{key}' must be a number, got {raw!r}")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Settings are read once; call get_settings.cache_clear() after
    changing the environment (tests do this).

    Returns:
        Settings instance with all configuration values

    Raises:
        ConfigurationError: If a value is missing or malformed
    """
    max_iterations = _get_int("MAX_TOOL_ITERATIONS", "10")
    if max_iterations <= 0:
        raise ConfigurationError("MAX_TOOL_ITERATIONS must be greater than 0")

    # Blank system prompt means "none"
    system_prompt = os.environ.get("SYSTEM_PROMPT", "").strip() or None
    log_dir = os.environ.get("LOG_DIR", "").strip() or None

    return Settings(
        # Application
        app_name=_get_env("APP_NAME", "Aide"),
        app_env=_get_env("APP_ENV", "development"),
        log_level=_get_env("LOG_LEVEL", "INFO"),
        log_dir=log_dir,

        # LLM
        groq_api_key=_get_env("GROQ_API_KEY", ""),
        llm_model=_get_env("LLM_MODEL", "llama-3.3-70b-versatile"),
        llm_temperature=_get_float("LLM_TEMPERATURE", "1.0"),
        llm_max_tokens=_get_int("LLM_MAX_TOKENS", "4096"),

        # Orchestration
        max_tool_iterations=max_iterations,
        system_prompt=system_prompt,

        # API
        enable_audit_logging=_get_env("ENABLE_AUDIT_LOGGING", "true").lower() == "true",
    )
