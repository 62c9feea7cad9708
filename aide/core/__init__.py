"""
Core module - Configuration and cross-cutting concerns.

This module provides:
- config.py         : Environment-based configuration management
- logging_config.py : Centralized logging setup
- exceptions.py     : Exception hierarchy with HTTP status codes
- validators.py     : Argument and request validation
- audit.py          : HTTP request audit middleware
"""
from aide.core.config import get_settings, Settings
from aide.core.logging_config import setup_logging, get_logger, LoggerMixin

__all__ = [
    "get_settings",
    "Settings",
    "setup_logging",
    "get_logger",
    "LoggerMixin",
]
