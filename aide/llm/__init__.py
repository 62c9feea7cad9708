"""
LLM module - Language model integration.

This module handles all LLM interactions:
- base.py   : Provider protocol and request/response types
- client.py : Groq chat-completions provider
"""
from aide.llm.base import LLMProvider, LLMRequest, LLMResponse
from aide.llm.client import GroqProvider

__all__ = [
    "LLMProvider",
    "LLMRequest",
    "LLMResponse",
    "GroqProvider",
]
