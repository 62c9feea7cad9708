"""
Aide - a personal assistant that answers by calling tools.

This package contains all application source code organized by responsibility:
- api/          : FastAPI routes and HTTP handling
- core/         : Configuration, logging, errors and cross-cutting utilities
- services/     : The tool-calling orchestrator
- llm/          : Provider contract and the Groq provider
- capabilities/ : Capability contract, registry and built-in capabilities
- memory/       : Messages and the in-memory session store
- models/       : Pydantic models for request/response schemas
"""
__version__ = "0.1.0"
