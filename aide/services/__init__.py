"""
Services module - Business logic and orchestration.

Services contain the core application logic:
- No HTTP concerns (those belong in api/)
- Coordinate the LLM provider, the capability registry and session memory
"""
from aide.services.orchestrator import Orchestrator, get_orchestrator, reset_orchestrator

__all__ = [
    "Orchestrator",
    "get_orchestrator",
    "reset_orchestrator",
]
