"""
API Routes module - Endpoint definitions.

Each file in this module defines routes for a specific domain:
- chat.py         : Conversational endpoints and session housekeeping
- capabilities.py : Capability catalogue and direct execution
- health.py       : Health check endpoints
"""
from aide.api.routes.capabilities import router as capabilities_router
from aide.api.routes.chat import router as chat_router
from aide.api.routes.health import router as health_router

__all__ = [
    "capabilities_router",
    "chat_router",
    "health_router",
]
