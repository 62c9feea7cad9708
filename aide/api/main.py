"""
FastAPI Application Entry Point.

This module creates and configures the FastAPI application instance.
It handles:
1. Application initialization
2. Router registration
3. Middleware configuration (audit logging, CORS)
4. Exception handlers (AideException hierarchy)
5. Startup/shutdown events

Run with: uvicorn aide.api.main:app --reload
or:       aide-api
"""
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from aide import __version__
from aide.api.routes import capabilities_router, chat_router, health_router
from aide.capabilities import get_registry
from aide.core.audit import AuditMiddleware
from aide.core.config import get_settings
from aide.core.exceptions import AideException
from aide.core.logging_config import get_logger, setup_logging


# Initialize logging before anything else
settings = get_settings()
setup_logging(settings.log_level, settings.log_dir)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    - Startup: log configuration and the registered capabilities
    - Shutdown: log
    """
    logger.info(f"Starting {settings.app_name} in {settings.app_env} mode")
    logger.info(f"LLM Model: {settings.llm_model}")
    logger.info(f"Max tool iterations: {settings.max_tool_iterations}")
    logger.info(f"Audit Logging: {settings.enable_audit_logging}")

    if not settings.groq_api_key.strip():
        logger.warning("GROQ_API_KEY is not set; /chat requests will fail until it is configured")

    registry = get_registry()
    logger.info(f"Registered {registry.count} capabilities:")
    for capability in registry.get_all():
        logger.info(f"  - {capability.name}: {capability.description}")

    yield  # Application runs here

    logger.info(f"Shutting down {settings.app_name}")


app = FastAPI(
    title="Aide API",
    description="""
    A personal assistant that answers by calling tools.

    ## Features

    - **Tool calling**: The model can call registered capabilities and read their results
    - **Multi-turn Conversations**: History is kept per session in memory
    - **Capability catalogue**: List and directly execute capabilities
    """,
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)


# ============================================================
# Middleware Configuration
# ============================================================

if settings.enable_audit_logging:
    app.add_middleware(AuditMiddleware)
    logger.info("Audit logging middleware enabled")

if settings.is_development():
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    logger.warning("CORS configured for development (all origins allowed)")


# ============================================================
# Exception Handlers
# ============================================================

@app.exception_handler(AideException)
async def aide_exception_handler(request: Request, exc: AideException):
    """Handle all custom Aide exceptions."""
    if exc.status_code >= 500:
        logger.error(f"{exc.error_code}: {exc.message}")
    else:
        logger.warning(f"{exc.error_code}: {exc.message}")

    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """
    Handle uncaught exceptions globally.

    Detailed error information is only included in development mode.
    """
    logger.exception(f"Unhandled exception: {exc}")

    return JSONResponse(
        status_code=500,
        content={
            "error": "internal_error",
            "message": "An unexpected error occurred",
            "details": str(exc) if settings.is_development() else None,
            "timestamp": datetime.utcnow().isoformat()
        }
    )


# ============================================================
# Routers
# ============================================================

app.include_router(health_router)
app.include_router(chat_router)
app.include_router(capabilities_router)


@app.get("/", include_in_schema=False)
async def root():
    return {
        "message": "Aide API",
        "version": __version__,
        "documentation": "/docs",
        "health": "/health"
    }


def run() -> None:
    """Console entry point: serve the API with uvicorn."""
    import uvicorn

    uvicorn.run(
        "aide.api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.is_development()
    )


if __name__ == "__main__":
    run()
