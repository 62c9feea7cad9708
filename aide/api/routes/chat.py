"""
Chat Routes - API endpoints for conversational interactions.

This module defines:
- POST /chat: run one turn of the tool-calling loop
- Session housekeeping under /chat/sessions

Handlers are plain (sync) functions: FastAPI runs them in its threadpool,
so a slow model call only ties up one worker thread, and requests for
different sessions proceed in parallel.

Errors raised by the orchestrator (validation, max iterations, provider
failures) are AideExceptions and are turned into JSON responses by the
handlers registered in api/main.py.
"""
import uuid
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Response

from aide.core.config import get_settings
from aide.core.exceptions import ValidationError
from aide.core.logging_config import get_logger
from aide.core.validators import validate_max_iterations, validate_message, validate_session_id
from aide.models.chat import (
    ChatRequest,
    ChatResponse,
    ClearAllResponse,
    ErrorResponse,
    SessionCountResponse,
    SessionHistoryResponse,
    SessionInfoResponse,
    SessionStatsResponse,
)
from aide.services.orchestrator import Orchestrator, get_orchestrator

logger = get_logger(__name__)

router = APIRouter(
    prefix="/chat",
    tags=["Chat"],
    responses={
        400: {"model": ErrorResponse, "description": "Invalid request or max iterations exceeded"},
        502: {"model": ErrorResponse, "description": "Language model provider failed"},
        500: {"model": ErrorResponse, "description": "Internal server error"}
    }
)


@router.post(
    "",
    response_model=ChatResponse,
    summary="Send a message to the assistant",
    description="""
    Send a message to the assistant and get its final answer.

    The assistant may call registered capabilities (tools) several times
    before answering. Include a `session_id` to continue a conversation;
    one is generated when omitted and returned in the response.
    """
)
def send_message(
    request: ChatRequest,
    orchestrator: Orchestrator = Depends(get_orchestrator)
) -> ChatResponse:
    """Process a user message and return the assistant's response."""
    is_valid, error = validate_session_id(request.session_id)
    if not is_valid:
        raise ValidationError(error, field="session_id")

    is_valid, sanitized_message, error = validate_message(request.message)
    if not is_valid:
        raise ValidationError(error, field="message")

    is_valid, error = validate_max_iterations(request.max_iterations)
    if not is_valid:
        raise ValidationError(error, field="max_iterations")

    settings = get_settings()
    session_id = request.session_id or str(uuid.uuid4())

    logger.info(
        f"Processing chat message: session={session_id[:8]}..., "
        f"message_length={len(sanitized_message)}"
    )

    answer = orchestrator.process_input(
        session_id=session_id,
        user_input=sanitized_message,
        system_prompt=request.system_prompt or settings.system_prompt,
        max_iterations=request.max_iterations or settings.max_tool_iterations,
    )

    logger.info(f"Chat response: session={session_id[:8]}..., response_length={len(answer)}")

    return ChatResponse(
        message=answer,
        session_id=session_id,
        timestamp=datetime.utcnow()
    )


@router.get(
    "/sessions",
    response_model=SessionStatsResponse,
    summary="Session store statistics",
    description="Active sessions, stored messages and turns currently running."
)
def get_session_stats(orchestrator: Orchestrator = Depends(get_orchestrator)) -> SessionStatsResponse:
    stats = orchestrator.get_stats()
    return SessionStatsResponse(
        active_sessions=stats["active_sessions"],
        total_messages=stats["total_messages"],
        turns_in_progress=stats["turns_in_progress"]
    )


@router.delete(
    "/sessions",
    response_model=ClearAllResponse,
    summary="Clear all sessions",
    description="Delete the history of every session. Use with caution!"
)
def clear_all_sessions(orchestrator: Orchestrator = Depends(get_orchestrator)) -> ClearAllResponse:
    cleared = orchestrator.clear_all_histories()
    logger.info(f"Cleared all sessions via API: {cleared}")
    return ClearAllResponse(cleared=cleared)


@router.get(
    "/sessions/{session_id}",
    response_model=SessionInfoResponse,
    summary="Get session info"
)
def get_session_info(
    session_id: str,
    orchestrator: Orchestrator = Depends(get_orchestrator)
) -> SessionInfoResponse:
    info = orchestrator.get_session_info(session_id)
    if info is None:
        raise HTTPException(status_code=404, detail=f"Session not found: {session_id}")
    return SessionInfoResponse(**info)


@router.get(
    "/sessions/{session_id}/count",
    response_model=SessionCountResponse,
    summary="Get message count for a session"
)
def get_message_count(
    session_id: str,
    orchestrator: Orchestrator = Depends(get_orchestrator)
) -> SessionCountResponse:
    return SessionCountResponse(
        session_id=session_id,
        message_count=orchestrator.get_message_count(session_id)
    )


@router.get(
    "/sessions/{session_id}/history",
    response_model=SessionHistoryResponse,
    summary="Get conversation history"
)
def get_history(
    session_id: str,
    orchestrator: Orchestrator = Depends(get_orchestrator)
) -> SessionHistoryResponse:
    messages = [message.to_dict() for message in orchestrator.get_history(session_id)]
    return SessionHistoryResponse(
        session_id=session_id,
        messages=messages,
        message_count=len(messages)
    )


@router.delete(
    "/sessions/{session_id}",
    status_code=204,
    summary="Clear conversation history for a session"
)
def clear_session(
    session_id: str,
    orchestrator: Orchestrator = Depends(get_orchestrator)
) -> Response:
    orchestrator.clear_history(session_id)
    logger.info(f"Cleared session {session_id}")
    return Response(status_code=204)
