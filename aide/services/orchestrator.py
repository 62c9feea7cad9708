"""
Orchestrator - the tool-calling loop.

This service drives a conversation turn:
1. Appends the user message to the session history
2. Sends a snapshot of the history plus the tool catalogue to the provider
3. If the model asks for tools, executes them in order and appends the results
4. Repeats until the model answers without tool calls or the iteration
   bound is hit

Tool failures never abort the loop: a missing capability, a capability
that raises, or one that reports failure all become a tool result the
model reads on its next round. Provider failures are not caught here;
they propagate to the caller.

Concurrency:
- Different sessions run fully in parallel.
- Calls on the same session are serialized by the store's per-session
  turn lock, so one turn's messages are always contiguous.
"""
import json
import threading
from typing import Any, Dict, Optional, Sequence, Tuple

from aide.capabilities import CapabilityRegistry, get_registry
from aide.capabilities.base import CapabilityContext
from aide.core.config import get_settings
from aide.core.exceptions import LLMError, MaxIterationsExceededError, TurnCancelledError, ValidationError
from aide.core.logging_config import get_logger
from aide.core.validators import require_positive, require_text
from aide.llm.base import LLMProvider, LLMRequest
from aide.memory.conversation import Message, ToolCall
from aide.memory.session_store import SessionStore

logger = get_logger(__name__)

DEFAULT_MAX_ITERATIONS = 10

TOOL_NOT_FOUND = "Error: Tool '{name}' not found in capability registry."
TOOL_EXCEPTION = "Exception executing tool '{name}': {error}"
TOOL_FAILED = "Error: {error}"
TOOL_CANCELLED = "Error: Tool '{name}' was cancelled before execution."

# Keys checked, in order, for the capability's primary input string
PRIMARY_INPUT_KEYS = ("input", "action")


class Orchestrator:
    """
    Runs the request/execute/respond loop for each user message.

    Example:
        >>> orchestrator = Orchestrator(GroqProvider(), build_default_registry())
        >>> orchestrator.process_input("abc-123", "What is 15 + 27? Use the calculator.")
        '15 + 27 = 42'
        >>> orchestrator.get_message_count("abc-123")
        4
    """

    def __init__(
        self,
        provider: LLMProvider,
        registry: CapabilityRegistry,
        session_store: Optional[SessionStore] = None,
        temperature: float = 1.0,
        max_tokens: int = 4096
    ):
        """
        Initialize the orchestrator.

        Args:
            provider: Language-model provider
            registry: Registry of available capabilities
            session_store: History store. A fresh one is created if not provided.
            temperature: Sampling temperature sent with every request
            max_tokens: Token limit sent with every request
        """
        if provider is None:
            raise ValidationError("provider cannot be None", field="provider")
        if registry is None:
            raise ValidationError("registry cannot be None", field="registry")

        self._provider = provider
        self._registry = registry
        self._store = session_store if session_store is not None else SessionStore()
        self.temperature = temperature
        self.max_tokens = max_tokens

    def process_input(
        self,
        session_id: str,
        user_input: str,
        system_prompt: Optional[str] = None,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
        cancel_event: Optional[threading.Event] = None
    ) -> str:
        """
        Process user input and return the model's final answer.

        Args:
            session_id: Session ID for conversation isolation
            user_input: The user's message
            system_prompt: Optional system prompt for this request
            max_iterations: Maximum provider round-trips for this call
            cancel_event: Set by the caller to abandon the turn

        Returns:
            Final response text

        Raises:
            ValidationError: Blank session_id/user_input or max_iterations <= 0
            MaxIterationsExceededError: No final answer within max_iterations
            TurnCancelledError: cancel_event was set before the turn finished
        """
        require_text(session_id, "session_id")
        require_text(user_input, "user_input")
        require_positive(max_iterations, "max_iterations")

        with self._store.turn_lock(session_id):
            return self._run_turn(session_id, user_input, system_prompt, max_iterations, cancel_event)

    def _run_turn(
        self,
        session_id: str,
        user_input: str,
        system_prompt: Optional[str],
        max_iterations: int,
        cancel_event: Optional[threading.Event]
    ) -> str:
        logger.info(
            f"Processing input: session={session_id}, "
            f"input_length={len(user_input)}, max_iterations={max_iterations}"
        )

        self._store.append(session_id, Message.user(user_input))

        # Omit tools entirely rather than sending an empty list
        tools = self._registry.to_tool_definitions() or None

        iterations = 0
        while iterations < max_iterations:
            iterations += 1

            if cancel_event is not None and cancel_event.is_set():
                logger.warning(f"Turn cancelled before request {iterations}: session={session_id}")
                raise TurnCancelledError(session_id)

            request = LLMRequest(
                session_id=session_id,
                messages=self._store.snapshot(session_id),
                tools=tools,
                system_prompt=system_prompt,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
            logger.debug(
                f"Iteration {iterations}/{max_iterations}: session={session_id}, "
                f"history_size={len(request.messages)}"
            )

            response = self._provider.send(request)

            if not response.has_tool_calls:
                history_size = self._store.append(session_id, Message.assistant(response.text))
                logger.info(
                    f"Turn completed: session={session_id}, iterations={iterations}, "
                    f"response_length={len(response.text)}, history_size={history_size}"
                )
                return response.text

            # Reject before appending: every recorded call must get its result
            _check_tool_call_ids(response.tool_calls)
            self._store.append(session_id, Message.assistant(response.text, list(response.tool_calls)))
            logger.info(
                f"Model requested {len(response.tool_calls)} tool call(s): "
                f"{', '.join(call.name for call in response.tool_calls)}"
            )
            self._execute_tool_calls(session_id, response.tool_calls, cancel_event)

        logger.warning(f"Max iterations ({max_iterations}) exceeded: session={session_id}")
        raise MaxIterationsExceededError(max_iterations)

    def _execute_tool_calls(
        self,
        session_id: str,
        tool_calls: Sequence[ToolCall],
        cancel_event: Optional[threading.Event]
    ) -> None:
        """
        Execute tool calls one by one, in the order the model issued them.

        Every call gets exactly one tool message, including the ones
        skipped because of cancellation.
        """
        for index, call in enumerate(tool_calls):
            if cancel_event is not None and cancel_event.is_set():
                for skipped in tool_calls[index:]:
                    self._store.append(
                        session_id,
                        Message.tool(skipped.id, TOOL_CANCELLED.format(name=skipped.name))
                    )
                logger.warning(
                    f"Turn cancelled with {len(tool_calls) - index} tool call(s) pending: "
                    f"session={session_id}"
                )
                raise TurnCancelledError(session_id)

            result = self._execute_capability(call, cancel_event)
            self._store.append(session_id, Message.tool(call.id, result))

    def _execute_capability(self, call: ToolCall, cancel_event: Optional[threading.Event]) -> str:
        """
        Execute a capability for a tool call.

        Returns:
            Result string (success output or error message), never raises
        """
        capability = self._registry.try_get(call.name)
        if capability is None:
            logger.warning(f"Tool not found: {call.name}")
            return TOOL_NOT_FOUND.format(name=call.name)

        context = CapabilityContext(
            input=_primary_input(call.input),
            parameters=dict(call.input),
            cancel_event=cancel_event,
        )

        try:
            result = capability.execute(context)

            if not result.success:
                logger.warning(f"Tool '{call.name}' failed: {result.error_code or '-'} {result.error_message}")
                return TOOL_FAILED.format(error=result.error_message)

            logger.info(f"Tool '{call.name}' succeeded")
            if result.output is not None:
                return result.output
            return json.dumps(result.data, default=str)
        except Exception as e:
            logger.exception(f"Exception executing tool '{call.name}'")
            return TOOL_EXCEPTION.format(name=call.name, error=e)

    # ------------------------------------------------------------------
    # Session housekeeping
    # ------------------------------------------------------------------

    def clear_history(self, session_id: str) -> bool:
        """
        Clear conversation history for a session.

        Idempotent; returns False when there was nothing to clear.
        """
        require_text(session_id, "session_id")
        return self._store.clear(session_id)

    def clear_all_histories(self) -> int:
        """Clear every session. Returns the number of sessions removed."""
        return self._store.clear_all()

    @property
    def active_session_count(self) -> int:
        return self._store.session_count

    def get_message_count(self, session_id: str) -> int:
        """Number of messages in a session, 0 if it does not exist."""
        require_text(session_id, "session_id")
        return self._store.message_count(session_id)

    def get_history(self, session_id: str) -> Tuple[Message, ...]:
        """Snapshot of a session's messages (empty for unknown sessions)."""
        require_text(session_id, "session_id")
        return self._store.snapshot(session_id)

    def get_session_info(self, session_id: str) -> Optional[Dict[str, Any]]:
        require_text(session_id, "session_id")
        return self._store.get_session_info(session_id)

    def get_stats(self) -> Dict[str, int]:
        """Session, message and in-flight turn counts of the store."""
        return self._store.get_stats()

    @property
    def registry(self) -> CapabilityRegistry:
        return self._registry


def _check_tool_call_ids(tool_calls: Sequence[ToolCall]) -> None:
    """
    Ensure every tool call has a non-empty id, unique within the response.

    Raises:
        LLMError: The provider returned calls that cannot be correlated
    """
    seen = set()
    for call in tool_calls:
        if not isinstance(call.id, str) or not call.id.strip():
            raise LLMError(f"Provider returned tool call '{call.name}' without an id")
        if call.id in seen:
            raise LLMError(f"Provider returned duplicate tool call id '{call.id}'")
        seen.add(call.id)


def _primary_input(tool_input: Dict[str, Any]) -> str:
    """Value of "input", else "action", else an empty string."""
    for key in PRIMARY_INPUT_KEYS:
        value = tool_input.get(key)
        if value is not None:
            return value if isinstance(value, str) else json.dumps(value)
    return ""


# Singleton instance
_orchestrator: Optional[Orchestrator] = None
_orchestrator_lock = threading.Lock()


def get_orchestrator() -> Orchestrator:
    """
    Get or create the global Orchestrator.

    Built on first use from settings, the Groq provider and the global
    capability registry, so the API can start without an API key as long
    as no chat request arrives.
    """
    global _orchestrator
    with _orchestrator_lock:
        if _orchestrator is None:
            from aide.llm.client import GroqProvider

            settings = get_settings()
            _orchestrator = Orchestrator(
                provider=GroqProvider(),
                registry=get_registry(),
                temperature=settings.llm_temperature,
                max_tokens=settings.llm_max_tokens,
            )
            logger.info("Orchestrator initialized")
        return _orchestrator


def reset_orchestrator() -> None:
    """Reset the global Orchestrator (useful for testing)."""
    global _orchestrator
    with _orchestrator_lock:
        _orchestrator = None
