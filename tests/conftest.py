"""Pytest fixtures for Aide tests."""

import os
import threading

import pytest

from aide.capabilities import CapabilityRegistry, build_default_registry, reset_registry
from aide.capabilities.base import (
    Capability,
    CapabilityContext,
    CapabilityResult,
    PropertySchema,
    ToolSchema,
)
from aide.core.config import get_settings
from aide.llm.base import LLMRequest, LLMResponse
from aide.memory.conversation import ToolCall
from aide.memory.session_store import SessionStore
from aide.services.orchestrator import Orchestrator, reset_orchestrator


class ScriptedProvider:
    """
    Provider fake that replays scripted responses.

    Each script entry is either an LLMResponse or a callable taking the
    LLMRequest and returning one. With repeat_last=True the final entry
    is replayed forever (a model that never stops calling tools).
    """

    name = "Scripted"

    def __init__(self, responses, repeat_last=False):
        self.responses = list(responses)
        self.repeat_last = repeat_last
        self.requests = []
        self._lock = threading.Lock()

    @property
    def call_count(self):
        return len(self.requests)

    def send(self, request: LLMRequest) -> LLMResponse:
        with self._lock:
            index = len(self.requests)
            self.requests.append(request)
        if index >= len(self.responses):
            if not self.repeat_last or not self.responses:
                raise AssertionError(f"ScriptedProvider ran out of responses at request {index + 1}")
            index = len(self.responses) - 1
        response = self.responses[index]
        return response(request) if callable(response) else response


def text_response(text):
    return LLMResponse(text=text, stop_reason="stop")


def tool_response(*calls, text=""):
    """LLMResponse requesting the given (id, name, input) tool calls."""
    return LLMResponse(
        text=text,
        tool_calls=tuple(ToolCall(id=call_id, name=name, input=dict(args)) for call_id, name, args in calls),
        stop_reason="tool_calls",
    )


class EchoCapability(Capability):
    """Returns its primary input and records every context it receives."""

    name = "echo"
    description = "Echo the input back"

    def __init__(self):
        self.contexts = []

    def get_input_schema(self) -> ToolSchema:
        return ToolSchema(
            properties={"input": PropertySchema(type="string", description="Text to echo")},
            required=("input",),
        )

    def execute(self, context: CapabilityContext) -> CapabilityResult:
        self.contexts.append(context)
        return CapabilityResult.ok(f"echo: {context.input}")


class ExplodingCapability(Capability):
    name = "explode"
    description = "Always raises"

    def get_input_schema(self) -> ToolSchema:
        return ToolSchema()

    def execute(self, context: CapabilityContext) -> CapabilityResult:
        raise RuntimeError("kaboom")


class FailingCapability(Capability):
    name = "failing"
    description = "Always reports failure"

    def get_input_schema(self) -> ToolSchema:
        return ToolSchema()

    def execute(self, context: CapabilityContext) -> CapabilityResult:
        return CapabilityResult.fail("disk full", error_code="DISK_FULL")


class DataCapability(Capability):
    name = "data_only"
    description = "Returns structured data without output text"

    def get_input_schema(self) -> ToolSchema:
        return ToolSchema()

    def execute(self, context: CapabilityContext) -> CapabilityResult:
        return CapabilityResult.ok(data={"answer": 42, "unit": "things"})


@pytest.fixture(autouse=True)
def reset_settings(tmp_path_factory, monkeypatch):
    """Isolate every test from the developer's environment and singletons."""
    monkeypatch.setenv("APP_ENV", "development")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("LOG_DIR", str(tmp_path_factory.getbasetemp() / "logs"))
    monkeypatch.setenv("GROQ_API_KEY", "")
    monkeypatch.delenv("SYSTEM_PROMPT", raising=False)
    monkeypatch.delenv("MAX_TOOL_ITERATIONS", raising=False)
    get_settings.cache_clear()
    reset_registry()
    reset_orchestrator()
    yield
    get_settings.cache_clear()
    reset_registry()
    reset_orchestrator()


@pytest.fixture
def registry():
    """Default registry (hello_world, system_info, calculator)."""
    return build_default_registry()


@pytest.fixture
def empty_registry():
    return CapabilityRegistry()


@pytest.fixture
def store():
    return SessionStore()


@pytest.fixture
def make_orchestrator(store):
    """Factory: orchestrator over a scripted provider."""

    def _make(responses, registry=None, repeat_last=False):
        provider = ScriptedProvider(responses, repeat_last=repeat_last)
        orchestrator = Orchestrator(
            provider=provider,
            registry=registry if registry is not None else CapabilityRegistry(),
            session_store=store,
        )
        return orchestrator, provider

    return _make


@pytest.fixture
def test_client(registry):
    """
    TestClient for the FastAPI app.

    The orchestrator dependency is replaced with one driven by a
    ScriptedProvider; set ``client.provider.responses`` in the test.
    """
    from fastapi.testclient import TestClient

    from aide.api.main import app
    from aide.capabilities import get_registry
    from aide.services.orchestrator import get_orchestrator

    provider = ScriptedProvider([])
    orchestrator = Orchestrator(provider=provider, registry=registry)

    app.dependency_overrides[get_orchestrator] = lambda: orchestrator
    app.dependency_overrides[get_registry] = lambda: registry

    client = TestClient(app, raise_server_exceptions=False)
    client.provider = provider
    client.orchestrator = orchestrator
    yield client

    app.dependency_overrides.clear()
