"""Tests for messages and the in-memory session store."""

import threading
import time

import pytest

from aide.memory import ConversationMemory, Message, Role, SessionStore, ToolCall


class TestMessage:
    """Tests for the Message value type."""

    def test_factories(self):
        call = ToolCall(id="c1", name="calculator", input={"a": 1})

        user = Message.user("hi")
        assistant = Message.assistant("", [call])
        tool = Message.tool("c1", "42")

        assert user.role == Role.USER
        assert assistant.tool_calls == (call,)
        assert assistant.has_tool_calls
        assert tool.tool_call_id == "c1"

    def test_assistant_without_calls(self):
        message = Message.assistant("done")

        assert message.tool_calls is None
        assert not message.has_tool_calls

    def test_role_string_is_coerced(self):
        assert Message(role="user", content="hi").role is Role.USER

    def test_tool_message_requires_call_id(self):
        with pytest.raises(ValueError):
            Message(role=Role.TOOL, content="orphan")

    def test_only_assistant_carries_tool_calls(self):
        with pytest.raises(ValueError):
            Message(role=Role.USER, content="hi", tool_calls=(ToolCall(id="c1", name="x"),))

    def test_to_dict(self):
        message = Message.assistant(None, [ToolCall(id="c1", name="hello_world", input={"name": "Ann"})])

        data = message.to_dict()

        assert data["role"] == "assistant"
        assert data["content"] is None
        assert data["tool_calls"] == [{"id": "c1", "name": "hello_world", "input": {"name": "Ann"}}]


class TestConversationMemory:
    """Tests for a single session's history."""

    def test_summary_counts_roles(self):
        memory = ConversationMemory("abc")
        memory.append(Message.user("hi"))
        memory.append(Message.assistant("", [ToolCall(id="c1", name="x")]))
        memory.append(Message.tool("c1", "ok"))
        memory.append(Message.assistant("done"))

        summary = memory.get_summary()

        assert summary["message_count"] == 4
        assert summary["user_messages"] == 1
        assert summary["assistant_messages"] == 2
        assert summary["tool_messages"] == 1


class TestSessionStore:
    """Tests for SessionStore."""

    def test_append_creates_session_lazily(self, store):
        assert store.session_count == 0
        assert store.message_count("abc") == 0

        assert store.append("abc", Message.user("hi")) == 1

        assert store.session_count == 1
        assert store.get_session_info("abc") is not None

    def test_snapshot_is_immutable_copy(self, store):
        store.append("abc", Message.user("one"))
        snapshot = store.snapshot("abc")

        store.append("abc", Message.assistant("two"))

        assert isinstance(snapshot, tuple)
        assert len(snapshot) == 1
        assert store.message_count("abc") == 2

    def test_snapshot_of_unknown_session_is_empty(self, store):
        assert store.snapshot("missing") == ()
        assert store.session_count == 0

    def test_sessions_are_isolated(self, store):
        store.append("a", Message.user("for a"))
        store.append("b", Message.user("for b"))

        assert [m.content for m in store.snapshot("a")] == ["for a"]
        assert [m.content for m in store.snapshot("b")] == ["for b"]

    def test_clear_is_idempotent(self, store):
        store.append("abc", Message.user("hi"))

        assert store.clear("abc") is True
        assert store.clear("abc") is False
        assert store.clear("never") is False
        assert store.session_count == 0

    def test_clear_all(self, store):
        store.append("a", Message.user("hi"))
        store.append("b", Message.user("hi"))

        assert store.clear_all() == 2
        assert store.session_count == 0
        assert store.clear_all() == 0

    def test_session_info(self, store):
        store.append("abc", Message.user("hi"))

        info = store.get_session_info("abc")

        assert info["session_id"] == "abc"
        assert info["message_count"] == 1
        assert store.get_session_info("missing") is None

    def test_turn_lock_entry_dropped_after_turn(self, store):
        with store.turn_lock("abc"):
            store.append("abc", Message.user("hi"))
            assert store.get_stats()["turn_locks"] == 1
            assert store.get_stats()["turns_in_progress"] == 1

        store.clear("abc")

        assert store.get_stats()["turn_locks"] == 0
        assert store.get_stats()["turns_in_progress"] == 0

    def test_turn_lock_released_when_turn_raises(self, store):
        with pytest.raises(RuntimeError):
            with store.turn_lock("abc"):
                raise RuntimeError("turn failed")

        assert store.get_stats()["turn_locks"] == 0
        # A later turn can take the lock again
        with store.turn_lock("abc"):
            pass

    def test_waiting_turn_shares_lock_across_clear(self, store):
        entered = threading.Event()
        release = threading.Event()
        order = []

        def first_turn():
            with store.turn_lock("abc"):
                entered.set()
                release.wait(timeout=5)
                order.append("first")

        def second_turn():
            with store.turn_lock("abc"):
                order.append("second")

        first = threading.Thread(target=first_turn)
        first.start()
        assert entered.wait(timeout=5)
        second = threading.Thread(target=second_turn)
        second.start()

        deadline = time.monotonic() + 5
        while store.get_stats()["turns_in_progress"] < 2 and time.monotonic() < deadline:
            time.sleep(0.01)
        store.clear("abc")
        assert store.get_stats()["turns_in_progress"] == 2
        assert store.get_stats()["turn_locks"] == 1
        assert order == []

        release.set()
        first.join(timeout=5)
        second.join(timeout=5)

        assert order == ["first", "second"]
        assert store.get_stats()["turn_locks"] == 0

    def test_stats(self, store):
        store.append("a", Message.user("hi"))
        store.append("a", Message.assistant("hello"))
        store.append("b", Message.user("hi"))

        assert store.get_stats() == {
            "active_sessions": 2,
            "total_messages": 3,
            "turns_in_progress": 0,
            "turn_locks": 0,
        }

    def test_concurrent_appends_are_not_lost(self, store):
        def append_many(session_id):
            for i in range(200):
                store.append(session_id, Message.user(f"{session_id}-{i}"))

        threads = [threading.Thread(target=append_many, args=(sid,)) for sid in ("a", "a", "b", "c")]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=10)

        assert store.message_count("a") == 400
        assert store.message_count("b") == 200
        assert store.session_count == 3
