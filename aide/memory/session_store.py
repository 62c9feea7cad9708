"""
Session Store - In-memory conversation histories keyed by session id.

One coarse-grained lock guards the session map and every append, so
each mutation is atomic and appends to one session never interleave
mid-message. The lock is only held for the mutation or snapshot itself,
never across a network call.

Whole turns are serialized separately: ``with store.turn_lock(session_id)``
holds a per-session lock for an entire orchestrator call, so two
concurrent requests on the same session run one after the other while
different sessions proceed independently. Turn locks are reference
counted and dropped once no turn holds or waits on them.

Architecture note:
Histories live in process memory only and are lost on restart.
"""
import threading
from contextlib import contextmanager
from typing import Dict, Iterator, Optional, Tuple

from aide.core.logging_config import get_logger
from aide.memory.conversation import ConversationMemory, Message

logger = get_logger(__name__)


class _TurnLock:
    """A session's turn lock plus the number of turns holding or waiting on it."""

    __slots__ = ("lock", "users")

    def __init__(self):
        self.lock = threading.Lock()
        self.users = 0


class SessionStore:
    """
    Thread-safe store of conversation histories.

    Sessions are created lazily by the first append and destroyed only
    by clear() / clear_all().

    Example:
        >>> store = SessionStore()
        >>> store.append("abc", Message.user("Hello!"))
        1
        >>> store.snapshot("abc")[0].content
        'Hello!'
    """

    def __init__(self):
        self._sessions: Dict[str, ConversationMemory] = {}
        self._turn_locks: Dict[str, _TurnLock] = {}
        self._lock = threading.Lock()

    def append(self, session_id: str, message: Message) -> int:
        """
        Append a message, creating the session if needed.

        Args:
            session_id: The session identifier
            message: The message to append

        Returns:
            The session's message count after the append
        """
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                session = ConversationMemory(session_id)
                self._sessions[session_id] = session
                logger.info(f"Created new session: {session_id}")
            session.append(message)
            return session.message_count

    def snapshot(self, session_id: str) -> Tuple[Message, ...]:
        """Immutable copy of a session's history (empty for unknown sessions)."""
        with self._lock:
            session = self._sessions.get(session_id)
            return session.snapshot() if session else ()

    def message_count(self, session_id: str) -> int:
        """Number of messages in a session, 0 if it does not exist."""
        with self._lock:
            session = self._sessions.get(session_id)
            return session.message_count if session else 0

    def get_session_info(self, session_id: str) -> Optional[Dict]:
        """Session summary dict, or None if not found."""
        with self._lock:
            session = self._sessions.get(session_id)
            return session.get_summary() if session else None

    def clear(self, session_id: str) -> bool:
        """
        Remove a session completely.

        Idempotent: clearing an unknown session is not an error.

        Returns:
            True if a session was removed, False if none existed
        """
        with self._lock:
            removed = self._sessions.pop(session_id, None) is not None
        if removed:
            logger.info(f"Cleared session: {session_id}")
        return removed

    def clear_all(self) -> int:
        """Remove every session. Returns how many were removed."""
        with self._lock:
            count = len(self._sessions)
            self._sessions.clear()
        logger.info(f"Cleared all sessions: {count}")
        return count

    @property
    def session_count(self) -> int:
        with self._lock:
            return len(self._sessions)

    @contextmanager
    def turn_lock(self, session_id: str) -> Iterator[None]:
        """
        Hold the lock that serializes whole turns on one session.

        Every turn that holds or waits on a session's lock shares the same
        lock object, including across clear(). The entry is removed when
        the last of them leaves, so finished sessions keep nothing behind.
        """
        with self._lock:
            entry = self._turn_locks.get(session_id)
            if entry is None:
                entry = _TurnLock()
                self._turn_locks[session_id] = entry
            entry.users += 1

        try:
            with entry.lock:
                yield
        finally:
            with self._lock:
                entry.users -= 1
                if entry.users == 0:
                    del self._turn_locks[session_id]

    def get_stats(self) -> Dict:
        """
        Get store statistics.

        Returns:
            Dict with session, message and in-flight turn counts
        """
        with self._lock:
            return {
                "active_sessions": len(self._sessions),
                "total_messages": sum(s.message_count for s in self._sessions.values()),
                "turns_in_progress": sum(e.users for e in self._turn_locks.values()),
                "turn_locks": len(self._turn_locks),
            }
