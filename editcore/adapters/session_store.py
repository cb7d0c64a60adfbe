"""In-memory editing session store.

Holds one InMemorySurface per editing session for the HTTP shell.
Suitable for single-process deployments; sessions expire after a TTL.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from uuid import uuid4

from editcore.adapters.memory_surface import InMemorySurface

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass
class EditorSession:
    """One editing session: a surface plus bookkeeping."""

    session_id: str
    surface: InMemorySurface
    created_at: datetime
    last_used_at: datetime
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)


class InMemoryEditorSessionStore:
    """In-memory session storage keyed by session id."""

    def __init__(
        self,
        ttl: timedelta = timedelta(hours=2),
        max_sessions: int = 1000,
        history_limit: int = 200,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._sessions: dict[str, EditorSession] = {}
        self._lock = threading.Lock()
        self._ttl = ttl
        self._max_sessions = max_sessions
        self._history_limit = history_limit
        self._clock = clock

    def create(self, markup: str) -> EditorSession:
        """Create a session whose surface starts with markup."""
        now = self._clock()
        session = EditorSession(
            session_id=uuid4().hex,
            surface=InMemorySurface(markup, history_limit=self._history_limit),
            created_at=now,
            last_used_at=now,
        )
        with self._lock:
            self._purge_expired(now)
            while len(self._sessions) >= self._max_sessions:
                oldest = min(self._sessions.values(), key=lambda s: s.last_used_at)
                del self._sessions[oldest.session_id]
                logger.info("Evicted session %s (store full)", oldest.session_id)
            self._sessions[session.session_id] = session
        logger.info("Created session %s", session.session_id)
        return session

    def get(self, session_id: str) -> EditorSession | None:
        """Get a live session and mark it used."""
        now = self._clock()
        with self._lock:
            self._purge_expired(now)
            session = self._sessions.get(session_id)
            if session is not None:
                session.last_used_at = now
            return session

    def delete(self, session_id: str) -> bool:
        """Delete a session. Returns whether it existed."""
        with self._lock:
            return self._sessions.pop(session_id, None) is not None

    def clear(self) -> None:
        """Clear all sessions - useful for testing."""
        with self._lock:
            self._sessions.clear()

    def __len__(self) -> int:
        return len(self._sessions)

    def _purge_expired(self, now: datetime) -> None:
        expired = [k for k, v in self._sessions.items() if now - v.last_used_at > self._ttl]
        for session_id in expired:
            del self._sessions[session_id]
            logger.info("Expired session %s", session_id)
