"""SessionRegistry - process-local lookup of open sessions by id."""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .session import SSESession

logger = logging.getLogger(__name__)


class SessionRegistry:
    """Thread-safe mapping from session id to open session.

    Sessions insert themselves when setup completes and remove themselves on
    teardown. Everything else only reads.
    """

    def __init__(self) -> None:
        self._sessions: dict[str, SSESession] = {}
        self._lock = threading.Lock()

    def set(self, session_id: str, session: SSESession) -> None:
        with self._lock:
            self._sessions[session_id] = session
        logger.debug("Registered session %s", session_id)

    def delete(self, session_id: str, session: SSESession | None = None) -> None:
        """Remove an entry. Missing ids are ignored.

        When ``session`` is given, the entry is only removed if it still maps
        to that exact session.
        """
        with self._lock:
            current = self._sessions.get(session_id)
            if current is None:
                return
            if session is not None and current is not session:
                return
            del self._sessions[session_id]
        logger.debug("Unregistered session %s", session_id)

    def get(self, session_id: str) -> SSESession | None:
        with self._lock:
            return self._sessions.get(session_id)

    def ids(self) -> list[str]:
        with self._lock:
            return list(self._sessions)

    def sessions(self) -> list[SSESession]:
        """Snapshot of registered sessions, safe to iterate while they close."""
        with self._lock:
            return list(self._sessions.values())

    def __contains__(self, session_id: object) -> bool:
        with self._lock:
            return session_id in self._sessions

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)


# Process-scoped default
session_registry = SessionRegistry()
