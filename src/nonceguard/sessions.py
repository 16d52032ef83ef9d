from __future__ import annotations

import secrets
import threading
import time
from collections import OrderedDict
from datetime import timedelta
from typing import Any, Callable, Optional

from .config import SESSION_IDLE_TTL


class Session:
    def __init__(self, session_id: str) -> None:
        self.session_id = session_id
        self.created_at = time.time()
        self.last_accessed = self.created_at
        self._attributes: dict[str, Any] = {}
        self._lock = threading.Lock()

    def get_attribute(self, name: str) -> Any:
        with self._lock:
            return self._attributes.get(name)

    def set_attribute(self, name: str, value: Any) -> None:
        with self._lock:
            self._attributes[name] = value

    def setdefault_attribute(self, name: str, factory: Callable[[], Any]) -> Any:
        with self._lock:
            value = self._attributes.get(name)
            if value is None:
                value = factory()
                self._attributes[name] = value
            return value

    def remove_attribute(self, name: str) -> None:
        with self._lock:
            self._attributes.pop(name, None)

    def touch(self, now: float | None = None) -> None:
        self.last_accessed = now if now is not None else time.time()


class MemorySessionStore:
    # Flask's cookie session only carries JSON, so live sessions are kept here
    # and the cookie holds the session id.

    def __init__(self, idle_ttl: timedelta = SESSION_IDLE_TTL) -> None:
        self._idle_ttl = idle_ttl
        # Ordered by last access, oldest first.
        self._sessions: OrderedDict[str, Session] = OrderedDict()
        self._lock = threading.Lock()

    def get(self, session_id: Optional[str]) -> Optional[Session]:
        if not session_id:
            return None
        now = time.time()
        with self._lock:
            self._cleanup(now)
            session = self._sessions.get(session_id)
            if session is None:
                return None
            if self._is_stale(session, now):
                del self._sessions[session_id]
                return None
            session.touch(now)
            self._sessions.move_to_end(session_id)
            return session

    def create(self) -> Session:
        session = Session(secrets.token_hex(16))
        with self._lock:
            self._cleanup(session.created_at)
            self._sessions[session.session_id] = session
        return session

    def invalidate(self, session_id: str) -> None:
        with self._lock:
            self._sessions.pop(session_id, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def _is_stale(self, session: Session, now: float) -> bool:
        return (now - session.last_accessed) > self._idle_ttl.total_seconds()

    def _cleanup(self, now: float) -> None:
        while self._sessions:
            oldest = next(iter(self._sessions.values()))
            if not self._is_stale(oldest, now):
                break
            self._sessions.popitem(last=False)
