"""
Session Manager for sitebridge

Handles session storage and retrieval. Sessions are keyed by an opaque id that
the cross-domain bridge carries between sibling domains, so every domain
served by the process must share one store.
"""
from __future__ import annotations
import uuid
import time
from typing import Any, Optional, Dict
from dataclasses import dataclass, field
from threading import Lock


@dataclass
class Session:
    """Represents a user session shared by every domain of the operator."""
    session_id: str
    created_at: float
    last_accessed: float
    data: Dict[str, Any] = field(default_factory=dict)
    previous_url: Optional[str] = None

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    def put(self, key: str, value: Any):
        """Store a value and mark the session as used."""
        self.data[key] = value
        self.last_accessed = time.time()

    def forget(self, key: str):
        self.data.pop(key, None)

    def set_previous_url(self, url: str):
        """Remember the last page for redirect-back."""
        self.previous_url = url

    def touch(self):
        """Update last accessed time."""
        self.last_accessed = time.time()


class SessionManager:
    """
    In-memory session store.
    For production, this should be replaced with Redis or similar.
    """

    def __init__(self, ttl_seconds: int = 3600):
        self._sessions: Dict[str, Session] = {}
        self._lock = Lock()
        self._ttl_seconds = ttl_seconds

    def create_session(self) -> Session:
        """Create a new session and return it."""
        session_id = str(uuid.uuid4())
        now = time.time()

        session = Session(
            session_id=session_id,
            created_at=now,
            last_accessed=now
        )

        with self._lock:
            self._sessions[session_id] = session
            self._cleanup_expired()

        return session

    def get_session(self, session_id: str) -> Optional[Session]:
        """Get a session by ID, returning None if not found or expired."""
        with self._lock:
            session = self._sessions.get(session_id)

            if session is None:
                return None

            # Check if expired
            if time.time() - session.last_accessed > self._ttl_seconds:
                del self._sessions[session_id]
                return None

            session.touch()
            return session

    def get_or_create_session(self, session_id: Optional[str] = None) -> Session:
        """Get existing session or create a new one."""
        if session_id:
            session = self.get_session(session_id)
            if session:
                return session

        return self.create_session()

    def save_session(self, session: Session):
        """Persist a session after the request has used it."""
        session.touch()
        with self._lock:
            self._sessions[session.session_id] = session

    def _cleanup_expired(self):
        """Remove expired sessions. Called within lock."""
        now = time.time()
        expired = [
            sid for sid, session in self._sessions.items()
            if now - session.last_accessed > self._ttl_seconds
        ]
        for sid in expired:
            del self._sessions[sid]

    def get_session_count(self) -> int:
        """Get the number of active sessions."""
        with self._lock:
            self._cleanup_expired()
            return len(self._sessions)

