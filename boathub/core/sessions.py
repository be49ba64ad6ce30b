"""Server-side session store — token -> authenticated principal.

A single process-wide map shared by every request. One principal owns at
most one live session: creating a new one evicts the previous token.
"""

from __future__ import annotations

import os
import secrets
import threading
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

_ENV_SESSION_TTL = "BOATHUB_SESSION_TTL_MINUTES"
_DEFAULT_TTL_MINUTES = 30


def _default_ttl() -> timedelta:
    return timedelta(minutes=int(os.environ.get(_ENV_SESSION_TTL, _DEFAULT_TTL_MINUTES)))


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class SessionData:
    """State bound to one session token."""

    token: str
    username: str
    roles: frozenset[str]
    csrf_token: str
    created_at: datetime
    last_accessed_at: datetime = field(default_factory=_utcnow)


class SessionStore:
    """Thread-safe in-memory session registry with idle expiry."""

    def __init__(self, ttl: timedelta | None = None) -> None:
        self._ttl = ttl if ttl is not None else _default_ttl()
        self._lock = threading.Lock()
        self._sessions: dict[str, SessionData] = {}
        self._by_username: dict[str, str] = {}

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def create(self, username: str, roles: frozenset[str]) -> SessionData:
        """Open a new session for *username*, invalidating any older one."""
        now = _utcnow()
        data = SessionData(
            token=secrets.token_urlsafe(32),
            username=username,
            roles=roles,
            csrf_token=secrets.token_urlsafe(32),
            created_at=now,
            last_accessed_at=now,
        )
        with self._lock:
            previous = self._by_username.get(username)
            if previous is not None:
                self._sessions.pop(previous, None)
            self._sessions[data.token] = data
            self._by_username[username] = data.token
        return data

    def get(self, token: str | None) -> SessionData | None:
        """Return the live session for *token* and refresh its idle timer."""
        if not token:
            return None
        now = _utcnow()
        with self._lock:
            data = self._sessions.get(token)
            if data is None:
                return None
            if now - data.last_accessed_at > self._ttl:
                self._remove(data)
                return None
            data.last_accessed_at = now
            return data

    def invalidate(self, token: str | None) -> bool:
        """Drop *token*. Returns whether a live session was removed."""
        if not token:
            return False
        with self._lock:
            data = self._sessions.get(token)
            if data is None:
                return False
            self._remove(data)
            return True

    def purge_expired(self) -> int:
        """Remove every idle-expired session. Returns the number removed."""
        now = _utcnow()
        with self._lock:
            expired = [s for s in self._sessions.values() if now - s.last_accessed_at > self._ttl]
            for data in expired:
                self._remove(data)
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    # Caller must hold the lock
    def _remove(self, data: SessionData) -> None:
        self._sessions.pop(data.token, None)
        if self._by_username.get(data.username) == data.token:
            del self._by_username[data.username]
