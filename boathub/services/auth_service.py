"""AuthService — session-cookie authentication and seed account bootstrap."""

import os
from dataclasses import dataclass

import bcrypt
import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from boathub.core.sessions import SessionData, SessionStore
from boathub.dao.user_dao import UserDAO
from boathub.services import AuthenticationError

log = structlog.get_logger(__name__)

# ---------------------------------------------------------------------------
# Password hashing
# ---------------------------------------------------------------------------


def hash_password(password: str) -> str:
    """Hash a plaintext password with bcrypt."""
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


def _verify_password(password: str, password_hash: str) -> bool:
    """Verify a plaintext password against a bcrypt hash."""
    return bcrypt.checkpw(password.encode(), password_hash.encode())


# Pre-computed bcrypt hash for timing-safe login (user-not-found path)
_DUMMY_HASH = bcrypt.hashpw(b"dummy", bcrypt.gensalt()).decode()

# Every authenticated principal gets the same single role
USER_ROLE = "ROLE_USER"

# Identity the framework reports for a session that never logged in
ANONYMOUS_USERNAME = "anonymousUser"

_ENV_SEED_USERS = "BOATHUB_SEED_USERS"


@dataclass(frozen=True)
class Principal:
    """Authenticated identity bound to a session."""

    username: str
    roles: frozenset[str]


def parse_seed_users(raw: str | None) -> list[tuple[str, str]]:
    """Parse ``"alice:pw1, bob:pw2"`` into ``[("alice", "pw1"), ("bob", "pw2")]``.

    Entries without a ``:`` or with an empty username are ignored.
    """
    if not raw:
        return []
    pairs = []
    for entry in raw.split(","):
        username, sep, password = entry.strip().partition(":")
        if not sep or not username:
            continue
        pairs.append((username, password))
    return pairs


# ---------------------------------------------------------------------------
# AuthService
# ---------------------------------------------------------------------------


class AuthService:
    """Credential checks against the users table; session state lives in *session_store*."""

    def __init__(self, user_dao: UserDAO, session_store: SessionStore) -> None:
        self._user_dao = user_dao
        self._sessions = session_store

    # -- Bootstrap ---------------------------------------------------------

    async def ensure_seed_users(self, session: AsyncSession) -> int:
        """Provision accounts listed in ``BOATHUB_SEED_USERS``.

        Existing usernames are left untouched. Returns the number created.
        """
        created = 0
        for username, password in parse_seed_users(os.environ.get(_ENV_SEED_USERS)):
            _, was_created = await self._user_dao.create_if_absent(
                session,
                username=username,
                password_hash=hash_password(password),
            )
            if was_created:
                created += 1
                log.info("auth.seed_user_created", username=username)
        return created

    # -- Login / Session ---------------------------------------------------

    async def authenticate(self, session: AsyncSession, username: str, password: str) -> SessionData:
        """Verify credentials and open a server-side session.

        Raises :class:`AuthenticationError` when the user does not exist, is
        disabled, or the password does not match. The three cases are not
        distinguished to the caller. A previous session of the same user is
        invalidated.
        """
        user = await self._user_dao.get_by_username(session, username)
        if user is None:
            # Constant-time: run bcrypt even when user doesn't exist
            _verify_password(password, _DUMMY_HASH)
            log.info("auth.login_failed", username=username, reason="unknown_user")
            raise AuthenticationError("invalid credentials")
        if not _verify_password(password, user.password_hash):
            log.info("auth.login_failed", username=username, reason="bad_password")
            raise AuthenticationError("invalid credentials")
        if not user.enabled:
            log.info("auth.login_failed", username=username, reason="disabled")
            raise AuthenticationError("invalid credentials")

        self._sessions.purge_expired()
        data = self._sessions.create(user.username, frozenset({USER_ROLE}))
        log.info("auth.login", username=user.username)
        return data

    def session_for(self, token: str | None) -> SessionData | None:
        """Return the live session bound to *token*, or None."""
        data = self._sessions.get(token)
        if data is None or data.username == ANONYMOUS_USERNAME:
            return None
        return data

    def current_principal(self, token: str | None) -> Principal | None:
        """Return the identity bound to *token*, or None when not authenticated."""
        data = self.session_for(token)
        if data is None:
            return None
        return Principal(username=data.username, roles=data.roles)

    def logout(self, token: str | None) -> None:
        """Invalidate *token*. Safe to call on unknown or expired tokens."""
        if self._sessions.invalidate(token):
            log.info("auth.logout")
