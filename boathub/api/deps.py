"""Dependency injection — DB session, auth session, and service singletons."""

from __future__ import annotations

import hmac
import os
from collections.abc import AsyncGenerator

from fastapi import Depends, Request
from fastapi.security import APIKeyCookie
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from boathub.core.sessions import SessionData, SessionStore
from boathub.dao.boat_dao import BoatDAO
from boathub.dao.user_dao import UserDAO
from boathub.services import AuthenticationError, AuthorizationError
from boathub.services.auth_service import AuthService, Principal
from boathub.services.boat_service import BoatService

SESSION_COOKIE = os.environ.get("BOATHUB_SESSION_COOKIE", "BOATHUB_SESSION")
CSRF_HEADER = "X-CSRF-TOKEN"
CSRF_PARAMETER = "_csrf"

# ---------------------------------------------------------------------------
# DAO / service singletons
# ---------------------------------------------------------------------------
_user_dao = UserDAO()
_boat_dao = BoatDAO()

_session_store = SessionStore()
_auth_service = AuthService(_user_dao, _session_store)
_boat_service = BoatService(_boat_dao)

# ---------------------------------------------------------------------------
# Engine / session factory (initialised by app lifespan)
# ---------------------------------------------------------------------------
_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def init_session_factory(database_url: str | None = None) -> async_sessionmaker[AsyncSession]:
    """Create the async engine and session factory. Called once at startup."""
    global _engine, _session_factory  # noqa: PLW0603
    url = database_url or os.environ.get(
        "BOATHUB_DATABASE_URL", "postgresql+asyncpg://localhost/boathub"
    )
    if url.startswith("sqlite"):
        _engine = create_async_engine(url)
    else:
        _engine = create_async_engine(
            url,
            pool_pre_ping=True,
            pool_size=10,
            max_overflow=20,
            pool_recycle=1800,
        )
    _session_factory = async_sessionmaker(_engine, expire_on_commit=False)
    return _session_factory


def get_engine() -> AsyncEngine:
    if _engine is None:
        raise RuntimeError("call init_session_factory() first")
    return _engine


async def dispose_engine() -> None:
    """Dispose the async engine, closing all pooled connections."""
    global _engine  # noqa: PLW0603
    if _engine is not None:
        await _engine.dispose()
        _engine = None


def set_session_factory(factory: async_sessionmaker[AsyncSession]) -> None:
    """Override session factory (for testing)."""
    global _session_factory  # noqa: PLW0603
    _session_factory = factory


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield a per-request session with automatic commit/rollback."""
    if _session_factory is None:
        raise RuntimeError("call init_session_factory() before handling requests")
    async with _session_factory() as session:
        async with session.begin():
            yield session


# ---------------------------------------------------------------------------
# Service getters (for Depends())
# ---------------------------------------------------------------------------


def get_auth_service() -> AuthService:
    return _auth_service


def get_boat_service() -> BoatService:
    return _boat_service


# ---------------------------------------------------------------------------
# Auth dependencies
# ---------------------------------------------------------------------------

_session_cookie = APIKeyCookie(name=SESSION_COOKIE, auto_error=False)


async def get_session_token(token: str | None = Depends(_session_cookie)) -> str | None:
    """Raw session token from the cookie, if any."""
    return token


async def get_current_session(
    token: str | None = Depends(get_session_token),
    auth: AuthService = Depends(get_auth_service),
) -> SessionData:
    """Resolve the session cookie to a live session or raise 401."""
    data = auth.session_for(token)
    if data is None:
        raise AuthenticationError("not authenticated")
    return data


async def get_current_principal(
    data: SessionData = Depends(get_current_session),
) -> Principal:
    return Principal(username=data.username, roles=data.roles)


def _csrf_enabled() -> bool:
    return os.environ.get("BOATHUB_CSRF_ENABLED", "true").lower() not in ("0", "false", "no")


async def verify_csrf(
    request: Request,
    data: SessionData = Depends(get_current_session),
) -> None:
    """Require the session's anti-forgery token on state-changing requests.

    The token is read from the ``X-CSRF-TOKEN`` header, falling back to the
    ``_csrf`` query parameter.
    """
    if not _csrf_enabled():
        return
    supplied = request.headers.get(CSRF_HEADER) or request.query_params.get(CSRF_PARAMETER, "")
    if not hmac.compare_digest(supplied.encode(), data.csrf_token.encode()):
        raise AuthorizationError("invalid or missing CSRF token")
