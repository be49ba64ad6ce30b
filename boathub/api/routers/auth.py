"""Auth router — login, logout, current user."""

from __future__ import annotations

import os

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from boathub.api.deps import (
    SESSION_COOKIE,
    get_auth_service,
    get_current_principal,
    get_session,
    get_session_token,
)
from boathub.api.schemas.auth import LoginRequest, UserResponse
from boathub.services.auth_service import AuthService, Principal

router = APIRouter()


def _cookie_secure() -> bool:
    return os.environ.get("BOATHUB_COOKIE_SECURE", "false").lower() in ("1", "true", "yes")


@router.post("/login", response_model=UserResponse)
async def login(
    body: LoginRequest,
    response: Response,
    token: str | None = Depends(get_session_token),
    session: AsyncSession = Depends(get_session),
    auth: AuthService = Depends(get_auth_service),
) -> UserResponse:
    data = await auth.authenticate(session, body.username, body.password)
    # A token presented by the client is never reused across logins
    if token is not None and token != data.token:
        auth.logout(token)
    response.set_cookie(
        SESSION_COOKIE,
        data.token,
        max_age=None,
        httponly=True,
        samesite="lax",
        secure=_cookie_secure(),
        path="/",
    )
    return UserResponse(username=data.username, authenticated=True)


@router.post("/logout")
async def logout(
    response: Response,
    token: str | None = Depends(get_session_token),
    auth: AuthService = Depends(get_auth_service),
) -> dict:
    auth.logout(token)
    response.delete_cookie(SESSION_COOKIE, path="/")
    return {"detail": "Logged out successfully"}


@router.get("/user", response_model=UserResponse)
async def current_user(
    principal: Principal = Depends(get_current_principal),
) -> UserResponse:
    return UserResponse(username=principal.username, authenticated=True)
