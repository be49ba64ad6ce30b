"""Anti-forgery token endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from boathub.api.deps import CSRF_HEADER, CSRF_PARAMETER, get_current_session
from boathub.api.schemas.auth import CsrfTokenResponse
from boathub.core.sessions import SessionData

router = APIRouter()


@router.get("/csrf-token", response_model=CsrfTokenResponse)
async def csrf_token(
    data: SessionData = Depends(get_current_session),
) -> CsrfTokenResponse:
    """Return the token clients must echo in the ``X-CSRF-TOKEN`` header."""
    return CsrfTokenResponse(
        token=data.csrf_token,
        header_name=CSRF_HEADER,
        parameter_name=CSRF_PARAMETER,
    )
