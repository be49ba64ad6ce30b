"""Unified error handling — ServiceError + RequestValidationError → JSON."""

from __future__ import annotations

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from boathub.services import (
    AuthenticationError,
    AuthorizationError,
    InternalError,
    NotFoundError,
    ServiceError,
    ValidationError,
)

log = structlog.get_logger(__name__)

_STATUS_MAP: dict[type[ServiceError], int] = {
    NotFoundError: 404,
    ValidationError: 400,
    AuthenticationError: 401,
    AuthorizationError: 403,
    InternalError: 500,
}

_GENERIC_ERROR = "An error occurred. Please try again later."


async def _service_error_handler(_request: Request, exc: ServiceError) -> JSONResponse:
    status = 500
    for cls in type(exc).__mro__:
        if cls in _STATUS_MAP:
            status = _STATUS_MAP[cls]
            break
    if status >= 500:
        log.error("request.service_error", error=str(exc), error_type=type(exc).__name__)
        return JSONResponse(status_code=status, content={"detail": _GENERIC_ERROR})
    log.warning("request.rejected", status_code=status, detail=str(exc))
    return JSONResponse(status_code=status, content={"detail": str(exc)})


async def _validation_error_handler(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    messages = []
    for err in errors:
        loc = " → ".join(str(part) for part in err["loc"])
        messages.append(f"{loc}: {err['msg']}")
    detail = "; ".join(messages)
    log.warning("request.rejected", status_code=400, detail=detail)
    return JSONResponse(status_code=400, content={"detail": detail})


async def _store_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Classify database and connectivity failures as :class:`InternalError`."""
    log.error("request.store_error", error=str(exc), error_type=type(exc).__name__)
    return await _service_error_handler(request, InternalError("store unavailable"))


async def _unhandled_error_handler(_request: Request, exc: Exception) -> JSONResponse:
    log.exception("request.unhandled_error", error_type=type(exc).__name__)
    return JSONResponse(status_code=500, content={"detail": _GENERIC_ERROR})


def register_error_handlers(app: FastAPI) -> None:
    """Register exception handlers on the app."""
    app.add_exception_handler(ServiceError, _service_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(SQLAlchemyError, _store_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _unhandled_error_handler)
