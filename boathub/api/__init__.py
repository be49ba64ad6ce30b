"""BoatHub REST API — FastAPI application factory."""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from boathub.api.deps import (
    dispose_engine,
    get_auth_service,
    get_engine,
    init_session_factory,
)
from boathub.api.errors import register_error_handlers
from boathub.api.middleware.request_id import RequestIDMiddleware
from boathub.api.routers import auth, boats, csrf
from boathub.core.database import create_schema
from boathub.core.logging import setup_logging

log = structlog.get_logger(__name__)


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: init DB, create schema, seed users. Shutdown: dispose engine."""
    factory = init_session_factory()
    await create_schema(get_engine())
    auth_svc = get_auth_service()
    async with factory() as session:
        async with session.begin():
            created = await auth_svc.ensure_seed_users(session)
    log.info("app.started", seed_users_created=created)
    yield
    await dispose_engine()


def create_app() -> FastAPI:
    """Build and return the FastAPI application."""
    setup_logging()

    app = FastAPI(
        title="BoatHub",
        description="Boat catalog with session-based authentication",
        docs_url="/api/docs",
        openapi_url="/api/openapi.json",
        lifespan=_lifespan,
    )

    register_error_handlers(app)

    cors_origins = os.environ.get(
        "BOATHUB_CORS_ORIGINS",
        "http://localhost:8080,http://localhost:3000,http://localhost:5173",
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in cors_origins.split(",")],
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        max_age=3600,
    )
    app.add_middleware(RequestIDMiddleware)

    @app.get("/health", tags=["ops"])
    async def health() -> JSONResponse:
        return JSONResponse({"status": "ok"})

    app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
    app.include_router(csrf.router, prefix="/api", tags=["auth"])
    app.include_router(boats.router, prefix="/api/v1/boats", tags=["boats"])

    return app
