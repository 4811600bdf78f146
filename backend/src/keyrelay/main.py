"""FastAPI application entry-point.

Assembles routers, middleware, exception handlers, and lifecycle hooks.
"""

from __future__ import annotations

import random
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

import httpx
import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse

from keyrelay.adapters.inbound.rest.routers import generate_router, health_router
from keyrelay.config import Settings, get_settings
from keyrelay.dependencies import Container, build_container
from keyrelay.shared.errors import register_exception_handlers
from keyrelay.shared.middleware import (
    LoggingMiddleware,
    MetricsMiddleware,
    RequestIdMiddleware,
)
from keyrelay.shared.observability import configure_logging

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifecycle — startup & shutdown hooks."""
    settings: Settings = app.state.settings
    container: Container = app.state.container
    configure_logging(
        log_level=settings.log_level,
        json_logs=settings.is_production,
    )
    logger.info(
        "application_starting",
        env=settings.app_env.value,
        gemini_keys=container.provider_configs["gemini"].key_count,
        voicerss_configured=container.provider_configs["voicerss"].has_keys,
    )
    yield
    await container.close()
    logger.info("application_shutdown")


def create_app(
    settings: Settings | None = None,
    *,
    http_client: httpx.AsyncClient | None = None,
    rng: random.Random | None = None,
) -> FastAPI:
    """Application factory — creates a fully configured FastAPI instance."""
    settings = settings or get_settings()

    app = FastAPI(
        title="keyrelay",
        description=(
            "Serverless relay for generative-AI and text-to-speech providers. "
            "Rotates across a pool of API keys per request and returns the "
            "first successful provider result."
        ),
        version="0.1.0",
        docs_url="/docs",
        redoc_url=None,
        openapi_url="/openapi.json",
        default_response_class=ORJSONResponse,
        lifespan=lifespan,
    )

    # Settings are read once here and only passed by reference afterwards
    app.state.settings = settings
    app.state.container = build_container(settings, http_client=http_client, rng=rng)

    # ── Middleware (last added = outermost, so the request ID wraps the rest) ──
    cors_origins = settings.cors_origins
    allow_all_origins = "*" in cors_origins

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_all_origins else cors_origins,
        allow_credentials=not allow_all_origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )
    if settings.prometheus_enabled:
        app.add_middleware(MetricsMiddleware)
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(RequestIdMiddleware)

    # ── Exception handlers ───────────────────────────────────
    register_exception_handlers(app)

    # ── REST routers ─────────────────────────────────────────
    api_prefix = "/api"
    app.include_router(health_router, prefix=api_prefix)
    app.include_router(generate_router, prefix=api_prefix)

    return app


# Uvicorn entry-point
app = create_app()
