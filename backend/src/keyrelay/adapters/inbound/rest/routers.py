"""Health, Metrics, Generate — REST routers."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from keyrelay.adapters.outbound.providers import GEMINI, VOICERSS
from keyrelay.application.dtos import ErrorResponse, GenerateRequest, HealthResponse
from keyrelay.application.services import GenerationService
from keyrelay.config import Settings
from keyrelay.dependencies import get_generation_service, get_provider_configs, get_settings_dep
from keyrelay.shared.providers.types import ProviderConfig


# ═══════════════════════════════════════════════════════════════
#  Health
# ═══════════════════════════════════════════════════════════════
health_router = APIRouter(tags=["Health"])


@health_router.get("/health", response_model=HealthResponse)
async def health_check(
    settings: Settings = Depends(get_settings_dep),
    configs: dict[str, ProviderConfig] = Depends(get_provider_configs),
) -> HealthResponse:
    """Report how many keys each provider has, never the keys themselves."""
    gemini_keys = configs[GEMINI].key_count
    voicerss_ready = configs[VOICERSS].has_keys
    return HealthResponse(
        status="ok" if gemini_keys and voicerss_ready else "degraded",
        environment=settings.app_env.value,
        providers={GEMINI: gemini_keys, VOICERSS: voicerss_ready},
    )


@health_router.get("/metrics")
async def prometheus_metrics() -> Response:
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST,
    )


# ═══════════════════════════════════════════════════════════════
#  Generate
# ═══════════════════════════════════════════════════════════════
generate_router = APIRouter(tags=["Generate"])


@generate_router.post(
    "/generate",
    responses={
        400: {"model": ErrorResponse},
        405: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
    },
)
async def generate(
    body: GenerateRequest,
    service: GenerationService = Depends(get_generation_service),
) -> dict[str, Any]:
    return await service.handle(body)
