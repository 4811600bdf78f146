"""Dependency injection container — wires adapters to ports.

Everything is built once in ``build_container`` from an explicit
``Settings`` object and parked on ``app.state``.  FastAPI's ``Depends()``
factories below only read it back, so tests can hand ``create_app`` any
settings and HTTP client they like.
"""

from __future__ import annotations

import random
from dataclasses import dataclass

import httpx
from fastapi import Request

from keyrelay.adapters.outbound.providers import (
    GEMINI,
    VOICERSS,
    GeminiProviderAdapter,
    VoiceRSSAdapter,
    build_provider_configs,
)
from keyrelay.application.services import GenerationService
from keyrelay.config import Settings
from keyrelay.shared.providers.types import ProviderConfig


@dataclass
class Container:
    settings: Settings
    http_client: httpx.AsyncClient
    provider_configs: dict[str, ProviderConfig]
    generation_service: GenerationService

    async def close(self) -> None:
        await self.http_client.aclose()


def build_container(
    settings: Settings,
    *,
    http_client: httpx.AsyncClient | None = None,
    rng: random.Random | None = None,
) -> Container:
    client = http_client or httpx.AsyncClient(timeout=settings.provider_timeout_seconds)
    configs = build_provider_configs(settings)
    service = GenerationService(
        gemini_config=configs[GEMINI],
        gemini=GeminiProviderAdapter(configs[GEMINI], client),
        speech=VoiceRSSAdapter(configs[VOICERSS], client),
        rng=rng,
    )
    return Container(
        settings=settings,
        http_client=client,
        provider_configs=configs,
        generation_service=service,
    )


# ── Request-scoped accessors ─────────────────────────────────
def get_container(request: Request) -> Container:
    return request.app.state.container  # type: ignore[no-any-return]


def get_settings_dep(request: Request) -> Settings:
    return get_container(request).settings


def get_provider_configs(request: Request) -> dict[str, ProviderConfig]:
    return get_container(request).provider_configs


def get_generation_service(request: Request) -> GenerationService:
    return get_container(request).generation_service
